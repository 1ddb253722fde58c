from datetime import datetime

from sqlalchemy import Boolean, DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from hallpass.db.base import Base
from hallpass.models.common import CreatedAtMixin, UUIDPrimaryKeyMixin


class ParentProfile(UUIDPrimaryKeyMixin, CreatedAtMixin, Base):
    __tablename__ = "parent_profiles"

    parent_name: Mapped[str] = mapped_column(String(128), nullable=False)
    parent_email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    class_id: Mapped[str] = mapped_column(String(36), ForeignKey("classrooms.id", ondelete="CASCADE"), nullable=False, index=True)

    positive_messages: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    neutral_messages: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    negative_messages: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    is_flagged: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    flagged_by_staff_id: Mapped[str | None] = mapped_column(
        String(36), ForeignKey("staff.id", ondelete="SET NULL"), nullable=True
    )
    flag_reason: Mapped[str | None] = mapped_column(String(512), nullable=True)
    flagged_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    admin_cc_enabled: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    admin_cc_enabled_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    updated_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    @property
    def total_messages(self) -> int:
        return self.positive_messages + self.neutral_messages + self.negative_messages
