from sqlalchemy import ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column

from hallpass.db.base import Base
from hallpass.models.common import CreatedAtMixin, UUIDPrimaryKeyMixin


class Device(UUIDPrimaryKeyMixin, CreatedAtMixin, Base):
    __tablename__ = "devices"

    fcm_token: Mapped[str] = mapped_column(String(1024), nullable=False, unique=True, index=True)
    platform: Mapped[str] = mapped_column(String(32), nullable=False, default="ios")
    # parent device following this student's points
    student_id: Mapped[str | None] = mapped_column(
        String(36), ForeignKey("students.id", ondelete="CASCADE"), nullable=True, index=True
    )
