from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from hallpass.db.base import Base
from hallpass.models.common import UUIDPrimaryKeyMixin


class Staff(UUIDPrimaryKeyMixin, Base):
    __tablename__ = "staff"

    login: Mapped[str] = mapped_column(String(128), nullable=False, unique=True, index=True)
    display_name: Mapped[str] = mapped_column(String(128), nullable=False)
    email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    password_hash: Mapped[str] = mapped_column(String(512), nullable=False)
    role: Mapped[str] = mapped_column(String(32), nullable=False, default="teacher")  # admin | teacher

    classrooms = relationship("Classroom", back_populates="teacher")
    point_records = relationship("PointRecord", back_populates="awarded_by_staff")

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"
