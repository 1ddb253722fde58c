from sqlalchemy import ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from hallpass.db.base import Base
from hallpass.models.common import CreatedAtMixin, UUIDPrimaryKeyMixin


class Student(UUIDPrimaryKeyMixin, CreatedAtMixin, Base):
    __tablename__ = "students"

    first_name: Mapped[str] = mapped_column(String(64), nullable=False)
    last_name: Mapped[str] = mapped_column(String(64), nullable=False)
    class_id: Mapped[str] = mapped_column(String(36), ForeignKey("classrooms.id", ondelete="CASCADE"), nullable=False, index=True)

    classroom = relationship("Classroom", back_populates="students")
    point_records = relationship("PointRecord", back_populates="student", cascade="all, delete-orphan")

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"

    @property
    def initials(self) -> str:
        return (self.first_name[:1] + self.last_name[:1]).upper()
