from sqlalchemy import ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from hallpass.db.base import Base
from hallpass.models.common import CreatedAtMixin, UUIDPrimaryKeyMixin


class Classroom(UUIDPrimaryKeyMixin, CreatedAtMixin, Base):
    __tablename__ = "classrooms"

    name: Mapped[str] = mapped_column(String(128), nullable=False)
    grade_level: Mapped[str] = mapped_column(String(32), nullable=False)
    class_code: Mapped[str] = mapped_column(String(16), nullable=False, unique=True, index=True)
    teacher_id: Mapped[str | None] = mapped_column(String(36), ForeignKey("staff.id", ondelete="SET NULL"), nullable=True)

    teacher = relationship("Staff", back_populates="classrooms")
    students = relationship("Student", back_populates="classroom", cascade="all, delete-orphan")
    point_records = relationship("PointRecord", back_populates="classroom", passive_deletes=True)
