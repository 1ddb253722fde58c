from sqlalchemy import CheckConstraint, ForeignKey, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from hallpass.db.base import Base
from hallpass.models.common import CreatedAtMixin, UUIDPrimaryKeyMixin


class PointRecord(UUIDPrimaryKeyMixin, CreatedAtMixin, Base):
    """One behavior award to one student. Rows are inserted and bulk-deleted, never updated."""

    __tablename__ = "point_records"
    __table_args__ = (
        CheckConstraint("points <> 0", name="ck_point_records_points_nonzero"),
        Index("ix_point_records_student_class", "student_id", "class_id"),
        Index("ix_point_records_class_created", "class_id", "created_at"),
    )

    student_id: Mapped[str] = mapped_column(String(36), ForeignKey("students.id", ondelete="CASCADE"), nullable=False)
    class_id: Mapped[str] = mapped_column(String(36), ForeignKey("classrooms.id", ondelete="CASCADE"), nullable=False)
    # snapshot of the catalog behavior at award time
    behavior_id: Mapped[str] = mapped_column(String(64), nullable=False)
    behavior_name: Mapped[str] = mapped_column(String(128), nullable=False)
    points: Mapped[int] = mapped_column(Integer, nullable=False)
    note: Mapped[str | None] = mapped_column(String(512), nullable=True)
    awarded_by: Mapped[str] = mapped_column(String(36), ForeignKey("staff.id", ondelete="RESTRICT"), nullable=False)
    awarded_by_name: Mapped[str] = mapped_column(String(128), nullable=False)

    student = relationship("Student", back_populates="point_records")
    classroom = relationship("Classroom", back_populates="point_records")
    awarded_by_staff = relationship("Staff", back_populates="point_records")

    @property
    def is_positive(self) -> bool:
        return self.points > 0
