"""
Award, reset and read behavior points.

Multi-student awards are a best-effort fan-out: every student gets its own
insert and commit, so a failure for one student leaves the records already
created for the others in place. The caller gets both lists back and may
re-invoke the award for the failed subset.

Summaries are always folded from the rows that currently exist.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterable

from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from hallpass.core.errors import AwardValidationError, NotFoundError, StoreError, StudentNotInClassError
from hallpass.models.classroom import Classroom
from hallpass.models.point_record import PointRecord
from hallpass.models.staff import Staff
from hallpass.models.student import Student
from hallpass.services.catalog import Behavior, BehaviorCatalog
from hallpass.services.feed import PointChange, PointsFeed
from hallpass.services.ledger import StudentPointsSummary, rank, summarize, summarize_class
from hallpass.services.push import PushService

logger = logging.getLogger(__name__)


@dataclass
class AwardFailure:
    student_id: str
    reason: str


@dataclass
class AwardResult:
    behavior: Behavior
    created: list[PointRecord] = field(default_factory=list)
    failed: list[AwardFailure] = field(default_factory=list)

    @property
    def succeeded_ids(self) -> list[str]:
        return [record.student_id for record in self.created]

    @property
    def failed_ids(self) -> list[str]:
        return [failure.student_id for failure in self.failed]


@dataclass
class ResetResult:
    student_id: str
    class_id: str
    deleted: int
    summary: StudentPointsSummary


def _insert_change(record: PointRecord) -> PointChange:
    return PointChange(
        kind="insert",
        record_id=record.id,
        student_id=record.student_id,
        class_id=record.class_id,
        points=record.points,
        behavior_id=record.behavior_id,
        behavior_name=record.behavior_name,
        note=record.note,
        awarded_by_name=record.awarded_by_name,
        created_at=record.created_at,
    )


class PointsService:
    def __init__(self, catalog: BehaviorCatalog, feed: PointsFeed, push: PushService | None = None):
        self.catalog = catalog
        self.feed = feed
        self.push = push

    # --- award -----------------------------------------------------------

    def resolve_behavior(self, behavior_id: str) -> Behavior:
        behavior = self.catalog.get(behavior_id)
        if behavior is None:
            raise AwardValidationError(
                f"Unknown behavior {behavior_id!r}",
                details={"behavior_id": behavior_id},
            )
        return behavior

    def award(
        self,
        db: Session,
        student_ids: Iterable[str],
        class_id: str,
        behavior_id: str,
        actor: Staff,
        note: str | None = None,
    ) -> AwardResult:
        unique_ids = sorted({student_id for student_id in student_ids if student_id})
        if not unique_ids:
            raise AwardValidationError("At least one student is required", details={"student_ids": []})
        behavior = self.resolve_behavior(behavior_id)
        self._require_class(db, class_id)

        result = AwardResult(behavior=behavior)
        for student_id in unique_ids:
            try:
                record = self._create_record(db, student_id, class_id, behavior, actor, note)
            except StudentNotInClassError as exc:
                result.failed.append(AwardFailure(student_id=student_id, reason=exc.message))
                continue
            except SQLAlchemyError as exc:
                db.rollback()
                logger.warning("Point record insert failed for student %s class %s: %s", student_id, class_id, exc)
                result.failed.append(AwardFailure(student_id=student_id, reason="Could not save point record"))
                continue
            result.created.append(record)

        logger.info(
            "Awarded %s (%+d) in class %s by %s: created=%d failed=%d",
            behavior.id,
            behavior.points,
            class_id,
            actor.id,
            len(result.created),
            len(result.failed),
        )

        self.feed.publish_many(_insert_change(record) for record in result.created)
        self._notify(db, result.created)
        return result

    def _create_record(
        self,
        db: Session,
        student_id: str,
        class_id: str,
        behavior: Behavior,
        actor: Staff,
        note: str | None,
    ) -> PointRecord:
        student = db.get(Student, student_id)
        if student is None or student.class_id != class_id:
            raise StudentNotInClassError(student_id, class_id)

        record = PointRecord(
            student_id=student_id,
            class_id=class_id,
            behavior_id=behavior.id,
            behavior_name=behavior.name,
            points=behavior.points,
            note=note,
            awarded_by=actor.id,
            awarded_by_name=actor.display_name,
        )
        db.add(record)
        db.commit()
        db.refresh(record)
        return record

    def _notify(self, db: Session, records: list[PointRecord]) -> None:
        """Push each created record. The records are already committed, so a
        store error here is logged and never turns the award into a failure."""
        if self.push is None:
            return
        for record in records:
            try:
                student = db.get(Student, record.student_id)
                self.push.send_points_awarded(record, student.full_name if student else None, db)
            except SQLAlchemyError as exc:
                db.rollback()
                logger.warning("Push skipped for record %s student %s: %s", record.id, record.student_id, exc)

    # --- reset -----------------------------------------------------------

    def reset(self, db: Session, student_id: str, class_id: str) -> ResetResult:
        """Delete every point record of the student in the class. Irreversible."""
        self._require_class(db, class_id)
        try:
            removed = db.execute(
                delete(PointRecord)
                .where(PointRecord.student_id == student_id, PointRecord.class_id == class_id)
                .returning(PointRecord.id, PointRecord.points, PointRecord.behavior_id, PointRecord.behavior_name)
            ).all()
            db.commit()
        except SQLAlchemyError as exc:
            db.rollback()
            logger.warning("Reset failed for student %s class %s: %s", student_id, class_id, exc)
            raise StoreError(
                "Could not reset points",
                details={"student_id": student_id, "class_id": class_id},
            ) from exc

        self.feed.publish_many(
            PointChange(
                kind="delete",
                record_id=row.id,
                student_id=student_id,
                class_id=class_id,
                points=row.points,
                behavior_id=row.behavior_id,
                behavior_name=row.behavior_name,
            )
            for row in removed
        )
        logger.info("Reset points for student %s in class %s: deleted=%d", student_id, class_id, len(removed))
        return ResetResult(
            student_id=student_id,
            class_id=class_id,
            deleted=len(removed),
            summary=self.student_summary(db, student_id, class_id),
        )

    # --- queries ---------------------------------------------------------

    def student_history(
        self,
        db: Session,
        student_id: str,
        class_id: str | None = None,
        limit: int | None = None,
    ) -> list[PointRecord]:
        stmt = select(PointRecord).where(PointRecord.student_id == student_id)
        if class_id is not None:
            stmt = stmt.where(PointRecord.class_id == class_id)
        stmt = stmt.order_by(PointRecord.created_at.desc())
        if limit is not None:
            stmt = stmt.limit(limit)
        return list(self._fetch(db, stmt))

    def class_history(self, db: Session, class_id: str, limit: int | None = None) -> list[PointRecord]:
        self._require_class(db, class_id)
        stmt = select(PointRecord).where(PointRecord.class_id == class_id).order_by(PointRecord.created_at.desc())
        if limit is not None:
            stmt = stmt.limit(limit)
        return list(self._fetch(db, stmt))

    def student_summary(self, db: Session, student_id: str, class_id: str) -> StudentPointsSummary:
        records = self.student_history(db, student_id, class_id)
        return summarize(records, student_id, class_id)

    def class_summaries(self, db: Session, class_id: str) -> list[StudentPointsSummary]:
        return rank(self.class_summary_map(db, class_id).values())

    def class_summary_map(self, db: Session, class_id: str) -> dict[str, StudentPointsSummary]:
        student_ids, records = self.load_class_ledger(db, class_id)
        return summarize_class(records, student_ids, class_id)

    def load_class_ledger(self, db: Session, class_id: str) -> tuple[list[str], list[PointRecord]]:
        self._require_class(db, class_id)
        student_ids = list(self._fetch(db, select(Student.id).where(Student.class_id == class_id)))
        records = list(self._fetch(db, select(PointRecord).where(PointRecord.class_id == class_id)))
        return student_ids, records

    # --- helpers ---------------------------------------------------------

    def _require_class(self, db: Session, class_id: str) -> Classroom:
        classroom = db.get(Classroom, class_id)
        if classroom is None:
            raise NotFoundError("Class", class_id)
        return classroom

    def _fetch(self, db: Session, stmt):
        try:
            return db.scalars(stmt).all()
        except SQLAlchemyError as exc:
            raise StoreError("Could not load point records") from exc
