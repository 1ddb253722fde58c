"""
Points ledger aggregation.

Summaries are never stored: they are folded from the point records of a
(student, class) pair. The fold only adds and counts, so the order of
records does not matter, and the incremental path (`apply_change`) lands on
the same value as a full recomputation over the same record set.

`last_awarded_at` is the creation time of the newest folded record. A delete
cannot bring back an older timestamp, so it only clears the value once no
records remain, and the field takes no part in summary equality.
"""
from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import TYPE_CHECKING, Iterable, Protocol

if TYPE_CHECKING:
    from hallpass.services.feed import PointChange


class PointsLike(Protocol):
    student_id: str
    class_id: str
    points: int


@dataclass(frozen=True)
class StudentPointsSummary:
    student_id: str
    class_id: str
    total_points: int = 0
    positive_count: int = 0
    negative_count: int = 0
    # newest award folded in; informational, left out of equality
    last_awarded_at: datetime | None = field(default=None, compare=False)

    @classmethod
    def zero(cls, student_id: str, class_id: str) -> "StudentPointsSummary":
        return cls(student_id=student_id, class_id=class_id)

    @property
    def record_count(self) -> int:
        return self.positive_count + self.negative_count

    def add(self, points: int, awarded_at: datetime | None = None) -> "StudentPointsSummary":
        summary = self._shift(points, step=1)
        if awarded_at is not None and summary is not self:
            if summary.last_awarded_at is None or awarded_at > summary.last_awarded_at:
                summary = replace(summary, last_awarded_at=awarded_at)
        return summary

    def remove(self, points: int) -> "StudentPointsSummary":
        summary = self._shift(points, step=-1)
        if summary.record_count == 0 and summary.last_awarded_at is not None:
            summary = replace(summary, last_awarded_at=None)
        return summary

    def _shift(self, points: int, step: int) -> "StudentPointsSummary":
        total = self.total_points + points * step
        if points > 0:
            return replace(self, total_points=total, positive_count=self.positive_count + step)
        if points < 0:
            return replace(self, total_points=total, negative_count=self.negative_count + step)
        return self


def summarize(records: Iterable[PointsLike], student_id: str, class_id: str) -> StudentPointsSummary:
    summary = StudentPointsSummary.zero(student_id, class_id)
    for record in records:
        summary = summary.add(record.points, getattr(record, "created_at", None))
    return summary


def summarize_class(
    records: Iterable[PointsLike],
    student_ids: Iterable[str],
    class_id: str,
) -> dict[str, StudentPointsSummary]:
    """Summaries for every known student; students without records get a zero summary.

    Records of students outside `student_ids` still get a summary so that a
    record is never silently dropped from the class view.
    """
    grouped: dict[str, list[PointsLike]] = defaultdict(list)
    for record in records:
        grouped[record.student_id].append(record)

    result = {student_id: StudentPointsSummary.zero(student_id, class_id) for student_id in student_ids}
    for student_id, student_records in grouped.items():
        result[student_id] = summarize(student_records, student_id, class_id)
    return result


def apply_change(summary: StudentPointsSummary, change: "PointChange") -> StudentPointsSummary:
    if change.student_id != summary.student_id or change.class_id != summary.class_id:
        return summary
    if change.kind == "insert":
        return summary.add(change.points, change.created_at)
    if change.kind == "delete":
        return summary.remove(change.points)
    raise ValueError(f"Unknown change kind {change.kind!r}")


def rank(summaries: Iterable[StudentPointsSummary]) -> list[StudentPointsSummary]:
    return sorted(summaries, key=lambda item: (-item.total_points, item.student_id))
