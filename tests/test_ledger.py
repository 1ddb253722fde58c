from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from itertools import permutations

import pytest

from hallpass.services.feed import PointChange
from hallpass.services.ledger import StudentPointsSummary, apply_change, rank, summarize, summarize_class


@dataclass
class _Record:
    id: str
    student_id: str
    class_id: str
    points: int


def _records(*points: int, student_id: str = "s1", class_id: str = "c1") -> list[_Record]:
    return [_Record(f"r{index}", student_id, class_id, value) for index, value in enumerate(points)]


def test_summarize_without_records_is_zero():
    summary = summarize([], "s1", "c1")
    assert summary == StudentPointsSummary("s1", "c1", 0, 0, 0)
    assert summary.record_count == 0


def test_summarize_counts_by_sign():
    summary = summarize(_records(2, -1, 1, -2, 3), "s1", "c1")
    assert summary.total_points == 3
    assert summary.positive_count == 3
    assert summary.negative_count == 2
    assert summary.record_count == 5


def test_summarize_is_order_independent():
    records = _records(2, -1, 1, -2)
    expected = summarize(records, "s1", "c1")
    for ordering in permutations(records):
        assert summarize(ordering, "s1", "c1") == expected


def test_summarize_class_gives_idle_students_zero():
    records = _records(1, 1) + _records(-1, student_id="s2")
    result = summarize_class(records, ["s1", "s2", "s3"], "c1")

    assert result["s1"].total_points == 2
    assert result["s2"].negative_count == 1
    assert result["s3"] == StudentPointsSummary.zero("s3", "c1")


def test_summarize_class_keeps_records_of_unlisted_students():
    result = summarize_class(_records(4, student_id="gone"), ["s1"], "c1")
    assert result["gone"].total_points == 4


def test_incremental_changes_match_full_fold():
    records = _records(2, -1, 3, -2, 1)
    summary = StudentPointsSummary.zero("s1", "c1")
    for record in records:
        summary = apply_change(summary, PointChange("insert", record.id, "s1", "c1", record.points))
    assert summary == summarize(records, "s1", "c1")

    removed, kept = records[:2], records[2:]
    for record in removed:
        summary = apply_change(summary, PointChange("delete", record.id, "s1", "c1", record.points))
    assert summary == summarize(kept, "s1", "c1")


def test_apply_change_ignores_other_students():
    summary = StudentPointsSummary.zero("s1", "c1")
    assert apply_change(summary, PointChange("insert", "r1", "s2", "c1", 5)) is summary
    assert apply_change(summary, PointChange("insert", "r1", "s1", "c2", 5)) is summary


def test_apply_change_rejects_unknown_kind():
    with pytest.raises(ValueError):
        apply_change(StudentPointsSummary.zero("s1", "c1"), PointChange("update", "r1", "s1", "c1", 1))


def test_rank_orders_by_total_then_student_id():
    summaries = [
        StudentPointsSummary("b", "c1", 1),
        StudentPointsSummary("a", "c1", 1),
        StudentPointsSummary("c", "c1", 4),
        StudentPointsSummary("d", "c1", -2),
    ]
    assert [item.student_id for item in rank(summaries)] == ["c", "a", "b", "d"]


@dataclass
class _TimedRecord:
    id: str
    student_id: str
    class_id: str
    points: int
    created_at: datetime


def test_summary_keeps_newest_award_time():
    early = datetime(2026, 9, 1, 8, 0, tzinfo=UTC)
    late = early + timedelta(hours=3)
    records = [
        _TimedRecord("r1", "s1", "c1", 1, late),
        _TimedRecord("r2", "s1", "c1", -1, early),
    ]

    for ordering in permutations(records):
        assert summarize(ordering, "s1", "c1").last_awarded_at == late


def test_award_time_does_not_affect_equality():
    summary = StudentPointsSummary("s1", "c1", 1, 1, 0, last_awarded_at=datetime(2026, 9, 1, tzinfo=UTC))
    assert summary == StudentPointsSummary("s1", "c1", 1, 1, 0)


def test_award_time_follows_changes():
    at = datetime(2026, 9, 2, 10, 15, tzinfo=UTC)
    summary = apply_change(
        StudentPointsSummary.zero("s1", "c1"),
        PointChange("insert", "r1", "s1", "c1", 2, created_at=at),
    )
    assert summary.last_awarded_at == at

    summary = apply_change(summary, PointChange("delete", "r1", "s1", "c1", 2))
    assert summary.record_count == 0
    assert summary.last_awarded_at is None
