"""
In-process change feed for point records.

The points service publishes one `PointChange` per inserted or deleted row.
Inserts carry the record snapshot (behavior, note, actor, creation time) so a
subscriber can keep a recent-awards list without re-reading the store.
Subscribers register per class, optionally narrowed to one student, and
receive changes one at a time, in the order they were published. A
subscription stays open until `close()` is called; leaking one only keeps a
callback alive.
"""
from __future__ import annotations

import logging
import threading
from collections import defaultdict
from dataclasses import asdict, dataclass
from datetime import datetime
from typing import Callable, Iterable, Literal

from hallpass.services.ledger import StudentPointsSummary, apply_change, rank, summarize_class

logger = logging.getLogger(__name__)

ChangeKind = Literal["insert", "delete"]


@dataclass(frozen=True)
class PointChange:
    kind: ChangeKind
    record_id: str
    student_id: str
    class_id: str
    points: int
    behavior_id: str | None = None
    behavior_name: str | None = None
    note: str | None = None
    awarded_by_name: str | None = None
    created_at: datetime | None = None

    def to_dict(self) -> dict:
        payload = asdict(self)
        if self.created_at is not None:
            payload["created_at"] = self.created_at.isoformat()
        return payload


ChangeCallback = Callable[[PointChange], None]


class Subscription:
    def __init__(
        self,
        feed: "PointsFeed",
        class_id: str,
        callback: ChangeCallback,
        student_id: str | None = None,
    ):
        self._feed = feed
        self.class_id = class_id
        self.student_id = student_id
        self.callback = callback
        self.closed = False

    def close(self) -> None:
        if self.closed:
            return
        self.closed = True
        self._feed._remove(self)

    def __enter__(self) -> "Subscription":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def accepts(self, change: PointChange) -> bool:
        return self.student_id is None or self.student_id == change.student_id


class PointsFeed:
    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._subscribers: dict[str, list[Subscription]] = defaultdict(list)

    def subscribe(
        self,
        class_id: str,
        callback: ChangeCallback,
        student_id: str | None = None,
    ) -> Subscription:
        subscription = Subscription(self, class_id, callback, student_id=student_id)
        with self._lock:
            self._subscribers[class_id].append(subscription)
        return subscription

    def subscriber_count(self, class_id: str) -> int:
        with self._lock:
            return len(self._subscribers.get(class_id, ()))

    def publish(self, change: PointChange) -> None:
        with self._lock:
            targets = [item for item in self._subscribers.get(change.class_id, ()) if item.accepts(change)]
        for subscription in targets:
            try:
                subscription.callback(change)
            except Exception:
                logger.exception(
                    "Feed subscriber failed for class %s change=%s record=%s",
                    change.class_id,
                    change.kind,
                    change.record_id,
                )

    def publish_many(self, changes: Iterable[PointChange]) -> None:
        for change in changes:
            self.publish(change)

    def _remove(self, subscription: Subscription) -> None:
        with self._lock:
            bucket = self._subscribers.get(subscription.class_id)
            if not bucket:
                return
            if subscription in bucket:
                bucket.remove(subscription)
            if not bucket:
                del self._subscribers[subscription.class_id]


SummaryCallback = Callable[[StudentPointsSummary, PointChange], None]


class SummaryWatcher:
    """Live class summaries: pull through `summaries`, push through `on_change`.

    When built from records, the watcher remembers which record ids are
    already folded in, so a change that raced with the initial load is not
    counted twice.
    """

    def __init__(
        self,
        class_id: str,
        initial: dict[str, StudentPointsSummary],
        known_record_ids: Iterable[str] | None = None,
    ):
        self.class_id = class_id
        self._summaries = dict(initial)
        self._callbacks: list[SummaryCallback] = []
        self._record_ids = set(known_record_ids) if known_record_ids is not None else None

    @classmethod
    def from_records(cls, class_id: str, records: Iterable, student_ids: Iterable[str]) -> "SummaryWatcher":
        records = list(records)
        return cls(
            class_id,
            summarize_class(records, student_ids, class_id),
            known_record_ids=[record.id for record in records],
        )

    @property
    def summaries(self) -> list[StudentPointsSummary]:
        return rank(self._summaries.values())

    def summary(self, student_id: str) -> StudentPointsSummary:
        return self._summaries.get(student_id) or StudentPointsSummary.zero(student_id, self.class_id)

    def on_change(self, callback: SummaryCallback) -> None:
        self._callbacks.append(callback)

    def handle(self, change: PointChange) -> StudentPointsSummary | None:
        if change.class_id != self.class_id:
            return None
        if self._record_ids is not None:
            if change.kind == "insert":
                if change.record_id in self._record_ids:
                    return None
                self._record_ids.add(change.record_id)
            else:
                if change.record_id not in self._record_ids:
                    return None
                self._record_ids.discard(change.record_id)
        updated = apply_change(self.summary(change.student_id), change)
        self._summaries[change.student_id] = updated
        for callback in self._callbacks:
            callback(updated, change)
        return updated

    def attach(self, feed: PointsFeed, student_id: str | None = None) -> Subscription:
        return feed.subscribe(self.class_id, self.handle, student_id=student_id)
