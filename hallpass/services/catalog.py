"""
Behavior catalog.

A catalog is a fixed value: two ordered tuples of behaviors that teachers can
award. Award handlers receive the catalog through a dependency, so an
alternative catalog can be swapped in without touching global state.
"""
from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Behavior:
    id: str
    name: str
    points: int
    color: str
    icon: str = ""

    def __post_init__(self) -> None:
        if self.points == 0:
            raise ValueError(f"Behavior {self.id!r} must carry a non-zero point value")

    @property
    def is_positive(self) -> bool:
        return self.points > 0


class BehaviorCatalog:
    def __init__(self, positive: tuple[Behavior, ...], negative: tuple[Behavior, ...]):
        for behavior in positive:
            if not behavior.is_positive:
                raise ValueError(f"Behavior {behavior.id!r} is listed as positive but has {behavior.points} points")
        for behavior in negative:
            if behavior.is_positive:
                raise ValueError(f"Behavior {behavior.id!r} is listed as negative but has {behavior.points} points")

        self._positive = tuple(positive)
        self._negative = tuple(negative)
        self._by_id: dict[str, Behavior] = {}
        for behavior in self._positive + self._negative:
            if behavior.id in self._by_id:
                raise ValueError(f"Duplicate behavior id {behavior.id!r}")
            self._by_id[behavior.id] = behavior

    def list_positive(self) -> tuple[Behavior, ...]:
        return self._positive

    def list_negative(self) -> tuple[Behavior, ...]:
        return self._negative

    def all(self) -> tuple[Behavior, ...]:
        return self._positive + self._negative

    def get(self, behavior_id: str) -> Behavior | None:
        return self._by_id.get(behavior_id)

    def __contains__(self, behavior_id: object) -> bool:
        return behavior_id in self._by_id

    def __len__(self) -> int:
        return len(self._by_id)


DEFAULT_CATALOG = BehaviorCatalog(
    positive=(
        Behavior("helping", "Helping Others", 1, "green", "hand.raised.fill"),
        Behavior("teamwork", "Teamwork", 1, "blue", "person.3.fill"),
        Behavior("hardWork", "Hard Work", 1, "yellow", "star.fill"),
        Behavior("participation", "Participation", 1, "purple", "hand.point.up.fill"),
        Behavior("kindness", "Kindness", 1, "pink", "heart.fill"),
        Behavior("onTask", "On Task", 1, "teal", "checkmark.circle.fill"),
        Behavior("listening", "Good Listening", 1, "orange", "ear.fill"),
        Behavior("creativity", "Creativity", 1, "indigo", "paintbrush.fill"),
    ),
    negative=(
        Behavior("offTask", "Off Task", -1, "red", "xmark.circle.fill"),
        Behavior("talking", "Talking Out", -1, "orange", "speaker.wave.2.fill"),
        Behavior("notListening", "Not Listening", -1, "yellow", "ear.trianglebadge.exclamationmark"),
        Behavior("unkind", "Unkind", -1, "red", "heart.slash.fill"),
        Behavior("unprepared", "Unprepared", -1, "orange", "exclamationmark.triangle.fill"),
        Behavior("noHomework", "Missing Homework", -1, "gray", "doc.fill"),
        Behavior("notFollowingDirections", "Not Following Directions", -1, "red", "arrow.uturn.left"),
        Behavior("disruptive", "Disrupting Class", -2, "red", "exclamationmark.bubble.fill"),
    ),
)
