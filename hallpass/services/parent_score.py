"""
Parent communication tone scoring.

Sentiment counts come from the messaging side; this module only turns counts
into a 0-100 score and a coarse hostility level, and applies the admin-CC
rule. Every function here is pure and accepts any integer counts.
"""
from __future__ import annotations

import enum
from datetime import datetime

from hallpass.models.common import utcnow
from hallpass.models.parent_profile import ParentProfile

ADMIN_CC_THRESHOLD = 50.0

_NEGATIVE_KEYWORDS = (
    "angry", "upset", "frustrated", "disappointed", "unacceptable",
    "terrible", "awful", "horrible", "ridiculous", "incompetent",
    "demand", "immediately", "lawsuit", "lawyer", "complaint",
    "furious", "outraged", "disgusted", "appalled", "livid",
    "pathetic", "shameful", "disgrace", "worst", "hate",
    "stupid", "idiot", "useless", "waste", "fail",
    "never", "always wrong", "your fault", "blame",
    "unbelievable", "absurd", "insane", "crazy",
)

_POSITIVE_KEYWORDS = (
    "thank", "thanks", "appreciate", "grateful", "wonderful",
    "great", "excellent", "amazing", "fantastic", "love",
    "happy", "pleased", "delighted", "excited", "proud",
    "helpful", "kind", "caring", "supportive", "awesome",
    "best", "perfect", "beautiful", "lovely", "blessed",
    "impressed", "thrilled", "enjoy", "fun", "glad",
)


class MessageSentiment(str, enum.Enum):
    positive = "positive"
    neutral = "neutral"
    negative = "negative"


class HostilityLevel(str, enum.Enum):
    friendly = "friendly"
    neutral = "neutral"
    concerning = "concerning"
    hostile = "hostile"

    @property
    def severity(self) -> int:
        return _SEVERITY[self]

    @property
    def color(self) -> str:
        return _COLORS[self]


_SEVERITY = {
    HostilityLevel.friendly: 0,
    HostilityLevel.neutral: 1,
    HostilityLevel.concerning: 2,
    HostilityLevel.hostile: 3,
}

_COLORS = {
    HostilityLevel.friendly: "green",
    HostilityLevel.neutral: "blue",
    HostilityLevel.concerning: "orange",
    HostilityLevel.hostile: "red",
}


def analyze_sentiment(text: str) -> MessageSentiment:
    lowered = text.lower()
    negative = sum(1 for keyword in _NEGATIVE_KEYWORDS if keyword in lowered)
    positive = sum(1 for keyword in _POSITIVE_KEYWORDS if keyword in lowered)
    if negative > positive:
        return MessageSentiment.negative
    if positive > negative:
        return MessageSentiment.positive
    return MessageSentiment.neutral


def hostility_score(positive: int, neutral: int, negative: int) -> float:
    """0 is the most hostile, 100 the friendliest; no messages scores 100."""
    positive, neutral, negative = max(positive, 0), max(neutral, 0), max(negative, 0)
    total = positive + neutral + negative
    if total == 0:
        return 100.0
    score = 50.0 + 50.0 * positive / total - 50.0 * negative / total
    return max(0.0, min(100.0, score))


def level_for_score(score: float) -> HostilityLevel:
    if score >= 80:
        return HostilityLevel.friendly
    if score >= 60:
        return HostilityLevel.neutral
    if score >= 40:
        return HostilityLevel.concerning
    return HostilityLevel.hostile


def classify(positive: int, neutral: int, negative: int) -> HostilityLevel:
    return level_for_score(hostility_score(positive, neutral, negative))


def should_cc_admin(score: float, flagged: bool) -> bool:
    return score < ADMIN_CC_THRESHOLD or flagged


def profile_score(profile: ParentProfile) -> float:
    return hostility_score(profile.positive_messages, profile.neutral_messages, profile.negative_messages)


def record_message(profile: ParentProfile, sentiment: MessageSentiment, now: datetime | None = None) -> ParentProfile:
    now = now or utcnow()
    if sentiment is MessageSentiment.positive:
        profile.positive_messages += 1
    elif sentiment is MessageSentiment.negative:
        profile.negative_messages += 1
    else:
        profile.neutral_messages += 1

    if profile_score(profile) < ADMIN_CC_THRESHOLD and not profile.admin_cc_enabled:
        profile.admin_cc_enabled = True
        profile.admin_cc_enabled_at = now
    profile.updated_at = now
    return profile


def flag_profile(profile: ParentProfile, staff_id: str, reason: str, now: datetime | None = None) -> ParentProfile:
    now = now or utcnow()
    profile.is_flagged = True
    profile.flagged_by_staff_id = staff_id
    profile.flag_reason = reason
    profile.flagged_at = now
    profile.updated_at = now
    return profile


def unflag_profile(profile: ParentProfile, now: datetime | None = None) -> ParentProfile:
    profile.is_flagged = False
    profile.flagged_by_staff_id = None
    profile.flag_reason = None
    profile.flagged_at = None
    profile.updated_at = now or utcnow()
    return profile
