"""Pydantic schemas package."""

from verse_typing.schemas.analytics import AggregatedStatsRead, AnalyticsSource
from verse_typing.schemas.daily_activity import DailyActivityRead, DailyActivityUpsert
from verse_typing.schemas.typing import (
    TypedVerseCreate,
    TypedVerseRecordResponse,
    TypingAction,
    TypingData,
    TypingSessionCreate,
    TypingSessionRead,
    VerseStatsRead,
    Word,
)

__all__ = [
    "AggregatedStatsRead",
    "AnalyticsSource",
    "DailyActivityRead",
    "DailyActivityUpsert",
    "TypedVerseCreate",
    "TypedVerseRecordResponse",
    "TypingAction",
    "TypingData",
    "TypingSessionCreate",
    "TypingSessionRead",
    "VerseStatsRead",
    "Word",
]
