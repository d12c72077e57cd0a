"""Service layer package."""

from verse_typing.services.analytics import AnalyticsService
from verse_typing.services.backfill import DailyActivityBackfill
from verse_typing.services.daily_activity import DailyActivityService
from verse_typing.services.typing_session import TypingSessionService

__all__ = [
    "AnalyticsService",
    "DailyActivityBackfill",
    "DailyActivityService",
    "TypingSessionService",
]
