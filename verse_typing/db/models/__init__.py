"""Database models package."""
from verse_typing.db.models.daily_activity import UserDailyActivity
from verse_typing.db.models.typing import TypedVerse, TypingSession

__all__ = [
    "TypingSession",
    "TypedVerse",
    "UserDailyActivity",
]
