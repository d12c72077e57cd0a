"""API endpoint modules for v1."""

from verse_typing.api.v1.endpoints import analytics, daily_activity, typing_sessions

__all__ = [
    "analytics",
    "daily_activity",
    "typing_sessions",
]
