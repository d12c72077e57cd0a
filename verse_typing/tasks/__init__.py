"""Celery tasks package."""

from verse_typing.tasks import daily_activity

__all__ = ["daily_activity"]
