"""UTC normalisation shared by schemas, services and aggregators."""
from __future__ import annotations

from datetime import date, datetime, timezone


def as_utc(moment: datetime) -> datetime:
    """Return ``moment`` as an aware UTC datetime; naive values are taken as UTC."""

    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc)


def activity_day(timestamp: date | datetime) -> date:
    """Return the UTC calendar day a timestamp belongs to."""

    if isinstance(timestamp, datetime):
        return as_utc(timestamp).date()
    return timestamp


__all__ = ["as_utc", "activity_day"]
