"""Celery tasks for recomputing the daily activity cache."""
from __future__ import annotations

from datetime import date, datetime, time, timezone

from loguru import logger

from verse_typing.celery_app import celery_app
from verse_typing.db.session import SessionLocal
from verse_typing.services.backfill import DailyActivityBackfill


def _parse_bound(value: str | None, *, end_of_day: bool) -> datetime | None:
    """Parse a ``YYYY-MM-DD`` task argument into an inclusive UTC bound."""

    if not value:
        return None
    day = date.fromisoformat(value)
    return datetime.combine(day, time.max if end_of_day else time.min, tzinfo=timezone.utc)


@celery_app.task(name="verse_typing.tasks.daily_activity.backfill_daily_activity", bind=True)
def backfill_daily_activity(
    self, start_date: str | None = None, end_date: str | None = None
) -> dict[str, int]:
    """Recompute daily activity rows for every user with typing sessions."""

    db = SessionLocal()
    try:
        backfill = DailyActivityBackfill(db)
        report = backfill.backfill_all(
            start=_parse_bound(start_date, end_of_day=False),
            end=_parse_bound(end_date, end_of_day=True),
        )
        return report.as_dict()
    finally:
        db.close()


@celery_app.task(name="verse_typing.tasks.daily_activity.backfill_user_daily_activity")
def backfill_user_daily_activity(
    user_id: str, start_date: str | None = None, end_date: str | None = None
) -> dict[str, str | int]:
    """Recompute daily activity rows for a single user."""

    if not user_id:
        raise ValueError("user_id is required")

    db = SessionLocal()
    try:
        rows = DailyActivityBackfill(db).backfill_user(
            user_id,
            start=_parse_bound(start_date, end_of_day=False),
            end=_parse_bound(end_date, end_of_day=True),
        )
        logger.info("User daily activity backfilled", user_id=user_id, rows=rows)
        return {"user_id": user_id, "rows": rows}
    finally:
        db.close()
