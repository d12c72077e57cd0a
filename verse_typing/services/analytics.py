"""Analytics service producing chart series of typing speed and accuracy."""

from __future__ import annotations

from datetime import datetime, timedelta

from sqlalchemy.orm import Session

from verse_typing.core.time_buckets import (
    AggregatedStats,
    aggregate_daily_activity,
    aggregate_stats,
    get_time_range_interval,
)
from verse_typing.services.daily_activity import DailyActivityService
from verse_typing.services.typing_session import TypingSessionService

_ONE_DAY = timedelta(days=1)


class AnalyticsService:
    """Build bucketed WPM/accuracy series for dashboards."""

    def __init__(
        self,
        db: Session,
        *,
        daily_activity: DailyActivityService | None = None,
        typing_sessions: TypingSessionService | None = None,
    ) -> None:
        self.db = db
        self.daily_activity = daily_activity or DailyActivityService(db)
        self.typing_sessions = typing_sessions or TypingSessionService(
            db, daily_activity=self.daily_activity
        )

    def get_daily_series(
        self,
        *,
        user_id: str,
        time_range: str,
        interval: str,
        now: datetime | None = None,
    ) -> list[AggregatedStats]:
        """Return a series built from the daily activity cache."""

        rows = self.daily_activity.get_by_user_id(user_id)
        return aggregate_daily_activity(rows, time_range, interval, now=now)

    def get_verse_series(
        self,
        *,
        user_id: str,
        time_range: str,
        interval: str,
        tz_offset_minutes: int = 0,
        now: datetime | None = None,
    ) -> list[AggregatedStats]:
        """Return a series recomputed from every typed verse in the window."""

        window = get_time_range_interval(time_range, now)
        # Widen by a day so timezone shifted verses near the edge are kept.
        stats = self.typing_sessions.get_all_verse_stats(
            user_id=user_id,
            tz_offset_minutes=tz_offset_minutes,
            start=window.start - _ONE_DAY,
        )
        return aggregate_stats(stats, time_range, interval, now=now)


__all__ = ["AnalyticsService"]
