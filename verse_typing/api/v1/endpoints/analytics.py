"""Analytics endpoints for typing progress charts."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query

from verse_typing.api import deps
from verse_typing.core.time_buckets import Interval, TimeRange
from verse_typing.schemas import AggregatedStatsRead, AnalyticsSource
from verse_typing.services.analytics import AnalyticsService


router = APIRouter(prefix="/users/{user_id}/analytics", tags=["analytics"])


@router.get("/wpm", response_model=list[AggregatedStatsRead])
def read_wpm_series(
    *,
    user_id: str,
    time_range: TimeRange = Query("month"),
    interval: Interval = Query("daily"),
    source: AnalyticsSource = Query("daily", description="Daily activity cache or raw verses"),
    tz_offset: int = Query(0, ge=-840, le=840, description="Client getTimezoneOffset() in minutes"),
    service: AnalyticsService = Depends(deps.get_analytics_service),
) -> list[AggregatedStatsRead]:
    """Return bucketed speed and accuracy averages for charts."""

    if source == "verses":
        series = service.get_verse_series(
            user_id=user_id,
            time_range=time_range,
            interval=interval,
            tz_offset_minutes=tz_offset,
        )
    else:
        series = service.get_daily_series(
            user_id=user_id, time_range=time_range, interval=interval
        )
    return [AggregatedStatsRead.model_validate(bucket) for bucket in series]
