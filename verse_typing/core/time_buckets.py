"""Bucket typing stats into day, week or month series for charts."""
from __future__ import annotations

from calendar import monthrange
from collections import defaultdict
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta, timezone
from typing import Any, Iterable, Literal, Sequence, get_args

from verse_typing.core.dates import as_utc
from verse_typing.core.rounding import round_half_up
from verse_typing.core.verse_stats import VerseStatsWithDate

TimeRange = Literal["week", "month", "3months", "year"]
Interval = Literal["daily", "weekly", "monthly"]

TIME_RANGES: tuple[str, ...] = get_args(TimeRange)
INTERVALS: tuple[str, ...] = get_args(Interval)

# Months subtracted from "now" for month based ranges.
_RANGE_MONTHS = {"month": 1, "3months": 3, "year": 12}

_METRICS = ("wpm", "accuracy", "corrected_accuracy")


@dataclass(frozen=True, slots=True)
class TimeWindow:
    start: datetime
    end: datetime

    def __contains__(self, moment: datetime) -> bool:
        return self.start <= moment <= self.end


@dataclass(frozen=True, slots=True)
class AggregatedStats:
    date: date
    date_label: str
    average_wpm: int | None
    average_accuracy: int | None
    average_corrected_accuracy: int | None
    verses_with_data: int


def _to_utc(value: date | datetime) -> datetime:
    if isinstance(value, datetime):
        return as_utc(value)
    return datetime.combine(value, time.min, tzinfo=timezone.utc)


def _start_of_day(moment: datetime) -> datetime:
    return moment.replace(hour=0, minute=0, second=0, microsecond=0)


def _subtract_months(moment: datetime, months: int) -> datetime:
    years, month_index = divmod(moment.month - 1 - months, 12)
    year = moment.year + years
    month = month_index + 1
    day = min(moment.day, monthrange(year, month)[1])
    return moment.replace(year=year, month=month, day=day)


def start_of_week(day: date) -> date:
    """Return the Sunday on or before ``day``."""

    return day - timedelta(days=(day.weekday() + 1) % 7)


def get_time_range_interval(time_range: str, now: datetime | None = None) -> TimeWindow:
    """Return the trailing window for ``time_range`` ending at ``now`` (UTC)."""

    end = _to_utc(now or datetime.now(timezone.utc))
    if time_range == "week":
        return TimeWindow(start=_start_of_day(end - timedelta(days=6)), end=end)
    months = _RANGE_MONTHS.get(time_range)
    if months is None:
        raise ValueError(f"Unsupported time range: {time_range!r}")
    return TimeWindow(start=_start_of_day(_subtract_months(end, months)), end=end)


def get_date_key(value: date | datetime, interval: str) -> str:
    day = _to_utc(value).date()
    if interval == "daily":
        return day.isoformat()
    if interval == "weekly":
        return start_of_week(day).isoformat()
    if interval == "monthly":
        return f"{day:%Y-%m}"
    raise ValueError(f"Unsupported interval: {interval!r}")


def get_date_label(day: date, interval: str) -> str:
    if interval == "monthly":
        return f"{day:%b %Y}"
    return f"{day:%b} {day.day}"


def get_interval_dates(window: TimeWindow, interval: str) -> list[date]:
    """Enumerate the start date of every bucket touching the window."""

    first = window.start.date()
    last = window.end.date()
    if interval == "daily":
        step_days = 1
    elif interval == "weekly":
        first = start_of_week(first)
        step_days = 7
    elif interval == "monthly":
        months: list[date] = []
        current = first.replace(day=1)
        while current <= last:
            months.append(current)
            current = (current + timedelta(days=32)).replace(day=1)
        return months
    else:
        raise ValueError(f"Unsupported interval: {interval!r}")

    dates: list[date] = []
    current = first
    while current <= last:
        dates.append(current)
        current += timedelta(days=step_days)
    return dates


def _mean(values: Sequence[int]) -> int | None:
    if not values:
        return None
    return round_half_up(sum(values), len(values))


def _weighted_mean(pairs: Sequence[tuple[int, int]]) -> int | None:
    total_weight = sum(weight for _, weight in pairs)
    if total_weight <= 0:
        return None
    return round_half_up(sum(value * weight for value, weight in pairs), total_weight)


def aggregate_stats(
    stats: Iterable[VerseStatsWithDate],
    time_range: str,
    interval: str,
    *,
    now: datetime | None = None,
) -> list[AggregatedStats]:
    """Average per-verse stats into every bucket of the window (unweighted)."""

    window = get_time_range_interval(time_range, now)

    grouped: dict[str, list[VerseStatsWithDate]] = defaultdict(list)
    for stat in stats:
        moment = _to_utc(stat.date)
        if moment in window:
            grouped[get_date_key(moment, interval)].append(stat)

    series: list[AggregatedStats] = []
    for day in get_interval_dates(window, interval):
        bucket = grouped.get(get_date_key(day, interval), [])
        series.append(
            AggregatedStats(
                date=day,
                date_label=get_date_label(day, interval),
                average_wpm=_mean([stat.wpm for stat in bucket]),
                average_accuracy=_mean([stat.accuracy for stat in bucket]),
                average_corrected_accuracy=_mean([stat.corrected_accuracy for stat in bucket]),
                verses_with_data=len(bucket),
            )
        )
    return series


def aggregate_daily_activity(
    rows: Iterable[Any],
    time_range: str,
    interval: str,
    *,
    now: datetime | None = None,
) -> list[AggregatedStats]:
    """Fold daily activity rows into buckets, weighting by ``verses_with_stats``.

    Each row already holds an average over a varying number of verses, so a
    plain mean of rows would let a one-verse day count as much as a busy one.
    """

    window = get_time_range_interval(time_range, now)

    grouped: dict[str, list[Any]] = defaultdict(list)
    for row in rows:
        if _to_utc(row.day) in window:
            grouped[get_date_key(row.day, interval)].append(row)

    series: list[AggregatedStats] = []
    for day in get_interval_dates(window, interval):
        bucket = [row for row in grouped.get(get_date_key(day, interval), []) if row.verses_with_stats]
        averages = {
            metric: _weighted_mean(
                [
                    (getattr(row, f"average_{metric}"), row.verses_with_stats)
                    for row in bucket
                    if getattr(row, f"average_{metric}") is not None
                ]
            )
            for metric in _METRICS
        }
        series.append(
            AggregatedStats(
                date=day,
                date_label=get_date_label(day, interval),
                average_wpm=averages["wpm"],
                average_accuracy=averages["accuracy"],
                average_corrected_accuracy=averages["corrected_accuracy"],
                verses_with_data=sum(row.verses_with_stats for row in bucket),
            )
        )
    return series


__all__ = [
    "TimeRange",
    "Interval",
    "TIME_RANGES",
    "INTERVALS",
    "TimeWindow",
    "AggregatedStats",
    "start_of_week",
    "get_time_range_interval",
    "get_date_key",
    "get_date_label",
    "get_interval_dates",
    "aggregate_stats",
    "aggregate_daily_activity",
]
