"""Recompute the daily activity cache from stored typing sessions."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Iterable

from loguru import logger
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from verse_typing.config import settings
from verse_typing.core.dates import activity_day
from verse_typing.core.passages import format_verse_reference, unique_in_order
from verse_typing.core.rounding import round_half_up
from verse_typing.core.verse_stats import VerseStats, calculate_stats_for_verse
from verse_typing.db.models.typing import TypingSession
from verse_typing.schemas.daily_activity import DailyActivityUpsert
from verse_typing.services.daily_activity import DailyActivityService
from verse_typing.services.typing_session import TypingSessionService
from verse_typing.utils.exceptions import BackfillError, DatabaseError, VerseTypingException


@dataclass(slots=True)
class _DayTotals:
    verse_count: int = 0
    passages: list[str] = field(default_factory=list)
    stats: list[VerseStats] = field(default_factory=list)

    def average(self, name: str) -> int | None:
        if not self.stats:
            return None
        return round_half_up(sum(getattr(item, name) for item in self.stats), len(self.stats))


@dataclass(slots=True)
class BackfillReport:
    total_users: int = 0
    processed: int = 0
    failures: int = 0
    rows_written: int = 0

    def as_dict(self) -> dict[str, int]:
        return {
            "total": self.total_users,
            "processed": self.processed,
            "failures": self.failures,
            "rows": self.rows_written,
        }


def build_daily_rows(user_id: str, sessions: Iterable[TypingSession]) -> list[DailyActivityUpsert]:
    """Group a user's typed verses into one exact row per UTC day."""

    days: dict[date, _DayTotals] = {}
    for session in sessions:
        if not session.typed_verses:
            continue
        totals = days.setdefault(activity_day(session.created_at), _DayTotals())
        for typed_verse in session.typed_verses:
            totals.verse_count += 1
            totals.passages.append(
                format_verse_reference(typed_verse.book, typed_verse.chapter, typed_verse.verse)
            )
            stats = calculate_stats_for_verse(typed_verse.typing_data)
            if stats is not None:
                totals.stats.append(stats)

    return [
        DailyActivityUpsert(
            user_id=user_id,
            day=day,
            verse_count=totals.verse_count,
            passages=unique_in_order(totals.passages),
            average_wpm=totals.average("wpm"),
            average_accuracy=totals.average("accuracy"),
            average_corrected_accuracy=totals.average("corrected_accuracy"),
            verses_with_stats=len(totals.stats),
        )
        for day, totals in sorted(days.items())
    ]


class DailyActivityBackfill:
    """Overwrite daily activity rows with values recomputed from history.

    Must run while no live submissions are being recorded for the affected
    users, e.g. during a maintenance window.
    """

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

    def backfill_user(
        self,
        user_id: str,
        *,
        start: datetime | None = None,
        end: datetime | None = None,
    ) -> int:
        """Recompute and overwrite the rows for one user; returns rows written."""

        sessions = self.typing_sessions.list_sessions(user_id=user_id, start=start, end=end)
        rows = build_daily_rows(user_id, sessions)
        if not rows:
            return 0
        try:
            return self.daily_activity.batch_upsert(rows)
        except DatabaseError as exc:
            raise BackfillError(
                "Failed to write recomputed daily activity",
                {"user_id": user_id, "days": len(rows), **exc.details},
            ) from exc

    def backfill_all(
        self,
        *,
        start: datetime | None = None,
        end: datetime | None = None,
    ) -> BackfillReport:
        """Backfill every user with typing sessions, continuing past failures."""

        user_ids = self.typing_sessions.list_user_ids()
        report = BackfillReport(total_users=len(user_ids))
        logger.info(
            "Starting daily activity backfill",
            users=len(user_ids),
            start=start.isoformat() if start else None,
            end=end.isoformat() if end else None,
        )

        for user_id in user_ids:
            try:
                report.rows_written += self.backfill_user(user_id, start=start, end=end)
            except (VerseTypingException, SQLAlchemyError) as exc:
                self.db.rollback()
                report.failures += 1
                logger.warning("Failed to backfill user", user_id=user_id, error=str(exc))
                continue

            report.processed += 1
            if report.processed % settings.BACKFILL_PROGRESS_INTERVAL == 0:
                logger.info(
                    "Daily activity backfill progress",
                    processed=report.processed,
                    total=report.total_users,
                )

        logger.info("Daily activity backfill completed", **report.as_dict())
        return report


__all__ = ["BackfillReport", "DailyActivityBackfill", "build_daily_rows"]
