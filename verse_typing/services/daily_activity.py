"""Per-user daily activity cache maintained alongside verse submissions."""

from __future__ import annotations

from datetime import date, datetime, timezone
from typing import Any, Iterable, Mapping

from loguru import logger
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy import func, select
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from verse_typing.core.dates import activity_day
from verse_typing.core.passages import Book, format_verse_reference
from verse_typing.core.verse_stats import VerseStats
from verse_typing.db.models.daily_activity import UserDailyActivity
from verse_typing.db.types import append_unique
from verse_typing.schemas.daily_activity import DailyActivityUpsert
from verse_typing.utils.exceptions import DatabaseError, ValidationError

_UPSERT_DIALECTS = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}

_STAT_COLUMNS = (
    ("average_wpm", "wpm"),
    ("average_accuracy", "accuracy"),
    ("average_corrected_accuracy", "corrected_accuracy"),
)

_OVERWRITE_COLUMNS = (
    "verse_count",
    "passages",
    "average_wpm",
    "average_accuracy",
    "average_corrected_accuracy",
    "verses_with_stats",
    "updated_at",
)


def _running_mean(column: Any, counted: Any, value: int) -> Any:
    """SQL for ``round((coalesce(avg, 0) * n + value) / (n + 1))``, ties up."""

    numerator = func.coalesce(column, 0) * counted + value
    denominator = counted + 1
    return (2 * numerator + denominator) // (2 * denominator)


class DailyActivityService:
    """Record, overwrite and read :class:`UserDailyActivity` rows."""

    def __init__(self, db: Session) -> None:
        self.db = db

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------
    def record_activity(
        self,
        *,
        user_id: str,
        timestamp: date | datetime,
        book: Book | str,
        chapter: int,
        verse: int,
        stats: VerseStats | None = None,
    ) -> UserDailyActivity:
        """Fold one typed verse into the user's row for that day.

        Runs as a single ``INSERT ... ON CONFLICT DO UPDATE`` so concurrent
        submissions for the same day serialize in the database: every update
        sees the previously committed counts and averages.
        """

        day = activity_day(timestamp)
        label = format_verse_reference(book, chapter, verse)
        dialect_name = self._dialect_name()
        insert = self._insert_for(dialect_name)
        table = UserDailyActivity.__table__
        now = datetime.now(timezone.utc)

        values: dict[str, Any] = {
            "user_id": user_id,
            "day": day,
            "verse_count": 1,
            "passages": [label],
            "verses_with_stats": 0,
            "updated_at": now,
        }
        updates: dict[str, Any] = {
            "verse_count": table.c.verse_count + 1,
            "passages": append_unique(table.c.passages, label, dialect_name),
            "updated_at": now,
        }

        if stats is not None:
            counted = table.c.verses_with_stats
            for column_name, stat_name in _STAT_COLUMNS:
                value = getattr(stats, stat_name)
                values[column_name] = value
                updates[column_name] = _running_mean(table.c[column_name], counted, value)
            values["verses_with_stats"] = 1
            updates["verses_with_stats"] = counted + 1

        stmt = insert(table).values(**values)
        stmt = stmt.on_conflict_do_update(
            index_elements=[table.c.user_id, table.c.day],
            set_=updates,
        )
        self._execute_and_commit([stmt], context="record daily activity")

        logger.info(
            "Recorded daily activity",
            user_id=user_id,
            day=day.isoformat(),
            passage=label,
            with_stats=stats is not None,
        )
        row = self.get_for_day(user_id=user_id, day=day)
        if row is None:  # pragma: no cover - the upsert above guarantees a row
            raise DatabaseError("Daily activity row missing after upsert", {"user_id": user_id})
        return row

    def batch_upsert(self, rows: Iterable[DailyActivityUpsert | Mapping[str, Any]]) -> int:
        """Overwrite rows with exact values; intended for backfills only.

        Existing rows for the same user and day are replaced, not merged. Do
        not run concurrently with live :meth:`record_activity` calls for the
        same users.
        """

        validated = [self._coerce_upsert(row) for row in rows]
        if not validated:
            return 0

        insert = self._insert_for(self._dialect_name())
        table = UserDailyActivity.__table__
        now = datetime.now(timezone.utc)

        statements = []
        for row in validated:
            stmt = insert(table).values(**row.model_dump(), updated_at=now)
            stmt = stmt.on_conflict_do_update(
                index_elements=[table.c.user_id, table.c.day],
                set_={name: stmt.excluded[name] for name in _OVERWRITE_COLUMNS},
            )
            statements.append(stmt)

        self._execute_and_commit(statements, context="batch upsert daily activity")
        logger.info("Batch upserted daily activity", rows=len(validated))
        return len(validated)

    def get_by_user_id(self, user_id: str) -> list[UserDailyActivity]:
        """Return every row for the user, newest day first."""

        stmt = (
            select(UserDailyActivity)
            .where(UserDailyActivity.user_id == user_id)
            .order_by(UserDailyActivity.day.desc())
            .execution_options(populate_existing=True)
        )
        return list(self.db.scalars(stmt).all())

    def get_for_day(self, *, user_id: str, day: date) -> UserDailyActivity | None:
        """Return the row for a single user and day if present."""

        stmt = (
            select(UserDailyActivity)
            .where(UserDailyActivity.user_id == user_id)
            .where(UserDailyActivity.day == day)
            .execution_options(populate_existing=True)
        )
        return self.db.scalars(stmt).first()

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    def _dialect_name(self) -> str:
        return self.db.get_bind().dialect.name

    @staticmethod
    def _insert_for(dialect_name: str):
        insert = _UPSERT_DIALECTS.get(dialect_name)
        if insert is None:
            raise DatabaseError(
                "Daily activity requires an atomic upsert",
                {"dialect": dialect_name},
            )
        return insert

    @staticmethod
    def _coerce_upsert(row: DailyActivityUpsert | Mapping[str, Any]) -> DailyActivityUpsert:
        if isinstance(row, DailyActivityUpsert):
            return row
        try:
            return DailyActivityUpsert.model_validate(row)
        except PydanticValidationError as exc:
            raise ValidationError(
                "Invalid daily activity row",
                {"errors": exc.errors(include_url=False)},
            ) from exc

    def _execute_and_commit(self, statements: list[Any], *, context: str) -> None:
        try:
            for stmt in statements:
                self.db.execute(stmt)
            self.db.commit()
        except SQLAlchemyError as exc:
            self.db.rollback()
            logger.error(f"Failed to {context}: {exc}")
            raise DatabaseError(f"Failed to {context}", {"error": str(exc)}) from exc


__all__ = ["DailyActivityService", "activity_day"]
