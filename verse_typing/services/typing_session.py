"""Typing sessions, verse submissions and per-verse stats."""

from __future__ import annotations

import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any

from loguru import logger
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, selectinload

from verse_typing.core.dates import as_utc
from verse_typing.core.passages import Book
from verse_typing.core.verse_stats import VerseStats, VerseStatsWithDate, calculate_stats_for_verse
from verse_typing.db.models.daily_activity import UserDailyActivity
from verse_typing.db.models.typing import TypedVerse, TypingSession
from verse_typing.services.daily_activity import DailyActivityService
from verse_typing.utils.exceptions import DatabaseError, VerseTypingException


@dataclass(slots=True)
class RecordedVerse:
    """Outcome of a verse submission."""

    typed_verse: TypedVerse
    stats: VerseStats | None
    daily_activity: UserDailyActivity


def _typing_data_payload(typing_data: Any) -> Any:
    if hasattr(typing_data, "model_dump"):
        return typing_data.model_dump(mode="json", by_alias=True)
    return typing_data


class TypingSessionService:
    """Persist typed verses and keep the daily activity cache in step."""

    def __init__(self, db: Session, *, daily_activity: DailyActivityService | None = None) -> None:
        self.db = db
        self.daily_activity = daily_activity or DailyActivityService(db)

    def create_session(self, *, user_id: str, created_at: datetime | None = None) -> TypingSession:
        """Open a new typing session for the user."""

        session = TypingSession(
            user_id=user_id,
            created_at=as_utc(created_at) if created_at else datetime.now(timezone.utc),
        )
        self.db.add(session)
        self.db.commit()
        self.db.refresh(session)
        return session

    def get_session(self, session_id: uuid.UUID) -> TypingSession | None:
        return self.db.get(TypingSession, session_id)

    def record_typed_verse(
        self,
        *,
        session: TypingSession,
        book: Book | str,
        chapter: int,
        verse: int,
        translation: str = "esv",
        typing_data: Any = None,
    ) -> RecordedVerse:
        """Store a typed verse and fold its stats into the session's day."""

        book_key = book.value if isinstance(book, Book) else book
        user_id = session.user_id
        session_start = as_utc(session.created_at)
        typed_verse = TypedVerse(
            user_id=user_id,
            typing_session_id=session.id,
            translation=translation,
            book=book_key,
            chapter=chapter,
            verse=verse,
            typing_data=_typing_data_payload(typing_data),
            created_at=datetime.now(timezone.utc),
        )

        stats = calculate_stats_for_verse(typed_verse.typing_data)
        if stats is None and typed_verse.typing_data is not None:
            logger.debug("Typed verse produced no stats", user_id=user_id, book=book_key)

        # Flushed only; record_activity commits the verse with its daily row.
        try:
            self.db.add(typed_verse)
            self.db.flush()
            daily_activity = self.daily_activity.record_activity(
                user_id=user_id,
                timestamp=session_start,
                book=book_key,
                chapter=chapter,
                verse=verse,
                stats=stats,
            )
        except SQLAlchemyError as exc:
            self.db.rollback()
            logger.error(f"Failed to store typed verse: {exc}")
            raise DatabaseError("Failed to store typed verse", {"error": str(exc)}) from exc
        except VerseTypingException:
            self.db.rollback()
            raise
        return RecordedVerse(typed_verse=typed_verse, stats=stats, daily_activity=daily_activity)

    def list_sessions(
        self,
        *,
        user_id: str,
        start: datetime | None = None,
        end: datetime | None = None,
    ) -> list[TypingSession]:
        """Return the user's sessions with their verses, oldest first."""

        stmt = (
            select(TypingSession)
            .where(TypingSession.user_id == user_id)
            .options(selectinload(TypingSession.typed_verses))
            .order_by(TypingSession.created_at)
        )
        if start is not None:
            stmt = stmt.where(TypingSession.created_at >= start)
        if end is not None:
            stmt = stmt.where(TypingSession.created_at <= end)
        return list(self.db.scalars(stmt).all())

    def list_user_ids(self) -> list[str]:
        """Return every user that has at least one typing session."""

        stmt = select(TypingSession.user_id).distinct().order_by(TypingSession.user_id)
        return list(self.db.scalars(stmt).all())

    def get_all_verse_stats(
        self,
        *,
        user_id: str,
        tz_offset_minutes: int = 0,
        start: datetime | None = None,
    ) -> list[VerseStatsWithDate]:
        """Return stats for every verse with usable typing data.

        ``tz_offset_minutes`` follows the browser ``getTimezoneOffset``
        convention (minutes behind UTC) and shifts each date into the
        client's wall clock so day buckets line up with the user's calendar.
        """

        shift = timedelta(minutes=tz_offset_minutes)
        all_stats: list[VerseStatsWithDate] = []
        for session in self.list_sessions(user_id=user_id, start=start):
            session_date = as_utc(session.created_at) - shift
            for typed_verse in session.typed_verses:
                if not typed_verse.typing_data:
                    continue
                stats = calculate_stats_for_verse(typed_verse.typing_data)
                if stats is None:
                    continue
                all_stats.append(
                    VerseStatsWithDate(
                        wpm=stats.wpm,
                        accuracy=stats.accuracy,
                        corrected_accuracy=stats.corrected_accuracy,
                        date=session_date,
                    )
                )
        return all_stats


__all__ = ["RecordedVerse", "TypingSessionService"]
