"""Endpoints for typing sessions and verse submissions."""

from __future__ import annotations

import uuid

from fastapi import APIRouter, Depends, status

from verse_typing.api import deps
from verse_typing.schemas import (
    DailyActivityRead,
    TypedVerseCreate,
    TypedVerseRecordResponse,
    TypingSessionCreate,
    TypingSessionRead,
    VerseStatsRead,
)
from verse_typing.services.typing_session import TypingSessionService
from verse_typing.utils.exceptions import (
    DatabaseError,
    NotFoundError,
    handle_database_error,
    handle_not_found_error,
)


router = APIRouter(prefix="/users/{user_id}/typing-sessions", tags=["typing"])


@router.post("", response_model=TypingSessionRead, status_code=status.HTTP_201_CREATED)
def create_typing_session(
    *,
    user_id: str,
    payload: TypingSessionCreate | None = None,
    service: TypingSessionService = Depends(deps.get_typing_session_service),
) -> TypingSessionRead:
    """Open a typing session for the user."""

    created_at = payload.created_at if payload else None
    session = service.create_session(user_id=user_id, created_at=created_at)
    return TypingSessionRead.model_validate(session)


@router.post(
    "/{session_id}/verses",
    response_model=TypedVerseRecordResponse,
    status_code=status.HTTP_201_CREATED,
)
def record_typed_verse(
    *,
    user_id: str,
    session_id: uuid.UUID,
    payload: TypedVerseCreate,
    service: TypingSessionService = Depends(deps.get_typing_session_service),
) -> TypedVerseRecordResponse:
    """Store a typed verse and update the user's daily activity."""

    try:
        session = service.get_session(session_id)
        if session is None or session.user_id != user_id:
            raise NotFoundError("Typing session not found", {"session_id": str(session_id)})
        recorded = service.record_typed_verse(
            session=session,
            book=payload.book,
            chapter=payload.chapter,
            verse=payload.verse,
            translation=payload.translation,
            typing_data=payload.typing_data,
        )
    except NotFoundError as exc:
        raise handle_not_found_error(exc) from exc
    except DatabaseError as exc:
        raise handle_database_error(exc) from exc

    typed_verse = recorded.typed_verse
    stats = recorded.stats
    return TypedVerseRecordResponse(
        id=typed_verse.id,
        typing_session_id=typed_verse.typing_session_id,
        book=typed_verse.book,
        chapter=typed_verse.chapter,
        verse=typed_verse.verse,
        stats=(
            VerseStatsRead(
                wpm=stats.wpm,
                accuracy=stats.accuracy,
                corrected_accuracy=stats.corrected_accuracy,
            )
            if stats
            else None
        ),
        daily_activity=DailyActivityRead.model_validate(recorded.daily_activity),
    )
