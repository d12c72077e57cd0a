"""Shared API dependencies."""
from __future__ import annotations

from fastapi import Depends
from sqlalchemy.orm import Session

from verse_typing.db.session import SessionLocal
from verse_typing.services.analytics import AnalyticsService
from verse_typing.services.daily_activity import DailyActivityService
from verse_typing.services.typing_session import TypingSessionService


def get_db() -> Session:
    """Yield a database session for request lifetime."""

    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_daily_activity_service(db: Session = Depends(get_db)) -> DailyActivityService:
    return DailyActivityService(db)


def get_typing_session_service(
    db: Session = Depends(get_db),
    daily_activity: DailyActivityService = Depends(get_daily_activity_service),
) -> TypingSessionService:
    """Assemble the typing session service with request-scoped dependencies."""

    return TypingSessionService(db, daily_activity=daily_activity)


def get_analytics_service(
    db: Session = Depends(get_db),
    daily_activity: DailyActivityService = Depends(get_daily_activity_service),
    typing_sessions: TypingSessionService = Depends(get_typing_session_service),
) -> AnalyticsService:
    return AnalyticsService(db, daily_activity=daily_activity, typing_sessions=typing_sessions)
