"""Tests for Celery background tasks."""
from __future__ import annotations

from datetime import date, datetime, timezone
from unittest.mock import patch

import pytest
from sqlalchemy.orm import sessionmaker

from verse_typing.db.models import UserDailyActivity
from verse_typing.services.typing_session import TypingSessionService
from verse_typing.tasks.daily_activity import (
    _parse_bound,
    backfill_daily_activity,
    backfill_user_daily_activity,
)


@pytest.fixture()
def task_session_factory(db_session):
    factory = sessionmaker(autocommit=False, autoflush=False, bind=db_session.bind)
    sessions: list = []

    def create_session():
        session = factory()
        sessions.append(session)
        return session

    try:
        yield create_session
    finally:
        for session in sessions:
            session.close()


@pytest.fixture()
def typed_history(db_session, typing_data_factory):
    service = TypingSessionService(db_session)
    for user_id, created_at in (
        ("alice", datetime(2024, 5, 1, 8, 0, tzinfo=timezone.utc)),
        ("alice", datetime(2024, 5, 3, 8, 0, tzinfo=timezone.utc)),
        ("bob", datetime(2024, 5, 2, 8, 0, tzinfo=timezone.utc)),
    ):
        session = service.create_session(user_id=user_id, created_at=created_at)
        service.record_typed_verse(
            session=session,
            book="romans",
            chapter=8,
            verse=28,
            typing_data=typing_data_factory("abcde", step_ms=500),
        )
    db_session.query(UserDailyActivity).delete()
    db_session.commit()


def test_parse_bound_covers_whole_days():
    assert _parse_bound(None, end_of_day=False) is None
    assert _parse_bound("2024-05-02", end_of_day=False) == datetime(2024, 5, 2, tzinfo=timezone.utc)
    end = _parse_bound("2024-05-02", end_of_day=True)
    assert end.date() == date(2024, 5, 2)
    assert (end.hour, end.minute, end.second) == (23, 59, 59)


def test_backfill_daily_activity(db_session, task_session_factory, typed_history):
    with patch("verse_typing.tasks.daily_activity.SessionLocal", side_effect=task_session_factory):
        result = backfill_daily_activity.run()

    assert result == {"total": 2, "processed": 2, "failures": 0, "rows": 3}
    rows = db_session.query(UserDailyActivity).order_by(UserDailyActivity.day).all()
    assert [(row.user_id, row.day) for row in rows] == [
        ("alice", date(2024, 5, 1)),
        ("bob", date(2024, 5, 2)),
        ("alice", date(2024, 5, 3)),
    ]
    assert all(row.average_wpm == 30 for row in rows)


def test_backfill_daily_activity_with_window(db_session, task_session_factory, typed_history):
    with patch("verse_typing.tasks.daily_activity.SessionLocal", side_effect=task_session_factory):
        result = backfill_daily_activity.run("2024-05-02", "2024-05-02")

    assert result["rows"] == 1
    rows = db_session.query(UserDailyActivity).all()
    assert [(row.user_id, row.day) for row in rows] == [("bob", date(2024, 5, 2))]


def test_backfill_user_daily_activity(db_session, task_session_factory, typed_history):
    with patch("verse_typing.tasks.daily_activity.SessionLocal", side_effect=task_session_factory):
        result = backfill_user_daily_activity.run("alice", "2024-05-03")

    assert result == {"user_id": "alice", "rows": 1}
    rows = db_session.query(UserDailyActivity).all()
    assert [(row.user_id, row.day, row.verse_count) for row in rows] == [("alice", date(2024, 5, 3), 1)]


def test_backfill_user_daily_activity_requires_user():
    with pytest.raises(ValueError):
        backfill_user_daily_activity.run("")
