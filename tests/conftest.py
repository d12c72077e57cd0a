"""Pytest fixtures for service and API tests."""

from collections.abc import Generator
from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from verse_typing.api.deps import get_db
from verse_typing.db import models  # noqa: F401  # Imported for side effects
from verse_typing.db.base import Base
from verse_typing.db.models import TypedVerse, TypingSession, UserDailyActivity
from verse_typing.main import create_app


TABLES = [
    TypingSession.__table__,
    TypedVerse.__table__,
    UserDailyActivity.__table__,
]


@pytest.fixture(scope="session")
def db_engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine, tables=TABLES)
    try:
        yield engine
    finally:
        Base.metadata.drop_all(bind=engine, tables=list(reversed(TABLES)))


@pytest.fixture()
def db_session(db_engine) -> Generator[Session, None, None]:
    TestingSessionLocal = sessionmaker(
        autocommit=False, autoflush=False, expire_on_commit=False, bind=db_engine
    )
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.rollback()
        db.query(TypedVerse).delete()
        db.query(TypingSession).delete()
        db.query(UserDailyActivity).delete()
        db.commit()
        db.close()


@pytest.fixture()
def client(db_session: Session) -> Generator[TestClient, None, None]:
    app = create_app()

    def override_get_db() -> Generator[Session, None, None]:
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client


def _iso(moment: datetime) -> str:
    return moment.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


@pytest.fixture()
def typing_data_factory():
    """Build editor payloads for a verse typed one key at a time.

    ``keys`` defaults to the expected text typed without mistakes. Each key is
    an ``insertText`` action ``step_ms`` after the previous one.
    """

    def build(
        expected: str,
        keys: str | None = None,
        *,
        step_ms: int = 500,
        start: datetime | None = None,
    ) -> dict:
        typed = expected if keys is None else keys
        moment = start or datetime(2024, 1, 1, tzinfo=timezone.utc)
        actions = []
        for key in typed:
            actions.append({"type": "insertText", "datetime": _iso(moment), "key": key})
            moment += timedelta(milliseconds=step_ms)
        return {
            "userActions": actions,
            "userNodes": [{"type": "word", "letters": list(typed)}],
            "correctNodes": [{"type": "word", "letters": list(expected)}],
        }

    return build
