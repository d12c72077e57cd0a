"""Tests for the daily activity cache."""
from __future__ import annotations

import threading
from datetime import date, datetime, timedelta, timezone

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from verse_typing.core.verse_stats import VerseStats
from verse_typing.db.base import Base
from verse_typing.db.models import UserDailyActivity
from verse_typing.schemas.daily_activity import DailyActivityUpsert
from verse_typing.services.daily_activity import DailyActivityService, activity_day
from verse_typing.utils.exceptions import ValidationError

MORNING = datetime(2024, 3, 15, 9, 0, tzinfo=timezone.utc)


@pytest.fixture()
def service(db_session) -> DailyActivityService:
    return DailyActivityService(db_session)


def record(service, *, verse=1, stats=None, timestamp=MORNING, user_id="user-1", book="john", chapter=3):
    return service.record_activity(
        user_id=user_id,
        timestamp=timestamp,
        book=book,
        chapter=chapter,
        verse=verse,
        stats=stats,
    )


def test_activity_day_uses_utc_calendar():
    eastern = timezone(timedelta(hours=-5))

    assert activity_day(datetime(2024, 3, 15, 23, 30, tzinfo=eastern)) == date(2024, 3, 16)
    assert activity_day(datetime(2024, 3, 15, 23, 30)) == date(2024, 3, 15)
    assert activity_day(date(2024, 3, 15)) == date(2024, 3, 15)


def test_first_verse_creates_row(service):
    row = record(service, verse=16, stats=VerseStats(wpm=60, accuracy=95, corrected_accuracy=100))

    assert row.day == date(2024, 3, 15)
    assert row.verse_count == 1
    assert row.passages == ["John 3:16"]
    assert row.average_wpm == 60
    assert row.average_accuracy == 95
    assert row.average_corrected_accuracy == 100
    assert row.verses_with_stats == 1


def test_retyping_a_verse_counts_each_time_but_lists_it_once(service):
    for _ in range(3):
        row = record(service, verse=16)

    assert row.verse_count == 3
    assert row.passages == ["John 3:16"]
    assert row.verses_with_stats == 0
    assert row.average_wpm is None


def test_passages_keep_first_seen_order(service):
    record(service, verse=16)
    record(service, book="1_john", chapter=3, verse=16)
    row = record(service, verse=16)

    assert row.passages == ["John 3:16", "1 John 3:16"]


def test_running_average_matches_mean_of_verses(service):
    first = record(service, stats=VerseStats(wpm=60, accuracy=100, corrected_accuracy=100))
    assert first.average_wpm == 60

    second = record(service, verse=2, stats=VerseStats(wpm=40, accuracy=90, corrected_accuracy=80))
    assert second.average_wpm == 50
    assert second.average_accuracy == 95
    assert second.average_corrected_accuracy == 90

    third = record(service, verse=3, stats=VerseStats(wpm=50, accuracy=95, corrected_accuracy=90))
    assert third.average_wpm == 50
    assert third.average_accuracy == 95
    assert third.average_corrected_accuracy == 90
    assert third.verses_with_stats == 3
    assert third.verse_count == 3


def test_running_average_rounds_half_up(service):
    record(service, stats=VerseStats(wpm=60, accuracy=100, corrected_accuracy=100))
    row = record(service, verse=2, stats=VerseStats(wpm=41, accuracy=99, corrected_accuracy=100))

    assert row.average_wpm == 51
    assert row.average_accuracy == 100


def test_verse_without_stats_leaves_averages_untouched(service):
    record(service, stats=VerseStats(wpm=70, accuracy=90, corrected_accuracy=100))
    row = record(service, verse=2)

    assert row.verse_count == 2
    assert row.verses_with_stats == 1
    assert row.average_wpm == 70
    assert row.average_accuracy == 90
    assert row.passages == ["John 3:1", "John 3:2"]


def test_stats_after_stat_less_verse_start_the_average(service):
    record(service)
    row = record(service, verse=2, stats=VerseStats(wpm=55, accuracy=88, corrected_accuracy=99))

    assert row.verses_with_stats == 1
    assert row.average_wpm == 55
    assert row.average_accuracy == 88


def test_days_and_users_are_separate(service):
    record(service)
    record(service, timestamp=MORNING + timedelta(days=1))
    record(service, user_id="user-2")

    rows = service.get_by_user_id("user-1")

    assert [row.day for row in rows] == [date(2024, 3, 16), date(2024, 3, 15)]
    assert all(row.verse_count == 1 for row in rows)
    assert len(service.get_by_user_id("user-2")) == 1
    assert service.get_by_user_id("nobody") == []


def test_batch_upsert_overwrites_existing_row(service):
    record(service, stats=VerseStats(wpm=90, accuracy=50, corrected_accuracy=50))

    written = service.batch_upsert(
        [
            {
                "user_id": "user-1",
                "day": datetime(2024, 3, 15, 18, 0, tzinfo=timezone.utc),
                "verse_count": 4,
                "passages": ["John 3:16", "John 3:17", "John 3:16"],
                "average_wpm": 42,
                "average_accuracy": 97,
                "average_corrected_accuracy": 99,
                "verses_with_stats": 2,
            },
            DailyActivityUpsert(user_id="user-1", day=date(2024, 3, 14), verse_count=1),
        ]
    )

    assert written == 2
    row = service.get_for_day(user_id="user-1", day=date(2024, 3, 15))
    assert row.verse_count == 4
    assert row.passages == ["John 3:16", "John 3:17"]
    assert row.average_wpm == 42
    assert row.average_accuracy == 97
    assert row.verses_with_stats == 2

    earlier = service.get_for_day(user_id="user-1", day=date(2024, 3, 14))
    assert earlier.verse_count == 1
    assert earlier.average_wpm is None
    assert earlier.passages == []


def test_batch_upsert_with_no_rows_is_a_no_op(service):
    assert service.batch_upsert([]) == 0


@pytest.mark.parametrize(
    "row",
    [
        {"user_id": "user-1", "day": "2024-03-15", "verse_count": 1, "verses_with_stats": 2,
         "average_wpm": 10, "average_accuracy": 10, "average_corrected_accuracy": 10},
        {"user_id": "user-1", "day": "2024-03-15", "verse_count": 1, "average_wpm": 40},
        {"user_id": "user-1", "day": "2024-03-15", "verse_count": 2, "verses_with_stats": 1},
        {"user_id": "user-1", "day": "2024-03-15", "verse_count": 1, "verses_with_stats": 1,
         "average_wpm": 40, "average_accuracy": 140, "average_corrected_accuracy": 90},
    ],
)
def test_batch_upsert_rejects_inconsistent_rows(service, row):
    with pytest.raises(ValidationError):
        service.batch_upsert([row])

    assert service.get_by_user_id("user-1") == []


def test_upsert_row_is_keyed_on_the_utc_day():
    eastern = timezone(timedelta(hours=-5))

    row = DailyActivityUpsert(
        user_id="user-1", day=datetime(2024, 3, 15, 23, 30, tzinfo=eastern), verse_count=1
    )

    assert row.day == date(2024, 3, 16)


def test_batch_upsert_and_record_activity_share_the_day_key(service):
    eastern = timezone(timedelta(hours=-5))
    late_evening = datetime(2024, 3, 15, 23, 30, tzinfo=eastern)

    service.batch_upsert(
        [{"user_id": "user-1", "day": late_evening, "verse_count": 2, "passages": ["John 3:1"]}]
    )
    row = record(service, verse=2, timestamp=late_evening)

    assert row.day == date(2024, 3, 16)
    assert row.verse_count == 3
    assert row.passages == ["John 3:1", "John 3:2"]
    assert len(service.get_by_user_id("user-1")) == 1


def test_concurrent_submissions_for_one_day_are_all_counted(tmp_path):
    engine = create_engine(
        f"sqlite:///{tmp_path / 'activity.db'}",
        connect_args={"check_same_thread": False, "timeout": 30},
    )
    Base.metadata.create_all(bind=engine, tables=[UserDailyActivity.__table__])
    ThreadSession = sessionmaker(autocommit=False, autoflush=False, bind=engine)

    workers = 8
    barrier = threading.Barrier(workers)
    errors: list[Exception] = []

    def submit(verse: int) -> None:
        db = ThreadSession()
        try:
            barrier.wait()
            DailyActivityService(db).record_activity(
                user_id="user-1",
                timestamp=MORNING,
                book="psalm",
                chapter=119,
                verse=verse,
                stats=VerseStats(wpm=50, accuracy=90, corrected_accuracy=100),
            )
        except Exception as exc:
            errors.append(exc)
        finally:
            db.close()

    threads = [threading.Thread(target=submit, args=(verse,)) for verse in range(1, workers + 1)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    db = ThreadSession()
    try:
        assert errors == []
        row = DailyActivityService(db).get_for_day(user_id="user-1", day=date(2024, 3, 15))
        assert row.verse_count == workers
        assert row.verses_with_stats == workers
        assert row.average_wpm == 50
        assert row.average_accuracy == 90
        assert row.average_corrected_accuracy == 100
        assert sorted(row.passages) == sorted(f"Psalm 119:{verse}" for verse in range(1, workers + 1))
    finally:
        db.close()
        engine.dispose()
