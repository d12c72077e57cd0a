"""Celery application instance and configuration."""
from __future__ import annotations

from celery import Celery

from verse_typing.config import settings


def _resolve_broker_url() -> str:
    if settings.CELERY_BROKER_URL is not None:
        return str(settings.CELERY_BROKER_URL)
    return str(settings.REDIS_URL)


def _resolve_result_backend() -> str:
    if settings.CELERY_RESULT_BACKEND is not None:
        return str(settings.CELERY_RESULT_BACKEND)
    return str(settings.REDIS_URL)


celery_app = Celery(
    "verse_typing",
    broker=_resolve_broker_url(),
    backend=_resolve_result_backend(),
    include=["verse_typing.tasks.daily_activity"],
)

celery_app.conf.update(
    task_serializer="json",
    accept_content=["json"],
    result_serializer="json",
    timezone="UTC",
    enable_utc=True,
    task_track_started=True,
    # Full backfills walk every user and can take hours.
    task_time_limit=4 * 60 * 60,
    task_soft_time_limit=4 * 60 * 60 - 300,
    worker_prefetch_multiplier=1,
    worker_max_tasks_per_child=1000,
)

__all__ = ["celery_app"]
