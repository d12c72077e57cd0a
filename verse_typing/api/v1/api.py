"""API router for version 1."""
from fastapi import APIRouter

from verse_typing.api.v1.endpoints import analytics, daily_activity, typing_sessions


api_router = APIRouter()
api_router.include_router(typing_sessions.router)
api_router.include_router(daily_activity.router)
api_router.include_router(analytics.router)
