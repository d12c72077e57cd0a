"""Daily activity log endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from verse_typing.api import deps
from verse_typing.schemas import DailyActivityRead
from verse_typing.services.daily_activity import DailyActivityService


router = APIRouter(prefix="/users/{user_id}/daily-activity", tags=["daily-activity"])


@router.get("", response_model=list[DailyActivityRead])
def read_daily_activity(
    *,
    user_id: str,
    service: DailyActivityService = Depends(deps.get_daily_activity_service),
) -> list[DailyActivityRead]:
    """Return the user's daily activity, newest day first."""

    return [DailyActivityRead.model_validate(row) for row in service.get_by_user_id(user_id)]
