"""Pydantic models for daily typing activity."""
from __future__ import annotations

from datetime import date, datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from verse_typing.core.dates import activity_day

_AVERAGE_FIELDS = ("average_wpm", "average_accuracy", "average_corrected_accuracy")


class DailyActivityRead(BaseModel):
    """Daily activity row returned to clients."""

    model_config = ConfigDict(from_attributes=True)

    user_id: str
    day: date
    verse_count: int
    passages: List[str] = Field(default_factory=list)
    average_wpm: Optional[int] = None
    average_accuracy: Optional[int] = None
    average_corrected_accuracy: Optional[int] = None
    verses_with_stats: int = 0


class DailyActivityUpsert(BaseModel):
    """Exact values written by a backfill for one user and day."""

    user_id: str = Field(..., min_length=1, max_length=255)
    day: date
    verse_count: int = Field(..., ge=0)
    passages: List[str] = Field(default_factory=list)
    average_wpm: Optional[int] = Field(None, ge=0)
    average_accuracy: Optional[int] = Field(None, ge=0, le=100)
    average_corrected_accuracy: Optional[int] = Field(None, ge=0, le=100)
    verses_with_stats: int = Field(0, ge=0)

    @field_validator("day", mode="before")
    @classmethod
    def _truncate_timestamp(cls, value):
        if isinstance(value, datetime):
            return activity_day(value)
        return value

    @field_validator("passages")
    @classmethod
    def _dedupe_passages(cls, value: List[str]) -> List[str]:
        return list(dict.fromkeys(value))

    @model_validator(mode="after")
    def _check_denominator(self) -> "DailyActivityUpsert":
        if self.verses_with_stats > self.verse_count:
            raise ValueError("verses_with_stats cannot exceed verse_count")
        averages = [getattr(self, name) for name in _AVERAGE_FIELDS]
        if self.verses_with_stats == 0 and any(value is not None for value in averages):
            raise ValueError("averages must be empty when no verse has stats")
        if self.verses_with_stats > 0 and any(value is None for value in averages):
            raise ValueError("averages are required when verses have stats")
        return self


__all__ = ["DailyActivityRead", "DailyActivityUpsert"]
