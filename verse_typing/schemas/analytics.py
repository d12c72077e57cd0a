"""Pydantic models for analytics endpoints."""

from __future__ import annotations

from datetime import date
from typing import Literal

from pydantic import BaseModel, ConfigDict

AnalyticsSource = Literal["daily", "verses"]


class AggregatedStatsRead(BaseModel):
    """Chart bucket with averages over the verses it contains."""

    model_config = ConfigDict(from_attributes=True)

    date: date
    date_label: str
    average_wpm: int | None = None
    average_accuracy: int | None = None
    average_corrected_accuracy: int | None = None
    verses_with_data: int = 0


__all__ = ["AnalyticsSource", "AggregatedStatsRead"]
