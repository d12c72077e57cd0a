"""Pydantic models for editor typing payloads and typed verse endpoints."""
from __future__ import annotations

import uuid
from datetime import datetime
from typing import Any, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from verse_typing.core.dates import as_utc
from verse_typing.core.passages import Book
from verse_typing.schemas.daily_activity import DailyActivityRead

ActionType = Literal[
    "insertText",
    "deleteContentBackward",
    "deleteWordBackward",
    "deleteSoftLineBackward",
]


class TypingAction(BaseModel):
    """One editing event recorded by the editor."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    type: ActionType
    timestamp: datetime = Field(..., alias="datetime")
    key: str = ""

    @field_validator("timestamp")
    @classmethod
    def _normalise_timestamp(cls, value: datetime) -> datetime:
        return as_utc(value)


class Word(BaseModel):
    """Tokenized word as a list of letters."""

    model_config = ConfigDict(frozen=True)

    type: str = "word"
    letters: List[str] = Field(default_factory=list)


class TypingData(BaseModel):
    """Raw editor log for a single typed verse."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    user_actions: List[TypingAction] = Field(default_factory=list)
    user_nodes: List[Word] = Field(default_factory=list)
    correct_nodes: List[Word] = Field(default_factory=list)

    @property
    def correct_letters(self) -> list[str]:
        return [letter for node in self.correct_nodes for letter in node.letters]

    @property
    def user_letters(self) -> list[str]:
        return [letter for node in self.user_nodes for letter in node.letters]


class TypingSessionCreate(BaseModel):
    """Payload for opening a typing session."""

    created_at: Optional[datetime] = None


class TypingSessionRead(BaseModel):
    """Typing session representation."""

    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    user_id: str
    created_at: datetime


class TypedVerseCreate(BaseModel):
    """Payload submitted when a verse has been typed."""

    book: Book
    chapter: int = Field(..., ge=1)
    verse: int = Field(..., ge=1)
    translation: str = Field(default="esv", max_length=20)
    # Kept loose so malformed editor logs are stored and simply yield no stats.
    typing_data: Optional[Any] = None


class VerseStatsRead(BaseModel):
    """Derived speed and accuracy for one verse."""

    wpm: int
    accuracy: int = Field(..., ge=0, le=100)
    corrected_accuracy: int = Field(..., ge=0, le=100)


class TypedVerseRecordResponse(BaseModel):
    """Result of recording a typed verse."""

    id: uuid.UUID
    typing_session_id: uuid.UUID
    book: str
    chapter: int
    verse: int
    stats: Optional[VerseStatsRead] = None
    daily_activity: DailyActivityRead


__all__ = [
    "ActionType",
    "TypingAction",
    "Word",
    "TypingData",
    "TypingSessionCreate",
    "TypingSessionRead",
    "TypedVerseCreate",
    "VerseStatsRead",
    "TypedVerseRecordResponse",
]
