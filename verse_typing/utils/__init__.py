"""Utility helpers package."""

from verse_typing.utils.exceptions import (
    BackfillError,
    DatabaseError,
    NotFoundError,
    ValidationError,
    VerseTypingException,
)

__all__ = [
    "BackfillError",
    "DatabaseError",
    "NotFoundError",
    "ValidationError",
    "VerseTypingException",
]
