"""Typing session and typed verse models."""
import uuid
from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String
from sqlalchemy.dialects.postgresql import JSONB, UUID
from sqlalchemy.orm import relationship
from sqlalchemy.types import JSON

from verse_typing.db.base import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class TypingSession(Base):
    """A sitting in which a user typed one or more verses."""

    __tablename__ = "typing_sessions"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(String(255), nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow, onupdate=_utcnow)

    typed_verses = relationship(
        "TypedVerse",
        back_populates="typing_session",
        cascade="all, delete-orphan",
        order_by="TypedVerse.created_at",
    )


class TypedVerse(Base):
    """A single verse submission together with the raw editor log."""

    __tablename__ = "typed_verses"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(String(255), nullable=False, index=True)
    typing_session_id = Column(
        UUID(as_uuid=True),
        ForeignKey("typing_sessions.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    translation = Column(String(20), nullable=False, default="esv")
    book = Column(String(50), nullable=False)
    chapter = Column(Integer, nullable=False)
    verse = Column(Integer, nullable=False)
    # Stored as received from the editor (camelCase keys); validated lazily.
    typing_data = Column(JSONB().with_variant(JSON(), "sqlite"), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)

    typing_session = relationship("TypingSession", back_populates="typed_verses")
