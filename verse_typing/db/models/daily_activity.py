"""Per-user daily typing activity model."""
import uuid
from datetime import datetime, timezone

from sqlalchemy import Column, Date, DateTime, Integer, String, UniqueConstraint
from sqlalchemy.dialects.postgresql import UUID

from verse_typing.db.base import Base
from verse_typing.db.types import StringList


class UserDailyActivity(Base):
    """Running summary of the verses a user typed on one UTC calendar day.

    ``verses_with_stats`` is the shared denominator of the three averages; the
    averages are ``NULL`` exactly when it is zero.
    """

    __tablename__ = "user_daily_activity"
    __table_args__ = (UniqueConstraint("user_id", "day", name="uq_user_daily_activity_user_day"),)

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(String(255), nullable=False, index=True)
    day = Column(Date, nullable=False)

    verse_count = Column(Integer, nullable=False, default=0)
    passages = Column(StringList(), nullable=False, default=list)

    average_wpm = Column(Integer)
    average_accuracy = Column(Integer)
    average_corrected_accuracy = Column(Integer)
    verses_with_stats = Column(Integer, nullable=False, default=0)

    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
