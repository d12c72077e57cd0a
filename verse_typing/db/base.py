"""SQLAlchemy base declarative class."""
from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """Base class for verse typing models."""

    pass
