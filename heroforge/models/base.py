"""
Shared SQLAlchemy DeclarativeBase for all models.

All models MUST use this shared Base class so SQLAlchemy can resolve
string references in relationships.
"""

from datetime import UTC, datetime

from sqlalchemy.orm import DeclarativeBase

from ..metadata import metadata


def utc_now() -> datetime:
    """Naive UTC timestamp, the form persisted in every DateTime column."""
    return datetime.now(UTC).replace(tzinfo=None)


class Base(DeclarativeBase):
    """Shared declarative base for all HeroForge models."""

    metadata = metadata
