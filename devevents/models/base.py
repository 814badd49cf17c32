"""Declarative base and shared columns for all models."""

from datetime import datetime, timezone

from sqlalchemy import Column, DateTime
from sqlalchemy.orm import declarative_base

Base = declarative_base()

def utcnow() -> datetime:
    """Timezone-aware current time in UTC."""
    return datetime.now(timezone.utc)

class TimestampMixin:
    """System-assigned creation and modification timestamps."""

    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)

def isoformat(value):
    """Serialize a timestamp column for API output."""
    return value.isoformat() if value is not None else None
