"""Booking model definition."""

from typing import Any, Dict

from sqlalchemy import Column, ForeignKey, Index, Integer, String, UniqueConstraint

from .base import Base, TimestampMixin, isoformat

class Booking(TimestampMixin, Base):
    """
    One person's reservation for one event.

    A booking refers to an event but does not own it. The pair
    (event_id, email) is unique.
    """
    __tablename__ = 'bookings'

    id = Column(Integer, primary_key=True, autoincrement=True)
    event_id = Column(Integer, ForeignKey('events.id', ondelete='CASCADE'), nullable=False)
    email = Column(String(254), nullable=False)

    __table_args__ = (
        Index('ix_bookings_event_id', 'event_id'),
        Index('ix_bookings_email', 'email'),
        UniqueConstraint('event_id', 'email', name='uq_bookings_event_email'),
    )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            'id': self.id,
            'eventId': self.event_id,
            'email': self.email,
            'createdAt': isoformat(self.created_at),
            'updatedAt': isoformat(self.updated_at),
        }

    def __str__(self) -> str:
        return f"Booking(id={self.id}, event_id={self.event_id}, email={self.email})"
