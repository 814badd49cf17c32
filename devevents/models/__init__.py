"""Models package initialization."""

from .base import Base
from .event import Event, EventMode
from .booking import Booking

__all__ = ['Base', 'Event', 'EventMode', 'Booking']
