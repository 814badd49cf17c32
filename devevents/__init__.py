"""DevEvents: event listings and bookings service."""

__version__ = "1.0.0"
