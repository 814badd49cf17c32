"""HTTP API for event listings and bookings."""
