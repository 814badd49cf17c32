"""CORS configuration for the FastAPI application."""

import os

from .environment import IS_PRODUCTION_ENVIRONMENT

# Production origins can be overridden with a comma separated CORS_ORIGINS
_production_origins = [
    origin.strip()
    for origin in os.environ.get('CORS_ORIGINS', '').split(',')
    if origin.strip()
]

ALLOWED_ORIGINS = {
    False: ["*"],  # Development - allow all
    True: _production_origins or [  # Production - restricted
        "https://devevents.app",
        "https://www.devevents.app",
    ]
}

ALLOWED_METHODS = [
    "GET",      # Event cards and details
    "POST",     # Creating events and bookings
    "PATCH",    # Editing events
    "DELETE",   # Removing events
    "OPTIONS"   # Required for CORS preflight
]

ALLOWED_HEADERS = [
    "Content-Type",
    "Accept",
]

CORS_CONFIG = {
    "allow_origins": ALLOWED_ORIGINS[IS_PRODUCTION_ENVIRONMENT],
    "allow_credentials": True,
    "allow_methods": ALLOWED_METHODS,
    "allow_headers": ALLOWED_HEADERS,
    "expose_headers": [],
    "max_age": 3600,
}
