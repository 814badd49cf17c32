"""Database package initialization.

This module exposes the public interface of the database package.
"""

from .db_core import (
    DatabaseConfig,
    DatabaseHandle,
    DatabaseError,
    ConnectionError,
    SessionError,
    ConflictError,
    connect_database,
)
from .connection_cache import ConnectionCache

__all__ = [
    # Core database classes
    'DatabaseConfig',
    'DatabaseHandle',
    'ConnectionCache',
    'connect_database',

    # Exceptions
    'DatabaseError',
    'ConnectionError',
    'SessionError',
    'ConflictError',
]
