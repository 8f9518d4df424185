"""Database package initialization.

This module exposes the public interface of the database package.
"""

from .db_core import (
    Database,
    DatabaseConfig,
    DatabaseError,
    ConnectionError,
    SessionError,
    InvalidIdentifierError,
)
from .event_store import EventStore, validate_event_id

__all__ = [
    # Core database classes
    'Database',
    'DatabaseConfig',

    # Exceptions
    'DatabaseError',
    'ConnectionError',
    'SessionError',
    'InvalidIdentifierError',

    # Event collection access
    'EventStore',
    'validate_event_id',
]
