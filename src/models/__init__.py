"""Models package initialization."""

from .base import Base
from .event import Event, new_event_id

__all__ = ['Base', 'Event', 'new_event_id']
