"""Event model definition."""

import uuid
from datetime import datetime
from typing import Any, Dict, List, Optional

from sqlalchemy import Column, DateTime, Integer, JSON, String, Text

from .base import Base
from ..utils.timezone import ensure_utc, now_utc

def new_event_id() -> str:
    """Generate a fresh, never reused event identifier."""
    return uuid.uuid4().hex

class Event(Base):
    """
    Event stored in the ``events`` collection.

    Fields:
        id: Store-assigned identifier (32 char hex), immutable
        name: Event name
        tagline: Short tagline
        schedule: When the event takes place (UTC), the listing sort key
        description: Event description
        image_path: Path of the uploaded image, exposed as ``files.image``
        moderator: Who moderates the event
        category: Event category
        sub_category: Event sub category
        rigor_rank: Integer ranking value
        attendees: Attendee identifiers, always empty at creation
        created_at: When the record was inserted
    """
    __tablename__ = 'events'

    # Nested attribute names accepted in partial updates, mapped to columns
    NESTED_FIELDS = {'files.image': 'image_path'}

    id = Column(String(32), primary_key=True, default=new_event_id)
    name = Column(String, nullable=False)
    tagline = Column(String, nullable=False)
    schedule = Column(DateTime(timezone=True), nullable=False, index=True)
    description = Column(Text, nullable=False)
    image_path = Column(String, nullable=True)
    moderator = Column(String, nullable=False)
    category = Column(String, nullable=False)
    sub_category = Column(String, nullable=False)
    rigor_rank = Column(Integer, nullable=False)
    attendees = Column(JSON, nullable=False, default=list)
    created_at = Column(DateTime(timezone=True), default=now_utc)

    def __init__(self, **kwargs):
        """Initialize Event, normalizing the schedule to UTC."""
        if kwargs.get('schedule') is not None:
            kwargs['schedule'] = ensure_utc(kwargs['schedule'])
        if kwargs.get('attendees') is None:
            kwargs['attendees'] = []
        super().__init__(**kwargs)

    @classmethod
    def column_for(cls, field: str) -> str:
        """Resolve an update field name (``files.image`` included) to a column."""
        return cls.NESTED_FIELDS.get(field, field)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the JSON shape returned by the API."""
        attendees: List[str] = list(self.attendees or [])
        schedule: Optional[datetime] = ensure_utc(self.schedule)
        return {
            'id': self.id,
            'name': self.name,
            'tagline': self.tagline,
            'schedule': schedule,
            'description': self.description,
            'files': {'image': self.image_path},
            'moderator': self.moderator,
            'category': self.category,
            'sub_category': self.sub_category,
            'rigor_rank': self.rigor_rank,
            'attendees': attendees,
        }

    def __str__(self) -> str:
        """String representation."""
        return f"Event(id={self.id}, name={self.name}, schedule={self.schedule})"
