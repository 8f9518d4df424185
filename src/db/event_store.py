"""Document store primitives for the events collection.

Every method runs in its own ``Database.session()`` transaction and returns
plain dictionaries, so nothing bound to a session leaks to the caller.
The methods are blocking; the API layer runs them in the threadpool.
"""

import logging
import re
from typing import Any, Dict, List, Optional

from sqlalchemy import delete, false, select, true, update

from .db_core import Database, InvalidIdentifierError
from ..models.event import Event
from ..utils.timezone import ensure_utc

logger = logging.getLogger(__name__)

_EVENT_ID_PATTERN = re.compile(r'^[0-9a-f]{32}$')

def validate_event_id(event_id: str) -> str:
    """Check that ``event_id`` has the store's identifier format.

    Raises:
        InvalidIdentifierError: If it does not
    """
    if not isinstance(event_id, str) or not _EVENT_ID_PATTERN.match(event_id.lower()):
        raise InvalidIdentifierError(f"Invalid event identifier: {event_id!r}")
    return event_id.lower()

class EventStore:
    """Find, insert, update and delete events by identifier."""

    def __init__(self, database: Database):
        self.database = database

    def find_by_id(self, event_id: str) -> Optional[Dict[str, Any]]:
        """Return the event with ``event_id``, or None."""
        event_id = validate_event_id(event_id)
        with self.database.session() as session:
            event = session.get(Event, event_id)
            return event.to_dict() if event else None

    def find(self, match_all: bool, skip: int = 0, limit: int = 0) -> List[Dict[str, Any]]:
        """
        List events, most recent schedule first.

        Args:
            match_all: True matches every event, False matches none
            skip: Number of events to skip
            limit: Maximum number of events returned, 0 means no limit
        """
        query = (
            select(Event)
            .where(true() if match_all else false())
            .order_by(Event.schedule.desc())
            .offset(skip)
        )
        if limit:
            query = query.limit(limit)

        with self.database.session() as session:
            return [event.to_dict() for event in session.scalars(query)]

    def insert(self, fields: Dict[str, Any]) -> str:
        """Insert a new event and return its identifier."""
        with self.database.session() as session:
            event = Event(**fields)
            session.add(event)
            session.flush()
            event_id = event.id
        logger.info(f"Inserted event {event_id}")
        return event_id

    def update_by_id(self, event_id: str, fields: Dict[str, Any]) -> bool:
        """
        Set ``fields`` on the event with ``event_id``.

        Field names may use the nested ``files.image`` form. An empty
        mapping only checks that the event exists.

        Returns:
            True if an event matched
        """
        event_id = validate_event_id(event_id)
        values = {Event.column_for(name): value for name, value in fields.items()}
        if 'schedule' in values:
            values['schedule'] = ensure_utc(values['schedule'])

        with self.database.session() as session:
            if not values:
                return session.get(Event, event_id) is not None
            result = session.execute(
                update(Event).where(Event.id == event_id).values(**values)
            )
            matched = result.rowcount > 0

        if matched:
            logger.info(f"Updated event {event_id}: {sorted(fields)}")
        return matched

    def delete_by_id(self, event_id: str) -> bool:
        """Delete the event with ``event_id``. Returns True if one was deleted."""
        event_id = validate_event_id(event_id)
        with self.database.session() as session:
            result = session.execute(delete(Event).where(Event.id == event_id))
            deleted = result.rowcount > 0

        if deleted:
            logger.info(f"Deleted event {event_id}")
        return deleted

    def delete_all(self) -> int:
        """Delete every event. Returns the number removed."""
        with self.database.session() as session:
            result = session.execute(delete(Event))
            return result.rowcount
