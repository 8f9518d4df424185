"""Timezone helpers.

Event schedules are kept in UTC. Some backends (SQLite) hand datetimes back
without tzinfo, so values read from the store go through ``ensure_utc``.
"""

from datetime import datetime, timezone
from typing import Optional

UTC = timezone.utc

def now_utc() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(UTC)

def ensure_utc(dt: Optional[datetime]) -> Optional[datetime]:
    """Return ``dt`` as an aware UTC datetime.

    Naive values are assumed to already be UTC.
    """
    if dt is None:
        return None
    if dt.tzinfo is None:
        return dt.replace(tzinfo=UTC)
    return dt.astimezone(UTC)
