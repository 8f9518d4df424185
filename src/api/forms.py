"""Reading and validating event request bodies.

Create and update accept JSON, urlencoded and multipart bodies. Values from
forms always arrive as text, JSON values keep their types, so everything
passes through the coercion helpers below before reaching the store.
"""

import json
import math
import re
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, AsyncIterator, Dict, Optional

from fastapi import Request
from starlette.datastructures import UploadFile

from .errors import ValidationError
from ..utils.timezone import ensure_utc

# Fields every new event needs, also the set an update may change
EVENT_FIELDS = (
    'name',
    'tagline',
    'schedule',
    'description',
    'moderator',
    'category',
    'sub_category',
    'rigor_rank',
)

# Multipart field carrying the optional image
IMAGE_FIELD = 'files[image]'

_INTEGER_PATTERN = re.compile(r'^[+-]?[0-9]+$')

# Range of the 32-bit INTEGER columns and of pagination values; keeps the
# computed offset inside a 64-bit integer
INT32_MIN = -2**31
INT32_MAX = 2**31 - 1

FORM_CONTENT_TYPES = ('multipart/form-data', 'application/x-www-form-urlencoded')

@dataclass
class EventPayload:
    """Fields and optional image read from a create/update request."""
    fields: Dict[str, Any] = field(default_factory=dict)
    image: Optional[UploadFile] = None

def is_supplied(value: Any) -> bool:
    """Whether a request value counts as given.

    None, empty strings, False and numeric zero count as absent. Any
    non-empty string, "0" included, is supplied.
    """
    if value is None or isinstance(value, bool):
        return value is True
    if isinstance(value, str):
        return value != ''
    if isinstance(value, (int, float)):
        return value != 0 and not math.isnan(value)
    return True

def parse_schedule(value: Any) -> datetime:
    """Parse an ISO 8601 string or epoch milliseconds into an aware UTC datetime."""
    if isinstance(value, bool):
        raise ValidationError("Invalid schedule")

    if isinstance(value, (int, float)):
        try:
            return datetime.fromtimestamp(value / 1000, tz=timezone.utc)
        except (OverflowError, OSError, ValueError) as e:
            raise ValidationError("Invalid schedule") from e

    if not isinstance(value, str):
        raise ValidationError("Invalid schedule")

    text = value.strip()
    if text.endswith(('Z', 'z')):
        text = text[:-1] + '+00:00'
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError as e:
        raise ValidationError("Invalid schedule") from e
    return ensure_utc(parsed)

def _to_int(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if value.is_integer() else None
    if isinstance(value, str) and _INTEGER_PATTERN.match(value.strip()):
        return int(value.strip())
    return None

def parse_rigor_rank(value: Any) -> int:
    """Parse the rigor rank into an int that fits the INTEGER column."""
    rank = _to_int(value)
    if rank is None:
        raise ValidationError("rigor_rank must be an integer")
    if not INT32_MIN <= rank <= INT32_MAX:
        raise ValidationError("rigor_rank is out of range")
    return rank

def parse_positive_int(value: Optional[str], default: int, name: str) -> int:
    """Parse a pagination parameter, falling back to ``default`` when absent."""
    if value is None or not value.strip():
        return default
    text = value.strip()
    if not _INTEGER_PATTERN.match(text) or int(text) < 1:
        raise ValidationError(f"{name} must be a positive integer")
    if int(text) > INT32_MAX:
        raise ValidationError(f"{name} must not exceed {INT32_MAX}")
    return int(text)

def _parse_text(name: str, value: Any) -> str:
    if isinstance(value, str):
        return value
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    raise ValidationError(f"{name} must be text")

def _coerce(name: str, value: Any) -> Any:
    if name == 'schedule':
        return parse_schedule(value)
    if name == 'rigor_rank':
        return parse_rigor_rank(value)
    return _parse_text(name, value)

def build_new_event(fields: Dict[str, Any]) -> Dict[str, Any]:
    """
    Validate and coerce the fields of a new event.

    Raises:
        ValidationError: If any required field is missing or falsy, or
            schedule/rigor_rank cannot be parsed
    """
    if not all(is_supplied(fields.get(name)) for name in EVENT_FIELDS):
        raise ValidationError("Missing required fields")
    return {name: _coerce(name, fields[name]) for name in EVENT_FIELDS}

def build_update_fields(fields: Dict[str, Any]) -> Dict[str, Any]:
    """Collect the supplied, recognized fields of an update, coerced."""
    updates = {}
    for name in EVENT_FIELDS:
        value = fields.get(name)
        if is_supplied(value):
            updates[name] = _coerce(name, value)
    return updates

def _content_type(request: Request) -> str:
    return request.headers.get('content-type', '').split(';')[0].strip().lower()

@asynccontextmanager
async def read_event_payload(request: Request) -> AsyncIterator[EventPayload]:
    """
    Read the body of a create/update request.

    Uploaded files stay open until the ``async with`` block exits, so the
    image must be stored inside it.

    Raises:
        ValidationError: On malformed JSON, a non-object JSON body or an
            unsupported content type
    """
    content_type = _content_type(request)

    if content_type in FORM_CONTENT_TYPES:
        form = await request.form()
        try:
            fields = {
                key: value for key, value in form.multi_items()
                if not isinstance(value, UploadFile)
            }
            image = form.get(IMAGE_FIELD)
            if not isinstance(image, UploadFile) or not image.filename:
                image = None
            yield EventPayload(fields=fields, image=image)
        finally:
            await form.close()
        return

    body = await request.body()
    if not body.strip():
        yield EventPayload()
        return

    if content_type != 'application/json' and not content_type.endswith('+json'):
        raise ValidationError(f"Unsupported content type: {content_type or 'none'}")

    try:
        data = json.loads(body)
    except ValueError as e:
        raise ValidationError("Malformed JSON body") from e
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")

    yield EventPayload(fields=data)
