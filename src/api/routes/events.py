"""Events router module.

CRUD over the events collection. Store calls are blocking and run in the
threadpool; store failures surface as ``StoreError``.
"""

from typing import Any, Callable, Dict, List, Optional, TypeVar, Union

from fastapi import APIRouter, Depends, Query, Request, status
from fastapi.concurrency import run_in_threadpool

from ..errors import NotFoundError, StoreError, ValidationError
from ..forms import (
    build_new_event,
    build_update_fields,
    parse_positive_int,
    read_event_payload,
)
from ...config.settings import DEFAULT_PAGE, DEFAULT_PAGE_LIMIT
from ...db import DatabaseError, EventStore
from ...storage import BlobStore, BlobStoreError

router = APIRouter(tags=["events"])

T = TypeVar('T')

# Only this listing type matches anything
LATEST_TYPE = "latest"

def get_event_store(request: Request) -> EventStore:
    return request.app.state.event_store

def get_blob_store(request: Request) -> BlobStore:
    return request.app.state.blob_store

async def _call_store(action: str, func: Callable[..., T], *args: Any) -> T:
    """Run a blocking store call, translating its failures."""
    try:
        return await run_in_threadpool(func, *args)
    except DatabaseError as e:
        raise StoreError(f"Error {action}: {e}") from e

async def _store_image(blob_store: BlobStore, image, action: str) -> Optional[str]:
    if image is None:
        return None
    try:
        return await blob_store.save(image)
    except BlobStoreError as e:
        raise StoreError(f"Error {action}: {e}") from e

async def _fetch_event(store: EventStore, event_id: str) -> Dict[str, Any]:
    event = await _call_store("fetching event", store.find_by_id, event_id)
    if event is None:
        raise NotFoundError("Event not found")
    return event

@router.get("/events", response_model=Union[Dict, List[Dict]])
async def get_events(
    request: Request,
    event_type: Optional[str] = Query(None, alias="type"),
    limit: Optional[str] = None,
    page: Optional[str] = None,
    store: EventStore = Depends(get_event_store),
):
    """
    Fetch one event (``?id=``) or list events (``?type=latest&limit=&page=``).

    Listing only matches anything when ``type`` is ``latest``. Results are
    ordered by schedule, most recent first.
    """
    if "id" in request.query_params:
        event_id = request.query_params["id"]
        if not event_id:
            raise ValidationError("Event ID is required")
        return await _fetch_event(store, event_id)

    limit_value = parse_positive_int(limit, DEFAULT_PAGE_LIMIT, "limit")
    page_value = parse_positive_int(page, DEFAULT_PAGE, "page")

    return await _call_store(
        "fetching events",
        store.find,
        event_type == LATEST_TYPE,
        (page_value - 1) * limit_value,
        limit_value,
    )

@router.get("/events/{event_id}", response_model=Dict)
async def get_event(event_id: str, store: EventStore = Depends(get_event_store)):
    """Get a single event by ID."""
    return await _fetch_event(store, event_id)

@router.post("/events", status_code=status.HTTP_201_CREATED)
async def create_event(
    request: Request,
    store: EventStore = Depends(get_event_store),
    blob_store: BlobStore = Depends(get_blob_store),
):
    """Create an event from all eight required fields and an optional image."""
    async with read_event_payload(request) as payload:
        fields = build_new_event(payload.fields)
        image_path = await _store_image(blob_store, payload.image, "creating event")

    fields["image_path"] = image_path
    fields["attendees"] = []
    event_id = await _call_store("creating event", store.insert, fields)
    return {"eventId": event_id}

@router.put("/events/{event_id}")
async def update_event(
    event_id: str,
    request: Request,
    store: EventStore = Depends(get_event_store),
    blob_store: BlobStore = Depends(get_blob_store),
):
    """Change only the supplied fields of an event."""
    async with read_event_payload(request) as payload:
        updates = build_update_fields(payload.fields)
        image_path = await _store_image(blob_store, payload.image, "updating event")

    if image_path:
        updates["files.image"] = image_path

    matched = await _call_store("updating event", store.update_by_id, event_id, updates)
    if not matched:
        raise NotFoundError("Event not found")
    return {"message": "Event updated successfully"}

@router.delete("/events/{event_id}")
async def delete_event(event_id: str, store: EventStore = Depends(get_event_store)):
    """Delete an event."""
    deleted = await _call_store("deleting event", store.delete_by_id, event_id)
    if not deleted:
        raise NotFoundError("Event not found")
    return {"message": "Event deleted successfully"}
