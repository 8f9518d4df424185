"""Error taxonomy of the event API and its JSON error responses.

Every error leaves the service as ``{"message": "<text>"}`` with the status
code of its class. Store failures never expose their cause to the client.
"""

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)

INTERNAL_ERROR_MESSAGE = "Internal Server Error"

class EventServiceError(Exception):
    """Base class for errors returned by the event operations."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    @property
    def public_message(self) -> str:
        """Message sent to the client."""
        return self.message

class ValidationError(EventServiceError):
    """Missing or invalid input."""

    status_code = 400

class NotFoundError(EventServiceError):
    """No event matches the identifier."""

    status_code = 404

class StoreError(EventServiceError):
    """The document store or blob store failed."""

    status_code = 500

    @property
    def public_message(self) -> str:
        return INTERNAL_ERROR_MESSAGE

async def event_service_error_handler(request: Request, exc: EventServiceError) -> JSONResponse:
    """Log an operation error and convert it to a JSON response."""
    if exc.status_code >= 500:
        logger.error(
            f"{request.method} {request.url.path} failed: {exc.message}",
            exc_info=exc.__cause__ or exc
        )
    else:
        logger.warning(f"{request.method} {request.url.path} rejected: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content={"message": exc.public_message})

async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Keep framework errors (unknown route, bad multipart body) in the same shape."""
    logger.warning(f"{request.method} {request.url.path} returned {exc.status_code}: {exc.detail}")
    return JSONResponse(
        status_code=exc.status_code,
        content={"message": str(exc.detail)},
        headers=getattr(exc, "headers", None)
    )

async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Last resort for anything the operations did not translate."""
    logger.exception(f"Unhandled error on {request.method} {request.url.path}: {exc}")
    return JSONResponse(status_code=500, content={"message": INTERNAL_ERROR_MESSAGE})

def register_exception_handlers(app: FastAPI) -> None:
    """Install the JSON error handlers on ``app``."""
    app.add_exception_handler(EventServiceError, event_service_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
