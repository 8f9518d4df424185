"""FastAPI application configuration module."""

import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Optional, Union

from fastapi import FastAPI
from fastapi.concurrency import run_in_threadpool
from fastapi.middleware.cors import CORSMiddleware

# Internal imports
from src.config.environment import IS_PRODUCTION_ENVIRONMENT # Environment must be imported first
from src.config.cors import CORS_CONFIG
from src.config.settings import API_PREFIX, APP_VERSION, UPLOAD_DIR
from src.utils.logging_config import setup_logging
from src.db import Database, EventStore
from src.storage import BlobStore
from .errors import register_exception_handlers
from .routes import events, health

# Set up logging
setup_logging()
logger = logging.getLogger(__name__)

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Connect to the database once at startup and release it on shutdown.

    A failed connection aborts startup, so the server exits instead of
    serving without a backing store.
    """
    database: Database = app.state.database
    try:
        await run_in_threadpool(database.connect)
        logger.info("Database connection established")
    except Exception as e:
        logger.error(f"Startup failed, cannot reach the database: {e}")
        raise
    yield
    database.dispose()
    logger.info("Database connections released")

def create_application(
    database: Optional[Database] = None,
    upload_dir: Optional[Union[str, Path]] = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        database: Database to serve from, defaults to one built from the
                  environment
        upload_dir: Where uploaded images are written, defaults to UPLOAD_DIR
    """
    app = FastAPI(
        title="Event Management API",
        description="CRUD API for events with image uploads",
        version=APP_VERSION,
        docs_url=None if IS_PRODUCTION_ENVIRONMENT else '/api/docs',
        redoc_url=None if IS_PRODUCTION_ENVIRONMENT else '/api/redoc',
        lifespan=lifespan
    )

    if database is None:
        database = Database()
    app.state.database = database
    app.state.event_store = EventStore(database)
    app.state.blob_store = BlobStore(upload_dir or UPLOAD_DIR)

    # Configure CORS
    app.add_middleware(CORSMiddleware, **CORS_CONFIG)

    register_exception_handlers(app)

    # Include health check router without prefix
    app.include_router(health.router)

    # Include routers with prefix
    app.include_router(events.router, prefix=API_PREFIX)

    return app
