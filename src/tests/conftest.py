"""
Shared fixtures for the event API tests.

Every test gets its own in-memory SQLite database and upload directory.
"""

import pytest
from fastapi.testclient import TestClient

from src.api.app import create_application
from src.config.settings import API_PREFIX
from src.db import Database, DatabaseConfig, EventStore

EVENTS_URL = f"{API_PREFIX}/events"


@pytest.fixture
def database():
    """In-memory database with the schema created"""
    database = Database(DatabaseConfig(url="sqlite://"))
    database.connect()
    yield database
    database.dispose()


@pytest.fixture
def event_store(database):
    return EventStore(database)


@pytest.fixture
def upload_dir(tmp_path):
    return tmp_path / "uploads"


@pytest.fixture
def app(database, upload_dir):
    return create_application(database=database, upload_dir=upload_dir)


@pytest.fixture
def client(app):
    """TestClient with the application lifespan running"""
    with TestClient(app) as client:
        yield client


@pytest.fixture
def event_fields():
    """A complete set of form fields for a new event"""
    return {
        "name": "Python Meetup",
        "tagline": "Talks and pizza",
        "schedule": "2024-05-01T18:00:00Z",
        "description": "Monthly meetup of the local Python user group",
        "moderator": "moderator-1",
        "category": "technology",
        "sub_category": "programming",
        "rigor_rank": "3",
    }


@pytest.fixture
def create_event(client, event_fields):
    """Create an event through the API and return its id"""

    def _create(**overrides):
        fields = {**event_fields, **overrides}
        response = client.post(EVENTS_URL, json=fields)
        assert response.status_code == 201, response.text
        return response.json()["eventId"]

    return _create
