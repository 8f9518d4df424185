"""
Tests for the event document store.
"""

import threading
from datetime import datetime, timedelta, timezone

import pytest

from sqlalchemy import text
from sqlalchemy.pool import StaticPool

from src.db import (
    Database,
    DatabaseConfig,
    EventStore,
    InvalidIdentifierError,
    SessionError,
    validate_event_id,
)
from src.models import Event

BASE_TIME = datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)


def make_fields(index=0, **overrides):
    fields = {
        "name": f"Event {index}",
        "tagline": "tagline",
        "schedule": BASE_TIME + timedelta(days=index),
        "description": "description",
        "moderator": "moderator",
        "category": "category",
        "sub_category": "sub_category",
        "rigor_rank": index,
        "image_path": None,
        "attendees": [],
    }
    fields.update(overrides)
    return fields


class TestInsertAndFind:
    """Insert and lookup by identifier"""

    def test_insert_returns_hex_identifier(self, event_store):
        event_id = event_store.insert(make_fields())

        assert len(event_id) == 32
        validate_event_id(event_id)

    def test_identifiers_are_unique(self, event_store):
        ids = {event_store.insert(make_fields(i)) for i in range(5)}
        assert len(ids) == 5

    def test_find_by_id_returns_document(self, event_store):
        event_id = event_store.insert(make_fields(2, image_path="uploads/abc"))

        event = event_store.find_by_id(event_id)

        assert event["id"] == event_id
        assert event["name"] == "Event 2"
        assert event["schedule"] == BASE_TIME + timedelta(days=2)
        assert event["schedule"].tzinfo is not None
        assert event["rigor_rank"] == 2
        assert event["files"] == {"image": "uploads/abc"}
        assert event["attendees"] == []

    def test_find_by_id_unknown_returns_none(self, event_store):
        assert event_store.find_by_id("0" * 32) is None

    def test_find_by_id_accepts_uppercase(self, event_store):
        event_id = event_store.insert(make_fields())
        assert event_store.find_by_id(event_id.upper())["id"] == event_id

    @pytest.mark.parametrize("event_id", ["", "abc", "g" * 32, "0" * 31, "0" * 33])
    def test_malformed_identifier_raises(self, event_store, event_id):
        with pytest.raises(InvalidIdentifierError):
            event_store.find_by_id(event_id)


class TestFind:
    """Listing with ordering and pagination"""

    @pytest.fixture
    def seeded(self, event_store):
        # Inserted out of order on purpose
        for index in (3, 0, 6, 1, 5, 2, 4):
            event_store.insert(make_fields(index))
        return event_store

    def test_orders_by_schedule_descending(self, seeded):
        names = [event["name"] for event in seeded.find(True)]
        assert names == [f"Event {i}" for i in range(6, -1, -1)]

    def test_skip_and_limit(self, seeded):
        names = [event["name"] for event in seeded.find(True, skip=2, limit=3)]
        assert names == ["Event 4", "Event 3", "Event 2"]

    def test_skip_past_end_is_empty(self, seeded):
        assert seeded.find(True, skip=10, limit=5) == []

    def test_match_nothing(self, seeded):
        assert seeded.find(False, skip=0, limit=5) == []


class TestUpdate:
    """Partial updates by identifier"""

    def test_updates_only_given_fields(self, event_store):
        event_id = event_store.insert(make_fields(1))

        assert event_store.update_by_id(event_id, {"name": "Renamed"}) is True

        event = event_store.find_by_id(event_id)
        assert event["name"] == "Renamed"
        assert event["tagline"] == "tagline"
        assert event["rigor_rank"] == 1

    def test_nested_image_field(self, event_store):
        event_id = event_store.insert(make_fields())

        event_store.update_by_id(event_id, {"files.image": "uploads/new"})

        assert event_store.find_by_id(event_id)["files"] == {"image": "uploads/new"}

    def test_schedule_is_normalized_to_utc(self, event_store):
        event_id = event_store.insert(make_fields())
        local = datetime(2024, 6, 1, 14, 0, tzinfo=timezone(timedelta(hours=2)))

        event_store.update_by_id(event_id, {"schedule": local})

        assert event_store.find_by_id(event_id)["schedule"] == datetime(2024, 6, 1, 12, 0, tzinfo=timezone.utc)

    def test_empty_update_reports_existing(self, event_store):
        event_id = event_store.insert(make_fields())
        assert event_store.update_by_id(event_id, {}) is True

    def test_unknown_identifier_does_not_match(self, event_store):
        event_id = event_store.insert(make_fields())

        assert event_store.update_by_id("f" * 32, {"name": "x"}) is False
        assert event_store.update_by_id("f" * 32, {}) is False
        assert event_store.find_by_id(event_id)["name"] == "Event 0"

    def test_unknown_column_raises_session_error(self, event_store):
        event_id = event_store.insert(make_fields())
        with pytest.raises(SessionError):
            event_store.update_by_id(event_id, {"no_such_column": 1})


class TestDelete:
    """Deletion by identifier"""

    def test_delete_removes_event(self, event_store):
        event_id = event_store.insert(make_fields())

        assert event_store.delete_by_id(event_id) is True
        assert event_store.find_by_id(event_id) is None

    def test_delete_unknown_returns_false(self, event_store):
        event_store.insert(make_fields())

        assert event_store.delete_by_id("a" * 32) is False
        assert len(event_store.find(True)) == 1

    def test_delete_all(self, event_store):
        for index in range(3):
            event_store.insert(make_fields(index))

        assert event_store.delete_all() == 3
        assert event_store.find(True) == []


class TestSqliteFileDatabase:
    """File backed SQLite used from several threads"""

    @pytest.fixture
    def file_database(self, tmp_path):
        database = Database(DatabaseConfig(url=f"sqlite:///{tmp_path / 'events.db'}"))
        database.connect()
        yield database
        database.dispose()

    def test_memory_url_shares_one_connection(self):
        assert DatabaseConfig(url="sqlite://").get_engine_args()["poolclass"] is StaticPool
        assert DatabaseConfig(url="sqlite:///:memory:").is_sqlite_memory

    def test_file_url_uses_pooled_connections(self, tmp_path):
        config = DatabaseConfig(url=f"sqlite:///{tmp_path / 'events.db'}")

        args = config.get_engine_args()

        assert "poolclass" not in args
        assert args["connect_args"] == {"check_same_thread": False}

    def test_rollback_in_one_thread_keeps_other_threads_insert(self, file_database):
        store = EventStore(file_database)
        flushed = threading.Event()
        rolled_back = threading.Event()
        results = {}

        def insert_event():
            with file_database.session() as session:
                event = Event(**make_fields(1))
                session.add(event)
                session.flush()
                results["event_id"] = event.id
                flushed.set()
                rolled_back.wait(timeout=10)

        def failing_request():
            flushed.wait(timeout=10)
            try:
                with file_database.session() as session:
                    session.execute(text("SELECT 1"))
                    raise RuntimeError("request failed")
            except SessionError:
                results["rolled_back"] = True
            finally:
                rolled_back.set()

        threads = [threading.Thread(target=insert_event), threading.Thread(target=failing_request)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join(timeout=15)

        assert results.get("rolled_back") is True
        found = store.find_by_id(results["event_id"])
        assert found is not None
        assert found["name"] == "Event 1"
