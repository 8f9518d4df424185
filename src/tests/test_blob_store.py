"""
Tests for the upload blob store.
"""

import io

import pytest

from src.storage import BlobStore, BlobStoreError


class TestSaveStream:
    """Writing uploaded streams to disk"""

    def test_writes_bytes_and_returns_path(self, tmp_path):
        store = BlobStore(tmp_path / "uploads")

        path = store.save_stream(io.BytesIO(b"image bytes"))

        assert path.startswith(str(tmp_path / "uploads"))
        with open(path, "rb") as f:
            assert f.read() == b"image bytes"

    def test_each_upload_gets_a_new_name(self, tmp_path):
        store = BlobStore(tmp_path)

        first = store.save_stream(io.BytesIO(b"a"))
        second = store.save_stream(io.BytesIO(b"a"))

        assert first != second

    def test_unwritable_root_raises(self, tmp_path):
        blocker = tmp_path / "not-a-directory"
        blocker.write_text("occupied")
        store = BlobStore(blocker)

        with pytest.raises(BlobStoreError):
            store.save_stream(io.BytesIO(b"a"))
