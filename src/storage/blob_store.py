"""Blob store writing uploaded files to a local directory.

Files are saved under a random hex name with no extension. The returned
path is what gets persisted on the event, never the bytes.
"""

import logging
import shutil
import uuid
from pathlib import Path
from typing import BinaryIO, Union

from fastapi.concurrency import run_in_threadpool
from starlette.datastructures import UploadFile

logger = logging.getLogger(__name__)

class BlobStoreError(Exception):
    """Raised when an upload cannot be persisted."""
    pass

class BlobStore:
    """Stores uploaded streams below ``root``."""

    def __init__(self, root: Union[str, Path]):
        self.root = Path(root)

    def save_stream(self, stream: BinaryIO) -> str:
        """Copy ``stream`` into a new file and return its path."""
        path = self.root / uuid.uuid4().hex
        try:
            self.root.mkdir(parents=True, exist_ok=True)
            with open(path, 'wb') as target:
                shutil.copyfileobj(stream, target)
        except OSError as e:
            raise BlobStoreError(f"Failed to store upload at {path}: {e}") from e
        return str(path)

    async def save(self, upload: UploadFile) -> str:
        """Persist an uploaded file without blocking the event loop."""
        await upload.seek(0)
        path = await run_in_threadpool(self.save_stream, upload.file)
        logger.info(f"Stored upload '{upload.filename}' at {path}")
        return path
