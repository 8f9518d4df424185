"""File storage for uploaded event images."""

from .blob_store import BlobStore, BlobStoreError

__all__ = ['BlobStore', 'BlobStoreError']
