"""Blob store dependency; tests swap it through ``app.dependency_overrides``."""

from backend.app.core.settings import get_settings
from backend.app.storage.blob_store import BlobStore, LocalBlobStore


def get_blob_store() -> BlobStore:
    return LocalBlobStore(get_settings().blob_storage_dir)
