"""Blob storage for template sources and rendered invoices.

Keys are generated by the services and never reused, so ``put`` refuses to
overwrite an existing blob.
"""

import logging
import os
import re
from abc import ABC, abstractmethod

from backend.app.core.errors import StorageMiss, StorageWriteFailure

logger = logging.getLogger(__name__)

_KEY_PATTERN = re.compile(r"^[A-Za-z0-9][A-Za-z0-9_.-]*$")


class BlobStore(ABC):
    @abstractmethod
    def get(self, key: str) -> bytes:
        """Return the blob content; raise StorageMiss when absent or unreadable."""

    @abstractmethod
    def put(self, key: str, content: bytes) -> None:
        """Store a new blob; raise StorageWriteFailure on failure."""

    @abstractmethod
    def delete(self, key: str) -> None:
        """Remove a blob. Callers treat this as best-effort."""


class LocalBlobStore(BlobStore):
    """Stores each blob as a file named after its key under ``base_dir``."""

    def __init__(self, base_dir: str):
        self.base_dir = base_dir

    def _path_for(self, key: str) -> str:
        if not key or not _KEY_PATTERN.match(key) or ".." in key:
            raise ValueError(f"Invalid blob key: {key!r}")
        return os.path.join(self.base_dir, key)

    def get(self, key: str) -> bytes:
        try:
            path = self._path_for(key)
        except ValueError as exc:
            raise StorageMiss(key, "has an invalid key") from exc
        try:
            with open(path, "rb") as f:
                return f.read()
        except FileNotFoundError as exc:
            raise StorageMiss(key) from exc
        except OSError as exc:
            raise StorageMiss(key, f"unreadable ({exc})") from exc

    def put(self, key: str, content: bytes) -> None:
        try:
            path = self._path_for(key)
            os.makedirs(self.base_dir, exist_ok=True)
            with open(path, "xb") as f:
                f.write(content)
        except FileExistsError as exc:
            raise StorageWriteFailure(f"Blob {key} already exists") from exc
        except (OSError, ValueError) as exc:
            raise StorageWriteFailure(f"Failed to store blob {key}: {exc}") from exc
        logger.debug("Stored blob %s (%d bytes)", key, len(content))

    def delete(self, key: str) -> None:
        path = self._path_for(key)
        try:
            os.remove(path)
        except FileNotFoundError:
            return
