# src/checkoff/storage/persistence.py

from __future__ import annotations

import logging

from ..config import DEFAULT_STORAGE_KEY
from ..core.ports import KeyValueStorage
from .errors import StorageUnavailable

logger = logging.getLogger(__name__)


class TaskListPersistence:
    """
    Durable storage of the serialized task list under one fixed key.

    Opaque to the task store's representation: it only moves blobs.
    Every backend failure is re-raised as StorageUnavailable so callers
    have a single thing to catch.
    """

    def __init__(self, storage: KeyValueStorage, *, key: str = DEFAULT_STORAGE_KEY) -> None:
        if not key or not key.strip():
            raise ValueError("storage key is required")
        self._storage = storage
        self._key = key

    @property
    def key(self) -> str:
        return self._key

    def load(self) -> str | None:
        """Return the stored blob, or None if nothing was saved yet."""
        try:
            blob = self._storage.get_item(self._key)
        except StorageUnavailable:
            raise
        except Exception as e:
            raise StorageUnavailable(f"load of {self._key!r} failed: {e}") from e
        logger.debug("Loaded key=%s present=%s", self._key, blob is not None)
        return blob

    def save(self, blob: str) -> None:
        try:
            self._storage.set_item(self._key, blob)
        except StorageUnavailable:
            raise
        except Exception as e:
            raise StorageUnavailable(f"save of {self._key!r} failed: {e}") from e

    def clear(self) -> None:
        try:
            self._storage.remove_item(self._key)
        except StorageUnavailable:
            raise
        except Exception as e:
            raise StorageUnavailable(f"clear of {self._key!r} failed: {e}") from e
