# src/checkoff/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the core.

The task store depends on Protocols instead of concrete implementations.
This keeps storage backends and write scheduling swappable and makes testing easier.
"""

from typing import Any, Callable, Protocol


class KeyValueStorage(Protocol):
    """Durable string -> string store (AsyncStorage-style)."""

    def get_item(self, key: str) -> str | None: ...
    def set_item(self, key: str, value: str) -> None: ...
    def remove_item(self, key: str) -> None: ...


class BlobPersistence(Protocol):
    """Reads/writes the serialized task list under its fixed key."""

    def load(self) -> str | None: ...
    def save(self, blob: str) -> None: ...


class SaveScheduler(Protocol):
    """
    How the task store hands a fresh snapshot to durable storage.

    submit() must not block on I/O and must not raise; the implementation
    owns logging of failed writes.
    """

    def submit(self, blob: str) -> None: ...


StoreListener = Callable[[Any], None]
# Called with the TaskStore after every committed change (kept as Any to avoid import coupling).
