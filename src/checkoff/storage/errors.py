# src/checkoff/storage/errors.py

from __future__ import annotations


class CheckoffError(Exception):
    """Base class for errors raised inside checkoff."""


class StorageUnavailable(CheckoffError):
    """The underlying key-value store could not be read or written."""


class MalformedData(CheckoffError):
    """A stored task list blob could not be decoded."""
