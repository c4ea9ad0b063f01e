# src/checkoff/bootstrap.py

"""
Composition root.

- configure_logging(settings) is the first call a host makes,
- loads settings once (or takes injected ones),
- ensures local (gitignored) directories exist,
- wires storage, persistence adapter, writer and task store into AppState,
- hydrates the store before handing it to the view layer,
- create_app_async / shutdown_async do the same for hosts that own an asyncio loop.
"""

from __future__ import annotations

import asyncio
import logging

from .config import get_settings
from .logging_setup import setup_logging
from .core.ports import KeyValueStorage
from .core.state import AppState
from .storage.kv_store import SqliteKeyValueStore
from .storage.persistence import TaskListPersistence
from .tasks.task_store import TaskStore
from .tasks.task_writer import AsyncioTaskWriter, BackgroundTaskWriter, InlineTaskWriter

logger = logging.getLogger(__name__)


def configure_logging(settings=None) -> None:
    """
    Apply the logging settings: console level from settings.log_level, full
    logs under settings.data_dir when settings.log_to_file is set.

    Call this once, before create_app().
    """
    if settings is None:
        settings = get_settings()

    level_name = str(getattr(settings, "log_level", "INFO")).upper()
    console_level = getattr(logging, level_name, logging.INFO)
    if not isinstance(console_level, int):
        console_level = logging.INFO

    setup_logging(
        log_dir=getattr(settings, "data_dir", ".local/checkoff"),
        console_level=console_level,
        log_to_file=bool(getattr(settings, "log_to_file", True)),
    )


def _ensure_local_dirs(settings) -> None:
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    settings.storage_path.parent.mkdir(parents=True, exist_ok=True)


def _open_persistence(settings, storage: KeyValueStorage | None) -> TaskListPersistence:
    if storage is None:
        _ensure_local_dirs(settings)
        storage = SqliteKeyValueStore(settings.storage_path)
    return TaskListPersistence(storage, key=settings.storage_key)


def create_app(*, settings=None, storage: KeyValueStorage | None = None) -> AppState:
    """
    Build a hydrated AppState.

    Keeping settings and storage injectable makes the app easy to test and
    avoids hidden global config reads. If settings is None, falls back to
    get_settings(); if storage is None, a SqliteKeyValueStore is opened at
    settings.storage_path.
    """
    if settings is None:
        settings = get_settings()

    persistence = _open_persistence(settings, storage)

    writer: BackgroundTaskWriter | InlineTaskWriter
    if settings.background_writes:
        writer = BackgroundTaskWriter(persistence)
    else:
        writer = InlineTaskWriter(persistence)

    store = TaskStore(persistence, writer)
    store.hydrate()

    logger.info(
        "%s ready key=%s tasks=%d background_writes=%s",
        getattr(settings, "app_name", "checkoff"),
        persistence.key,
        store.stats().total,
        settings.background_writes,
    )
    return AppState(settings=settings, persistence=persistence, task_store=store, writer=writer)


def shutdown(state: AppState) -> None:
    """Best-effort shutdown: flush pending writes, stop the writer (no exceptions escape)."""
    timeout = float(getattr(state.settings, "flush_timeout_seconds", 5.0))
    writer = state.writer
    try:
        if hasattr(writer, "close"):
            if not writer.close(timeout=timeout):
                logger.warning("Pending task writes may be lost (writer still busy after %.1fs)", timeout)
        elif hasattr(writer, "aclose"):
            logger.warning("Asyncio task writer not drained; use shutdown_async() from the event loop")
    except Exception:
        logger.exception("Failed to stop task writer.")
    logger.info("Bye.")


async def create_app_async(*, settings=None, storage: KeyValueStorage | None = None) -> AppState:
    """
    Async variant of create_app() for hosts that own an asyncio loop.

    Saves go through an AsyncioTaskWriter bound to the running loop
    (settings.background_writes is not consulted). Opening storage and the
    hydration load run in a worker thread so the loop is never blocked.
    """
    if settings is None:
        settings = get_settings()

    persistence = await asyncio.to_thread(_open_persistence, settings, storage)
    writer = AsyncioTaskWriter(persistence)
    store = TaskStore(persistence, writer)
    await asyncio.to_thread(store.hydrate)

    logger.info(
        "%s ready key=%s tasks=%d writer=asyncio",
        getattr(settings, "app_name", "checkoff"),
        persistence.key,
        store.stats().total,
    )
    return AppState(settings=settings, persistence=persistence, task_store=store, writer=writer)


async def shutdown_async(state: AppState) -> None:
    """Async best-effort shutdown; drains an AsyncioTaskWriter, delegates other writers to shutdown()."""
    writer = state.writer
    if not hasattr(writer, "aclose"):
        await asyncio.to_thread(shutdown, state)
        return

    timeout = float(getattr(state.settings, "flush_timeout_seconds", 5.0))
    try:
        if not await writer.aclose(timeout=timeout):
            logger.warning("Pending task writes may be lost (writer still busy after %.1fs)", timeout)
    except Exception:
        logger.exception("Failed to stop task writer.")
    logger.info("Bye.")
