# tests/test_bootstrap.py

from __future__ import annotations

import logging
from dataclasses import replace
from pathlib import Path
from types import SimpleNamespace

import pytest

from checkoff.bootstrap import configure_logging, create_app, create_app_async, shutdown, shutdown_async
from checkoff.config import Settings
from checkoff.logging_setup import _ConsoleNoiseFilter, setup_logging
from checkoff.tasks.task_models import TaskFilter
from checkoff.tasks.task_writer import AsyncioTaskWriter, BackgroundTaskWriter, InlineTaskWriter

from .fakes import FakeKeyValueStorage


def test_state_survives_restart(settings: SimpleNamespace) -> None:
    state = create_app(settings=settings)
    assert isinstance(state.writer, InlineTaskWriter)
    assert settings.storage_path.exists()

    store = state.task_store
    milk = store.add_task("Buy milk")
    store.add_task("Write report")
    assert milk is not None
    store.toggle_task(milk.id)
    store.set_filter(TaskFilter.COMPLETED)
    shutdown(state)

    restarted = create_app(settings=settings)
    store2 = restarted.task_store
    assert [(t.title, t.completed) for t in store2.tasks()] == [
        ("Write report", False),
        ("Buy milk", True),
    ]
    # the filter is transient
    assert store2.filter is TaskFilter.ALL
    shutdown(restarted)


def test_background_writes_are_flushed_on_shutdown(settings: SimpleNamespace) -> None:
    settings.background_writes = True
    state = create_app(settings=settings)
    assert isinstance(state.writer, BackgroundTaskWriter)

    for i in range(20):
        state.task_store.add_task(f"task {i}")
    shutdown(state)

    restarted = create_app(settings=settings)
    assert restarted.task_store.stats().total == 20
    shutdown(restarted)


def test_unreachable_storage_starts_empty_and_keeps_working(settings: SimpleNamespace) -> None:
    storage = FakeKeyValueStorage(fail_reads=True, fail_writes=True)

    state = create_app(settings=settings, storage=storage)
    store = state.task_store
    assert store.tasks() == []

    store.add_task("still works in memory")
    assert store.stats().total == 1
    assert storage.items == {}
    shutdown(state)


def test_malformed_stored_blob_starts_empty(settings: SimpleNamespace) -> None:
    storage = FakeKeyValueStorage(items={settings.storage_key: "{oops"})

    state = create_app(settings=settings, storage=storage)

    assert state.task_store.tasks() == []
    shutdown(state)


def test_create_app_accepts_real_settings(tmp_path: Path) -> None:
    settings = replace(
        Settings.from_env(),
        data_dir=tmp_path,
        storage_path=tmp_path / "kv.sqlite3",
        background_writes=False,
    )
    state = create_app(settings=settings)
    state.task_store.add_task("x")
    shutdown(state)

    assert create_app(settings=settings).task_store.stats().total == 1


@pytest.fixture
def restore_root_logging():
    root = logging.getLogger()
    saved_handlers = list(root.handlers)
    saved_level = root.level
    yield root
    for h in list(root.handlers):
        root.removeHandler(h)
        h.close()
    for h in saved_handlers:
        root.addHandler(h)
    root.setLevel(saved_level)
    logging.captureWarnings(False)


def _console_handlers(root: logging.Logger) -> list[logging.Handler]:
    return [
        h for h in root.handlers if isinstance(h, logging.StreamHandler) and not isinstance(h, logging.FileHandler)
    ]


def test_setup_logging_writes_log_file(tmp_path: Path, restore_root_logging: logging.Logger) -> None:
    setup_logging(log_dir=tmp_path, console_level=logging.WARNING)
    logging.getLogger("checkoff.test").info("hello file")
    for h in restore_root_logging.handlers:
        h.flush()
    assert "hello file" in (tmp_path / "checkoff.log").read_text("utf-8")


def test_configure_logging_uses_log_level_from_env(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path, restore_root_logging: logging.Logger
) -> None:
    monkeypatch.setenv("CHECKOFF_LOG_LEVEL", "warning")
    monkeypatch.setenv("CHECKOFF_LOG_TO_FILE", "false")
    monkeypatch.setenv("CHECKOFF_DATA_DIR", str(tmp_path))

    configure_logging(Settings.from_env())

    consoles = _console_handlers(restore_root_logging)
    assert len(consoles) == 1
    assert consoles[0].level == logging.WARNING
    assert not any(isinstance(h, logging.FileHandler) for h in restore_root_logging.handlers)
    assert not (tmp_path / "checkoff.log").exists()


def test_configure_logging_writes_under_data_dir(tmp_path: Path, restore_root_logging: logging.Logger) -> None:
    settings = SimpleNamespace(log_level="DEBUG", log_to_file=True, data_dir=tmp_path / "data")

    configure_logging(settings)
    logging.getLogger("checkoff.test").debug("into the data dir")
    for h in restore_root_logging.handlers:
        h.flush()

    assert _console_handlers(restore_root_logging)[0].level == logging.DEBUG
    assert "into the data dir" in (tmp_path / "data" / "checkoff.log").read_text("utf-8")


def test_configure_logging_unknown_level_falls_back_to_info(
    tmp_path: Path, restore_root_logging: logging.Logger
) -> None:
    configure_logging(SimpleNamespace(log_level="chatty", log_to_file=False, data_dir=tmp_path))

    assert _console_handlers(restore_root_logging)[0].level == logging.INFO


@pytest.mark.parametrize(
    ("name", "level", "expected"),
    [
        ("checkoff.tasks.task_store", logging.DEBUG, True),
        ("checkoff.tasks.task_writer", logging.INFO, False),
        ("checkoff.tasks.task_writer", logging.WARNING, True),
        ("py.warnings", logging.WARNING, False),
        ("urllib3", logging.WARNING, False),
        ("urllib3", logging.ERROR, True),
    ],
)
def test_console_filter(name: str, level: int, expected: bool) -> None:
    record = logging.LogRecord(name, level, __file__, 1, "msg", None, None)
    assert _ConsoleNoiseFilter().filter(record) is expected


@pytest.mark.asyncio
async def test_async_app_state_survives_restart(settings: SimpleNamespace) -> None:
    state = await create_app_async(settings=settings)
    assert isinstance(state.writer, AsyncioTaskWriter)

    store = state.task_store
    report = store.add_task("Write report")
    store.add_task("Buy milk")
    assert report is not None
    store.toggle_task(report.id)
    await shutdown_async(state)

    restarted = await create_app_async(settings=settings)
    assert [(t.title, t.completed) for t in restarted.task_store.tasks()] == [
        ("Buy milk", False),
        ("Write report", True),
    ]
    await shutdown_async(restarted)


@pytest.mark.asyncio
async def test_shutdown_async_handles_thread_writers(settings: SimpleNamespace) -> None:
    settings.background_writes = True
    state = create_app(settings=settings)
    state.task_store.add_task("from a thread writer")

    await shutdown_async(state)

    restarted = create_app(settings=settings)
    assert restarted.task_store.stats().total == 1
    shutdown(restarted)
