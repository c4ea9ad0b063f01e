# tests/conftest.py

from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace

import pytest

from checkoff.tasks.task_ids import TaskIdGenerator
from checkoff.tasks.task_store import TaskStore

from .fakes import FakePersistence, RecordingScheduler


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with bootstrap.create_app.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated and deterministic.
    """
    data_dir = tmp_path / "data"
    return SimpleNamespace(
        app_name="checkoff-test",
        log_level="DEBUG",
        log_to_file=False,
        data_dir=data_dir,
        storage_path=data_dir / "storage.sqlite3",
        storage_key="checkoff_tasks",
        background_writes=False,
        flush_timeout_seconds=5.0,
    )


@pytest.fixture()
def persistence() -> FakePersistence:
    return FakePersistence()


@pytest.fixture()
def scheduler() -> RecordingScheduler:
    return RecordingScheduler()


@pytest.fixture()
def clock() -> list[int]:
    """Mutable fake clock (milliseconds) shared with the id generator."""
    return [1_700_000_000_000]


@pytest.fixture()
def store(persistence: FakePersistence, scheduler: RecordingScheduler, clock: list[int]) -> TaskStore:
    """
    Hydrated TaskStore over in-memory fakes.

    The id clock is frozen, so ids are deterministic and consecutive.
    """
    s = TaskStore(persistence, scheduler, id_generator=TaskIdGenerator(clock=lambda: clock[0]))
    s.hydrate()
    return s
