# src/checkoff/core/state.py

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from ..storage.persistence import TaskListPersistence
from ..tasks.task_store import TaskStore


@dataclass(slots=True)
class AppState:
    # Settings object (real Settings or a test namespace).
    settings: Any

    persistence: TaskListPersistence
    task_store: TaskStore

    # Whatever SaveScheduler the store was built with; shutdown flushes it if it can.
    writer: Any
