"""
CheckOff: personal task-list core.

Components:
- tasks/: task model, codec, id generator, TaskStore, writers
- storage/: key-value store, persistence adapter, errors
- bootstrap.py: composition root (configure_logging, create_app / shutdown and their async variants)
"""

from .bootstrap import configure_logging, create_app, create_app_async, shutdown, shutdown_async
from .storage.errors import CheckoffError, MalformedData, StorageUnavailable
from .tasks.task_models import Task, TaskFilter, TaskStats
from .tasks.task_store import TaskStore

__all__ = [
    "CheckoffError",
    "MalformedData",
    "StorageUnavailable",
    "Task",
    "TaskFilter",
    "TaskStats",
    "TaskStore",
    "configure_logging",
    "create_app",
    "create_app_async",
    "shutdown",
    "shutdown_async",
]
