# src/checkoff/tasks/task_store.py

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from dataclasses import replace

from ..core.ports import BlobPersistence, SaveScheduler, StoreListener
from ..storage.errors import MalformedData, StorageUnavailable
from .task_codec import deserialize, serialize
from .task_ids import TaskIdGenerator
from .task_models import Task, TaskFilter, TaskStats

logger = logging.getLogger(__name__)


class TaskStore:
    """
    In-memory owner of the task list and the active filter.

    Every mutation:
    - runs under one lock (one writer at a time, snapshot-consistent reads)
    - replaces the list with a new one (Tasks are frozen)
    - submits a full serialized snapshot to the save scheduler, without waiting
    - notifies listeners after the lock is released

    Mutations that change nothing (empty title, unknown id, nothing to clear)
    neither notify nor write.
    """

    def __init__(
        self,
        persistence: BlobPersistence,
        scheduler: SaveScheduler,
        *,
        id_generator: TaskIdGenerator | None = None,
    ) -> None:
        self._persistence = persistence
        self._scheduler = scheduler
        self._ids = id_generator or TaskIdGenerator()

        self._lock = threading.RLock()
        self._tasks: list[Task] = []
        self._filter = TaskFilter.ALL
        self._hydration_claimed = False
        self._hydrated = False
        self._mutated = False

        self._listeners: list[StoreListener] = []

    # ---- lifecycle ----

    @property
    def hydrated(self) -> bool:
        return self._hydrated

    def hydrate(self) -> None:
        """
        Load prior state once.

        Storage failures and malformed blobs fall back to an empty list; they
        are logged and never raised or retried. If the list was already
        mutated before hydrate() was called, the stored blob is ignored:
        in-memory state is authoritative.

        The load itself runs without the lock, so readers are never stuck
        behind storage I/O. Tasks created while the load is in flight are
        kept in front of the stored ones (they are newer) and the merged
        list is written back.
        """
        with self._lock:
            if self._hydration_claimed:
                logger.debug("hydrate() called again; ignoring")
                return
            self._hydration_claimed = True

            if self._mutated:
                self._hydrated = True
                logger.warning("Task list mutated before hydration; stored state not applied")
                return

        loaded = self._load_stored()

        with self._lock:
            self._ids.observe(t.id for t in loaded)
            if self._mutated:
                # Only tasks created during the load can be in memory here.
                present = {t.id for t in self._tasks}
                merged = self._tasks + [t for t in loaded if t.id not in present]
                logger.info("Merging %d task(s) created during hydration", len(self._tasks))
                self._commit(merged)
            else:
                self._tasks = loaded
            self._hydrated = True
            total = len(self._tasks)

        logger.info("TaskStore hydrated total=%d", total)
        self._notify()

    def _load_stored(self) -> list[Task]:
        try:
            blob = self._persistence.load()
        except StorageUnavailable as e:
            logger.warning("Unable to load tasks, starting empty: %s", e)
            return []
        except Exception:
            logger.exception("Unexpected failure while loading tasks, starting empty")
            return []

        if blob is None or blob == "":
            return []

        try:
            return deserialize(blob)
        except MalformedData as e:
            logger.warning("Stored tasks are malformed, starting empty: %s", e)
            return []

    # ---- listeners ----

    def subscribe(self, listener: StoreListener) -> Callable[[], None]:
        """Register a listener; returns a callable that unregisters it."""
        with self._lock:
            self._listeners.append(listener)

        def unsubscribe() -> None:
            with self._lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return unsubscribe

    def _notify(self) -> None:
        with self._lock:
            listeners = list(self._listeners)
        for listener in listeners:
            try:
                listener(self)
            except Exception:
                logger.exception("Task store listener failed")

    # ---- mutations ----

    def _commit(self, tasks: list[Task]) -> None:
        """Swap in a new list and schedule its save. Caller holds the lock."""
        self._tasks = tasks
        self._mutated = True
        self._scheduler.submit(serialize(tasks))

    def add_task(self, raw_title: str) -> Task | None:
        title = (raw_title or "").strip()
        if not title:
            return None

        with self._lock:
            task = Task(id=self._ids.next_id(), title=title)
            self._commit([task, *self._tasks])

        logger.debug("Task added id=%s", task.id)
        self._notify()
        return task

    def toggle_task(self, task_id: str) -> None:
        with self._lock:
            if not any(t.id == task_id for t in self._tasks):
                return
            self._commit([replace(t, completed=not t.completed) if t.id == task_id else t for t in self._tasks])

        logger.debug("Task toggled id=%s", task_id)
        self._notify()

    def delete_task(self, task_id: str) -> None:
        with self._lock:
            for i, t in enumerate(self._tasks):
                if t.id == task_id:
                    self._commit(self._tasks[:i] + self._tasks[i + 1 :])
                    break
            else:
                return

        logger.debug("Task deleted id=%s", task_id)
        self._notify()

    def clear_completed(self) -> None:
        with self._lock:
            remaining = [t for t in self._tasks if not t.completed]
            removed = len(self._tasks) - len(remaining)
            if removed == 0:
                return
            self._commit(remaining)

        logger.debug("Cleared completed tasks count=%d", removed)
        self._notify()

    def set_filter(self, f: TaskFilter | str) -> None:
        """
        Change the view filter. Not persisted; task data is untouched.

        Unknown filter values are logged and ignored (the current filter stays).
        """
        try:
            new_filter = TaskFilter(f)
        except ValueError:
            logger.warning("Ignoring unknown task filter %r", f)
            return
        with self._lock:
            if new_filter is self._filter:
                return
            self._filter = new_filter
        self._notify()

    # ---- queries ----

    @property
    def filter(self) -> TaskFilter:
        return self._filter

    def tasks(self) -> list[Task]:
        with self._lock:
            return list(self._tasks)

    def get_task(self, task_id: str) -> Task | None:
        with self._lock:
            for t in self._tasks:
                if t.id == task_id:
                    return t
        return None

    def filtered_tasks(self) -> list[Task]:
        with self._lock:
            f = self._filter
            return [t for t in self._tasks if f.matches(t)]

    def stats(self) -> TaskStats:
        with self._lock:
            return TaskStats.from_tasks(self._tasks)
