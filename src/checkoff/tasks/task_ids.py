# src/checkoff/tasks/task_ids.py

from __future__ import annotations

import threading
import time
from collections.abc import Callable, Iterable


def _now_ms() -> int:
    return time.time_ns() // 1_000_000


class TaskIdGenerator:
    """
    Timestamp ids ("1718000000000"), strictly increasing within the process.

    Two tasks created in the same millisecond get consecutive values, so ids
    stay unique and still sort by creation time.
    """

    def __init__(self, clock: Callable[[], int] = _now_ms) -> None:
        self._clock = clock
        self._last = 0
        self._lock = threading.Lock()

    def observe(self, ids: Iterable[str]) -> None:
        """Advance past numeric ids that already exist (e.g. loaded from storage)."""
        with self._lock:
            for raw in ids:
                if raw.isascii() and raw.isdigit():
                    self._last = max(self._last, int(raw))

    def next_id(self) -> str:
        with self._lock:
            self._last = max(int(self._clock()), self._last + 1)
            return str(self._last)
