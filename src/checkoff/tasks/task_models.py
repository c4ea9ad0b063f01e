# src/checkoff/tasks/task_models.py

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum


class TaskFilter(StrEnum):
    """
    View selector over the task list.

    Transient: never persisted, every process starts with ALL.
    """

    ALL = "all"
    ACTIVE = "active"
    COMPLETED = "completed"

    def matches(self, task: Task) -> bool:
        if self is TaskFilter.ACTIVE:
            return not task.completed
        if self is TaskFilter.COMPLETED:
            return task.completed
        return True


@dataclass(frozen=True, slots=True)
class Task:
    id: str
    title: str
    completed: bool = False


@dataclass(frozen=True, slots=True)
class TaskStats:
    total: int
    completed: int
    active: int
    completion_rate: int  # percent, 0..100

    @classmethod
    def from_tasks(cls, tasks: list[Task]) -> TaskStats:
        total = len(tasks)
        done = sum(1 for t in tasks if t.completed)
        if total == 0:
            rate = 0
        else:
            # Half-up rounding of 100 * done / total in integer arithmetic.
            rate = (200 * done + total) // (2 * total)
        return cls(total=total, completed=done, active=total - done, completion_rate=rate)
