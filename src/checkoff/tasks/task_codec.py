# src/checkoff/tasks/task_codec.py

"""
TaskList <-> blob encoding.

The blob is a JSON array of {"id", "title", "completed"} objects, newest first.
It is the only thing the persistence layer ever sees.
"""

from __future__ import annotations

import json
from collections.abc import Iterable
from typing import Any

from ..storage.errors import MalformedData
from .task_models import Task


def serialize(tasks: Iterable[Task]) -> str:
    payload = [{"id": t.id, "title": t.title, "completed": t.completed} for t in tasks]
    return json.dumps(payload, ensure_ascii=False)


def _task_from_obj(obj: Any, index: int) -> Task:
    if not isinstance(obj, dict):
        raise MalformedData(f"entry #{index} is not an object")

    task_id = obj.get("id")
    title = obj.get("title")
    completed = obj.get("completed")

    if not isinstance(task_id, str) or not task_id:
        raise MalformedData(f"entry #{index} has no string id")
    if not isinstance(title, str):
        raise MalformedData(f"entry #{index} has no string title")
    if not isinstance(completed, bool):
        raise MalformedData(f"entry #{index} has non-boolean completed")

    return Task(id=task_id, title=title, completed=completed)


def deserialize(blob: str) -> list[Task]:
    """
    Decode a stored blob.

    Raises MalformedData if the blob is not a JSON array of well-formed tasks.
    A single bad entry rejects the whole blob: a partially decoded list would
    be written back on the next mutation and silently lose data.
    """
    try:
        data = json.loads(blob)
    except (TypeError, ValueError) as e:
        raise MalformedData(f"stored task list is not valid JSON: {e}") from e

    if not isinstance(data, list):
        raise MalformedData(f"stored task list is {type(data).__name__}, expected list")

    return [_task_from_obj(obj, i) for i, obj in enumerate(data)]
