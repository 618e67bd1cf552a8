# src/taskly/tasks/task_io.py

"""
Backup file format.

Export writes {"tasks": [...], "exportedAt": "<ISO-8601>"} pretty-printed.
Import accepts that object or a bare array of task objects.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from .errors import EmptyImportError, MalformedImportError
from .task_models import Task
from .task_store import TaskStore

logger = logging.getLogger(__name__)

DEFAULT_EXPORT_NAME = "taskly-backup.json"


def dump_export(snapshot: dict[str, Any]) -> str:
    return json.dumps(snapshot, ensure_ascii=False, indent=2)


def parse_import(raw: str | bytes) -> list[Task]:
    try:
        data = json.loads(raw)
    except (TypeError, ValueError) as e:
        raise MalformedImportError("invalid JSON file") from e

    if isinstance(data, list):
        records = data
    elif isinstance(data, dict) and isinstance(data.get("tasks"), list):
        records = data["tasks"]
    else:
        raise MalformedImportError("expected a task array or an object with a 'tasks' array")

    if not all(isinstance(r, dict) for r in records):
        raise MalformedImportError("task entries must be JSON objects")
    if not records:
        raise EmptyImportError("no tasks found")

    return [Task.from_dict(r) for r in records]


def write_export(store: TaskStore, path: str | Path) -> Path:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    snapshot = store.export_snapshot()
    path.write_text(dump_export(snapshot), "utf-8")
    logger.info("Exported %d tasks to %s", len(snapshot["tasks"]), path)
    return path


def read_import(path: str | Path) -> list[Task]:
    path = Path(path)
    try:
        raw = path.read_bytes()
    except OSError as e:
        raise MalformedImportError(f"cannot read {path}") from e
    tasks = parse_import(raw)
    logger.info("Read %d tasks from %s", len(tasks), path)
    return tasks
