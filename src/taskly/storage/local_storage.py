# src/taskly/storage/local_storage.py

from __future__ import annotations

import contextlib
import json
import logging
import os
from collections.abc import Sequence
from pathlib import Path

from ..tasks.task_models import Task, Theme

logger = logging.getLogger(__name__)

TASKS_KEY = "taskly_tasks"
THEME_KEY = "taskly_theme"


class LocalStorage:
    """
    String key/value store kept in one JSON file.

    Values are strings, as in browser localStorage; callers serialize.
    Writes are atomic (tmp file + os.replace) and best-effort: a failed write
    is logged and otherwise looks like success.
    """

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)
        self._path.parent.mkdir(parents=True, exist_ok=True)

    @property
    def path(self) -> Path:
        return self._path

    def _read_all(self) -> dict[str, str]:
        if not self._path.exists():
            return {}
        try:
            data = json.loads(self._path.read_text("utf-8"))
        except Exception:
            logger.warning("Storage file %s is unreadable; treating as empty.", self._path, exc_info=True)
            return {}
        if not isinstance(data, dict):
            logger.warning("Storage file %s is not a JSON object; treating as empty.", self._path)
            return {}
        return {k: v for k, v in data.items() if isinstance(k, str) and isinstance(v, str)}

    def _write_all(self, items: dict[str, str]) -> None:
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            tmp = self._path.with_suffix(".tmp")
            tmp.write_text(json.dumps(items, ensure_ascii=False, indent=2), "utf-8")
            os.replace(tmp, self._path)
            with contextlib.suppress(Exception):
                os.chmod(self._path, 0o600)
        except Exception:
            logger.exception("Failed to write storage file %s", self._path)

    def get_item(self, key: str) -> str | None:
        return self._read_all().get(key)

    def set_item(self, key: str, value: str) -> None:
        items = self._read_all()
        items[key] = value
        self._write_all(items)

    def remove_item(self, key: str) -> None:
        items = self._read_all()
        if items.pop(key, None) is not None:
            self._write_all(items)


class TaskPersistence:
    """Task snapshot + theme preference on top of LocalStorage."""

    def __init__(self, storage: LocalStorage) -> None:
        self._storage = storage

    def save(self, tasks: Sequence[Task]) -> None:
        payload = json.dumps([t.to_dict() for t in tasks], ensure_ascii=False)
        self._storage.set_item(TASKS_KEY, payload)
        logger.debug("Saved %d tasks to %s", len(tasks), self._storage.path)

    def load(self) -> list[Task]:
        """Snapshot from storage; missing or malformed data loads as no tasks."""
        raw = self._storage.get_item(TASKS_KEY)
        if not raw:
            return []
        try:
            data = json.loads(raw)
        except ValueError:
            logger.warning("Stored task snapshot is not valid JSON; starting empty.")
            return []
        if not isinstance(data, list):
            logger.warning("Stored task snapshot is not a list; starting empty.")
            return []

        tasks = [Task.from_dict(item) for item in data if isinstance(item, dict)]
        logger.info("Loaded %d tasks from %s", len(tasks), self._storage.path)
        return tasks

    def save_theme(self, theme: Theme) -> None:
        self._storage.set_item(THEME_KEY, Theme(theme).value)

    def load_theme(self) -> Theme:
        return Theme.parse(self._storage.get_item(THEME_KEY))
