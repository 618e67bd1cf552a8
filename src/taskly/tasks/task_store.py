# src/taskly/tasks/task_store.py

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Any

from ..core.clock import SystemClock
from ..core.ports import ChangeListener, Clock
from .errors import EmptyImportError, TaskValidationError
from .task_models import Priority, Subtask, Task, new_id

logger = logging.getLogger(__name__)


def _clean_text(text: str | None, what: str = "task text") -> str:
    s = (text or "").strip()
    if not s:
        raise TaskValidationError(f"{what} is required")
    return s


def _opt(value: str | None) -> str | None:
    if value is None:
        return None
    s = str(value).strip()
    return s or None


class TaskStore:
    """
    In-memory task collection; the only writer of task state.

    Every successful mutation notifies subscribers synchronously with the
    full collection before returning. Persistence is one such subscriber.
    Operations that find nothing to change (unknown id, empty bulk op)
    return None/False/0 and notify nobody.

    Collection order is the manual display order: new and imported tasks
    are prepended.
    """

    def __init__(self, tasks: Iterable[Task] | None = None, *, clock: Clock | None = None) -> None:
        self._tasks: list[Task] = list(tasks or [])
        self._clock: Clock = clock or SystemClock()
        self._listeners: list[ChangeListener] = []
        logger.debug("TaskStore ready total=%s", len(self._tasks))

    # ---- observation ----

    def subscribe(self, listener: ChangeListener) -> None:
        self._listeners.append(listener)

    def _changed(self, op: str) -> None:
        logger.debug("TaskStore %s total=%s", op, len(self._tasks))
        snapshot = tuple(self._tasks)
        for listener in self._listeners:
            listener(snapshot)

    # ---- reads ----

    @property
    def tasks(self) -> tuple[Task, ...]:
        return tuple(self._tasks)

    def __len__(self) -> int:
        return len(self._tasks)

    def get(self, task_id: str) -> Task | None:
        for t in self._tasks:
            if t.id == task_id:
                return t
        return None

    def _index_of(self, task_id: str) -> int:
        for i, t in enumerate(self._tasks):
            if t.id == task_id:
                return i
        return -1

    # ---- single-task mutations ----

    def add_task(
        self,
        text: str,
        *,
        priority: Priority = Priority.MEDIUM,
        category: str = "",
        due_date: str | None = None,
        color: str | None = None,
        note: str = "",
    ) -> Task:
        task = Task(
            id=new_id(),
            text=_clean_text(text),
            created_at=self._clock.now_ms(),
            priority=priority,
            category=(category or "").strip(),
            due_date=_opt(due_date),
            color=_opt(color),
            note=(note or "").strip(),
        )
        self._tasks.insert(0, task)
        self._changed("add")
        return task

    def toggle_done(self, task_id: str) -> Task | None:
        task = self.get(task_id)
        if task is None:
            return None
        task.done = not task.done
        self._changed("toggle_done")
        return task

    def toggle_pin(self, task_id: str) -> Task | None:
        task = self.get(task_id)
        if task is None:
            return None
        task.pinned = not task.pinned
        self._changed("toggle_pin")
        return task

    def delete_task(self, task_id: str) -> bool:
        """Remove every task carrying this id (imports may duplicate ids)."""
        kept = [t for t in self._tasks if t.id != task_id]
        if len(kept) == len(self._tasks):
            return False
        self._tasks = kept
        self._changed("delete")
        return True

    def edit_task(
        self,
        task_id: str,
        *,
        text: str,
        note: str = "",
        priority: Priority = Priority.MEDIUM,
        category: str = "",
        due_date: str | None = None,
        color: str | None = None,
    ) -> Task | None:
        """Overwrite the mutable fields; id, done, pinned, subtasks and createdAt stay."""
        clean = _clean_text(text)
        task = self.get(task_id)
        if task is None:
            return None

        task.text = clean
        task.note = (note or "").strip()
        task.priority = priority
        task.category = (category or "").strip()
        task.due_date = _opt(due_date)
        task.color = _opt(color)
        self._changed("edit")
        return task

    # ---- subtasks ----

    def add_subtask(self, task_id: str, text: str) -> Subtask | None:
        task = self.get(task_id)
        clean = (text or "").strip()
        if task is None or not clean:
            return None
        sub = Subtask(id=new_id(), text=clean)
        task.subtasks.append(sub)
        self._changed("add_subtask")
        return sub

    def toggle_subtask(self, task_id: str, subtask_id: str) -> Subtask | None:
        task = self.get(task_id)
        sub = task.find_subtask(subtask_id) if task is not None else None
        if sub is None:
            return None
        sub.done = not sub.done
        self._changed("toggle_subtask")
        return sub

    def delete_subtask(self, task_id: str, subtask_id: str) -> bool:
        task = self.get(task_id)
        if task is None or task.find_subtask(subtask_id) is None:
            return False
        task.subtasks = [s for s in task.subtasks if s.id != subtask_id]
        self._changed("delete_subtask")
        return True

    # ---- bulk operations ----

    def mark_all_done(self) -> bool:
        """
        All-or-nothing toggle: if every task is done, mark all active,
        otherwise mark all done. Returns the value applied.
        """
        target = not all(t.done for t in self._tasks)
        for t in self._tasks:
            t.done = target
        self._changed("mark_all_done")
        return target

    def clear_done(self) -> int:
        count = sum(1 for t in self._tasks if t.done)
        if not count:
            return 0
        self._tasks = [t for t in self._tasks if not t.done]
        self._changed("clear_done")
        return count

    def clear_all(self) -> int:
        count = len(self._tasks)
        if not count:
            return 0
        self._tasks = []
        self._changed("clear_all")
        return count

    def reorder(self, source_id: str, dest_id: str) -> bool:
        """
        Move source to the index dest occupies *before* source is removed.

        Moving down therefore lands the task just after dest, moving up lands
        it just before dest. Sort mode is not touched here.
        """
        if not source_id or not dest_id or source_id == dest_id:
            return False
        src_idx = self._index_of(source_id)
        dest_idx = self._index_of(dest_id)
        if src_idx < 0 or dest_idx < 0:
            return False

        moved = self._tasks.pop(src_idx)
        self._tasks.insert(dest_idx, moved)
        self._changed("reorder")
        return True

    # ---- import / export ----

    def import_merge(self, imported: Iterable[Task]) -> int:
        """
        Prepend imported tasks as-is. Ids are kept verbatim; collisions with
        existing tasks are not resolved.
        """
        batch = list(imported)
        if not batch:
            raise EmptyImportError("no tasks found")
        self._tasks = batch + self._tasks
        self._changed("import")
        return len(batch)

    def export_snapshot(self) -> dict[str, Any]:
        exported_at = self._clock.now().isoformat(timespec="milliseconds").replace("+00:00", "Z")
        return {
            "tasks": [t.to_dict() for t in self._tasks],
            "exportedAt": exported_at,
        }
