# src/taskly/tasks/task_view.py

"""
View engine: a pure function of (tasks, criteria, today) -> (tasks, stats, categories).

Filtering runs in a fixed order: category, text search, status.
Non-manual sorts put pinned tasks first and are stable, so equal-ranked
tasks keep their collection order.
"""

from __future__ import annotations

import locale
import math
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import Any

from ..core.clock import is_overdue
from .task_models import Priority, SortMode, StatusFilter, Task

_PRIORITY_RANK = {Priority.HIGH: 0, Priority.MEDIUM: 1, Priority.LOW: 2}


@dataclass(frozen=True, slots=True)
class ViewCriteria:
    status: StatusFilter = StatusFilter.ALL
    category: str = ""
    search: str = ""
    sort: SortMode = SortMode.DATE_DESC


@dataclass(frozen=True, slots=True)
class TaskStats:
    total: int
    done: int
    pending: int
    overdue: int
    completion_percent: int


@dataclass(frozen=True, slots=True)
class TaskView:
    tasks: list[Task]
    stats: TaskStats
    categories: list[str]


def _matches_search(task: Task, needle: str) -> bool:
    return (
        needle in task.text.lower()
        or needle in (task.note or "").lower()
        or needle in (task.category or "").lower()
    )


def filter_tasks(tasks: Sequence[Task], criteria: ViewCriteria, today: str) -> list[Task]:
    out = list(tasks)

    if criteria.category:
        out = [t for t in out if t.category == criteria.category]

    if criteria.search:
        needle = criteria.search.lower()
        out = [t for t in out if _matches_search(t, needle)]

    status = criteria.status
    if status is StatusFilter.ACTIVE:
        out = [t for t in out if not t.done]
    elif status is StatusFilter.DONE:
        out = [t for t in out if t.done]
    elif status is StatusFilter.OVERDUE:
        out = [t for t in out if is_overdue(t, today)]
    elif status is StatusFilter.PINNED:
        out = [t for t in out if t.pinned]

    return out


def _alpha_key(task: Task) -> tuple[str, str]:
    # case-insensitive first, then case as a tie-breaker
    return locale.strxfrm(task.text.casefold()), locale.strxfrm(task.text)


def _due_key(task: Task) -> tuple[bool, str]:
    return task.due_date is None, task.due_date or ""


_SORT_KEYS: dict[SortMode, Callable[[Task], Any]] = {
    SortMode.DATE_DESC: lambda t: -t.created_at,
    SortMode.DATE_ASC: lambda t: t.created_at,
    SortMode.ALPHA: _alpha_key,
    SortMode.DUE: _due_key,
    SortMode.PRIORITY: lambda t: _PRIORITY_RANK.get(t.priority, 1),
}


def sort_tasks(tasks: Sequence[Task], mode: SortMode) -> list[Task]:
    if mode is SortMode.MANUAL:
        return list(tasks)
    key = _SORT_KEYS[mode]
    return sorted(tasks, key=lambda t: (not t.pinned, key(t)))


def compute_stats(tasks: Sequence[Task], today: str) -> TaskStats:
    total = len(tasks)
    done = sum(1 for t in tasks if t.done)
    overdue = sum(1 for t in tasks if is_overdue(t, today))
    # half-up rounding, not banker's
    pct = math.floor(done * 100 / total + 0.5) if total else 0
    return TaskStats(
        total=total,
        done=done,
        pending=total - done,
        overdue=overdue,
        completion_percent=pct,
    )


def category_chips(tasks: Sequence[Task]) -> list[str]:
    """Distinct non-empty categories in first-seen order, ignoring any active filter."""
    seen: dict[str, None] = {}
    for t in tasks:
        if t.category:
            seen.setdefault(t.category, None)
    return list(seen)


def compute_view(tasks: Sequence[Task], criteria: ViewCriteria, *, today: str) -> TaskView:
    visible = sort_tasks(filter_tasks(tasks, criteria, today), criteria.sort)
    return TaskView(
        tasks=visible,
        stats=compute_stats(tasks, today),
        categories=category_chips(tasks),
    )
