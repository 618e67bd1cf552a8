# src/taskly/core/state.py

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from ..tasks.task_models import Task, Theme
from ..tasks.task_store import TaskStore
from ..tasks.task_view import TaskView, ViewCriteria, compute_view
from .clock import today_iso
from .ports import Clock, TaskRepo


@dataclass
class AppState:
    """
    Explicit handle passed to the presentation layer.

    View criteria and theme belong to the presentation side; the store never
    reads them.
    """

    settings: Any
    store: TaskStore
    persistence: TaskRepo
    clock: Clock

    criteria: ViewCriteria = field(default_factory=ViewCriteria)
    theme: Theme = Theme.DARK

    # Tasks in the order last shown to the user (for "/done 3" style addressing).
    last_view: list[Task] = field(default_factory=list)

    def compute_view(self) -> TaskView:
        view = compute_view(self.store.tasks, self.criteria, today=today_iso(self.clock))
        self.last_view = list(view.tasks)
        return view
