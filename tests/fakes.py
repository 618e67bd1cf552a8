# tests/fakes.py

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field

from taskly.tasks.task_models import Priority, Task, Theme


@dataclass(slots=True)
class FakeTaskRepo:
    """
    In-memory persistence adapter used as a store subscriber.

    Records every snapshot it is asked to save, so tests can assert
    "persisted once per mutation" and "not persisted on no-op".
    """

    initial: list[Task] = field(default_factory=list)
    saves: list[list[dict]] = field(default_factory=list)
    theme: Theme = Theme.DARK

    def save(self, tasks: Sequence[Task]) -> None:
        self.saves.append([t.to_dict() for t in tasks])

    def load(self) -> list[Task]:
        return list(self.initial)

    def save_theme(self, theme: Theme) -> None:
        self.theme = theme

    def load_theme(self) -> Theme:
        return self.theme


def make_task(
    task_id: str,
    text: str | None = None,
    *,
    created_at: int = 0,
    done: bool = False,
    pinned: bool = False,
    priority: Priority = Priority.MEDIUM,
    category: str = "",
    due_date: str | None = None,
    note: str = "",
) -> Task:
    return Task(
        id=task_id,
        text=text or task_id,
        created_at=created_at,
        done=done,
        pinned=pinned,
        priority=priority,
        category=category,
        due_date=due_date,
        note=note,
    )
