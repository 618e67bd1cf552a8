# src/taskly/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the core.

The store and view engine depend on Protocols instead of concrete
implementations, so storage and time sources stay swappable in tests.
"""

from collections.abc import Sequence
from datetime import date, datetime
from typing import Protocol

from ..tasks.task_models import Task, Theme


class Clock(Protocol):
    def now(self) -> datetime: ...
    def now_ms(self) -> int: ...
    def today(self) -> date: ...


class ChangeListener(Protocol):
    """Called synchronously after every successful store mutation."""

    def __call__(self, tasks: Sequence[Task]) -> None: ...


class TaskRepo(Protocol):
    """Persistence adapter: one flat snapshot of the collection + theme preference."""

    def save(self, tasks: Sequence[Task]) -> None: ...
    def load(self) -> list[Task]: ...
    def save_theme(self, theme: Theme) -> None: ...
    def load_theme(self) -> Theme: ...
