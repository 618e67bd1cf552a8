# tests/conftest.py

from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace

import pytest

from taskly.core.clock import FixedClock
from taskly.core.state import AppState
from taskly.tasks.task_models import SortMode
from taskly.tasks.task_store import TaskStore

from .fakes import FakeTaskRepo


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with bootstrap and commands.

    We intentionally use a SimpleNamespace rather than reading the real
    environment, to keep unit tests isolated and deterministic.
    """
    return SimpleNamespace(
        app_name="taskly-test",
        log_level="DEBUG",
        log_to_file=False,
        data_dir=tmp_path / "data",
        storage_path=tmp_path / "data" / "storage.json",
        export_path=tmp_path / "taskly-backup.json",
        default_sort=SortMode.DATE_DESC,
    )


@pytest.fixture()
def clock() -> FixedClock:
    return FixedClock.at("2024-06-10")


@pytest.fixture()
def repo() -> FakeTaskRepo:
    return FakeTaskRepo()


@pytest.fixture()
def store(clock: FixedClock, repo: FakeTaskRepo) -> TaskStore:
    s = TaskStore(clock=clock)
    s.subscribe(repo.save)
    return s


@pytest.fixture()
def state(settings: SimpleNamespace, store: TaskStore, repo: FakeTaskRepo, clock: FixedClock) -> AppState:
    """AppState wired with the fake repo and a fixed clock."""
    return AppState(settings=settings, store=store, persistence=repo, clock=clock)
