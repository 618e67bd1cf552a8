# tests/test_bootstrap.py

from __future__ import annotations

import logging
from pathlib import Path
from types import SimpleNamespace

from taskly.cli.bootstrap import create_initial_state
from taskly.config import Settings
from taskly.core.clock import FixedClock
from taskly.logging_setup import setup_logging
from taskly.tasks.task_models import SortMode, Theme


def test_state_survives_restart(settings: SimpleNamespace, clock: FixedClock) -> None:
    first = create_initial_state(settings=settings, clock=clock)
    task = first.store.add_task("remember me")
    first.store.toggle_pin(task.id)
    first.persistence.save_theme(Theme.LIGHT)

    second = create_initial_state(settings=settings, clock=clock)

    [loaded] = second.store.tasks
    assert loaded.id == task.id
    assert loaded.pinned is True
    assert second.theme is Theme.LIGHT
    assert settings.storage_path.exists()


def test_default_sort_comes_from_settings(settings: SimpleNamespace, clock: FixedClock) -> None:
    settings.default_sort = "priority"
    state = create_initial_state(settings=settings, clock=clock)
    assert state.criteria.sort is SortMode.PRIORITY


def test_settings_from_env(monkeypatch, tmp_path: Path) -> None:
    monkeypatch.setenv("TASKLY_DATA_DIR", str(tmp_path / "d"))
    monkeypatch.setenv("TASKLY_DEFAULT_SORT", "ALPHA")
    monkeypatch.setenv("TASKLY_LOG_TO_FILE", "no")
    monkeypatch.delenv("TASKLY_STORAGE_PATH", raising=False)

    s = Settings.from_env()

    assert s.data_dir == tmp_path / "d"
    assert s.storage_path == tmp_path / "d" / "storage.json"
    assert s.default_sort is SortMode.ALPHA
    assert s.log_to_file is False


def test_settings_fall_back_on_bad_sort(monkeypatch) -> None:
    monkeypatch.setenv("TASKLY_DEFAULT_SORT", "shuffle")
    assert Settings.from_env().default_sort is SortMode.DATE_DESC


def test_setup_logging_writes_log_file(tmp_path: Path) -> None:
    root = logging.getLogger()
    saved = list(root.handlers), root.level
    try:
        setup_logging(log_dir=tmp_path, console_level=logging.WARNING)
        logging.getLogger("taskly.test").debug("hello file")
        for h in logging.getLogger().handlers:
            h.flush()
        assert "hello file" in (tmp_path / "taskly.log").read_text("utf-8")
    finally:
        for h in list(root.handlers):
            root.removeHandler(h)
            h.close()
        for h in saved[0]:
            root.addHandler(h)
        root.setLevel(saved[1])
        logging.captureWarnings(False)
