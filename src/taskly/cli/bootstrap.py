# src/taskly/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures local (gitignored) directories exist,
- loads the persisted snapshot into a TaskStore,
- subscribes persistence to store changes and wires everything into AppState.
"""

from __future__ import annotations

import logging

from ..config import get_settings
from ..core.clock import SystemClock
from ..core.ports import Clock
from ..core.state import AppState
from ..storage.local_storage import LocalStorage, TaskPersistence
from ..tasks.task_models import SortMode
from ..tasks.task_store import TaskStore
from ..tasks.task_view import ViewCriteria

logger = logging.getLogger(__name__)


def _ensure_local_dirs(settings) -> None:
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    settings.storage_path.parent.mkdir(parents=True, exist_ok=True)


def create_initial_state(*, settings=None, clock: Clock | None = None) -> AppState:
    """
    Create AppState from the provided settings.

    Keeping settings injectable makes the app easier to test and avoids hidden global config reads.
    If settings is None, falls back to get_settings().
    """
    if settings is None:
        settings = get_settings()
    clock = clock or SystemClock()

    _ensure_local_dirs(settings)

    persistence = TaskPersistence(LocalStorage(settings.storage_path))
    store = TaskStore(persistence.load(), clock=clock)
    store.subscribe(persistence.save)

    sort = SortMode.parse(getattr(settings, "default_sort", None)) or SortMode.DATE_DESC

    state = AppState(
        settings=settings,
        store=store,
        persistence=persistence,
        clock=clock,
        criteria=ViewCriteria(sort=sort),
        theme=persistence.load_theme(),
    )
    logger.info(
        "State ready: %d tasks, theme=%s, storage=%s",
        len(store),
        state.theme.value,
        settings.storage_path,
    )
    return state
