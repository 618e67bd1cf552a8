# tests/test_local_storage.py

from __future__ import annotations

import json
from pathlib import Path

from taskly.storage.local_storage import TASKS_KEY, THEME_KEY, LocalStorage, TaskPersistence
from taskly.tasks.task_models import Priority, Theme
from taskly.tasks.task_store import TaskStore

from .fakes import make_task


def test_save_and_load_round_trip(tmp_path: Path) -> None:
    persistence = TaskPersistence(LocalStorage(tmp_path / "storage.json"))
    tasks = [
        make_task("a", "Pay rent", priority=Priority.HIGH, due_date="2024-07-01", created_at=5),
        make_task("b", "Read", category="study", note="ch. 3", done=True),
    ]

    persistence.save(tasks)
    loaded = persistence.load()

    assert [t.to_dict() for t in loaded] == [t.to_dict() for t in tasks]


def test_snapshot_uses_fixed_key_and_camel_case_fields(tmp_path: Path) -> None:
    path = tmp_path / "storage.json"
    TaskPersistence(LocalStorage(path)).save([make_task("a", due_date="2024-07-01", created_at=7)])

    items = json.loads(path.read_text("utf-8"))
    [record] = json.loads(items[TASKS_KEY])
    assert record["dueDate"] == "2024-07-01"
    assert record["createdAt"] == 7


def test_load_missing_storage_is_empty(tmp_path: Path) -> None:
    assert TaskPersistence(LocalStorage(tmp_path / "nothing.json")).load() == []


def test_load_malformed_payload_degrades_to_empty(tmp_path: Path) -> None:
    storage = LocalStorage(tmp_path / "storage.json")
    storage.set_item(TASKS_KEY, "{not json")
    assert TaskPersistence(storage).load() == []

    storage.set_item(TASKS_KEY, '{"tasks": []}')
    assert TaskPersistence(storage).load() == []


def test_load_corrupt_storage_file_degrades_to_empty(tmp_path: Path) -> None:
    path = tmp_path / "storage.json"
    path.write_text("\x00 definitely not json", "utf-8")
    storage = LocalStorage(path)

    assert storage.get_item(TASKS_KEY) is None
    assert TaskPersistence(storage).load() == []

    # next write replaces the corrupt file
    storage.set_item(THEME_KEY, "light")
    assert storage.get_item(THEME_KEY) == "light"


def test_theme_defaults_to_dark_and_persists(tmp_path: Path) -> None:
    storage = LocalStorage(tmp_path / "storage.json")
    persistence = TaskPersistence(storage)
    assert persistence.load_theme() is Theme.DARK

    persistence.save_theme(Theme.LIGHT)
    assert TaskPersistence(LocalStorage(tmp_path / "storage.json")).load_theme() is Theme.LIGHT

    storage.set_item(THEME_KEY, "neon")
    assert persistence.load_theme() is Theme.DARK


def test_theme_and_tasks_share_one_file_without_clobbering(tmp_path: Path) -> None:
    storage = LocalStorage(tmp_path / "storage.json")
    persistence = TaskPersistence(storage)
    persistence.save([make_task("a")])
    persistence.save_theme(Theme.LIGHT)

    assert [t.id for t in persistence.load()] == ["a"]
    storage.remove_item(THEME_KEY)
    assert persistence.load_theme() is Theme.DARK
    assert [t.id for t in persistence.load()] == ["a"]


def test_store_subscriber_persists_every_mutation(tmp_path: Path, clock) -> None:
    persistence = TaskPersistence(LocalStorage(tmp_path / "storage.json"))
    store = TaskStore(clock=clock)
    store.subscribe(persistence.save)

    task = store.add_task("persist me")
    store.toggle_done(task.id)

    [loaded] = TaskPersistence(LocalStorage(tmp_path / "storage.json")).load()
    assert loaded.id == task.id
    assert loaded.done is True


def test_load_survives_out_of_range_created_at(tmp_path: Path) -> None:
    storage = LocalStorage(tmp_path / "storage.json")
    storage.set_item(TASKS_KEY, '[{"id": "a", "text": "x", "createdAt": 1e999}]')

    [task] = TaskPersistence(storage).load()

    assert task.id == "a"
    assert task.created_at == 0
