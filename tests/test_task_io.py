# tests/test_task_io.py

from __future__ import annotations

import json
from pathlib import Path

import pytest

from taskly.core.clock import FixedClock
from taskly.tasks.errors import EmptyImportError, MalformedImportError
from taskly.tasks.task_io import dump_export, parse_import, read_import, write_export
from taskly.tasks.task_models import Priority
from taskly.tasks.task_store import TaskStore

from .fakes import make_task


def _content(tasks) -> list[dict]:
    out = []
    for t in tasks:
        d = t.to_dict()
        d.pop("id")
        for s in d["subtasks"]:
            s.pop("id")
        out.append(d)
    return out


def test_export_then_import_into_empty_store_round_trips(tmp_path: Path, clock: FixedClock) -> None:
    source = TaskStore(clock=clock)
    a = source.add_task("Buy milk", priority=Priority.HIGH, category="shopping", due_date="2024-06-12")
    b = source.add_task("Write tests", color="#52c98a")
    source.add_subtask(a.id, "check fridge")
    source.toggle_pin(b.id)
    source.toggle_done(a.id)
    source.edit_task(b.id, text="Write more tests", note="views too", color="#52c98a")

    path = write_export(source, tmp_path / "backup.json")
    target = TaskStore(clock=clock)
    target.import_merge(read_import(path))

    assert _content(target.tasks) == _content(source.tasks)


def test_export_file_shape(tmp_path: Path, clock: FixedClock) -> None:
    store = TaskStore(clock=clock)
    store.add_task("Café ☕")
    path = write_export(store, tmp_path / "out" / "backup.json")

    text = path.read_text("utf-8")
    data = json.loads(text)
    assert set(data) == {"tasks", "exportedAt"}
    assert data["exportedAt"].startswith("2024-06-10T12:00:00")
    assert "Café ☕" in text
    assert "\n  " in text  # pretty-printed


def test_import_accepts_bare_array_and_tasks_object() -> None:
    record = make_task("abc", "From array", priority=Priority.LOW).to_dict()

    from_array = parse_import(json.dumps([record]))
    from_object = parse_import(json.dumps({"tasks": [record], "exportedAt": "x"}).encode("utf-8"))

    assert [t.id for t in from_array] == ["abc"]
    assert from_object[0].text == "From array"
    assert from_object[0].priority is Priority.LOW


@pytest.mark.parametrize(
    "raw",
    [
        "not json at all",
        "",
        "42",
        '"tasks"',
        '{"items": []}',
        '{"tasks": {"a": 1}}',
        '[1, 2, 3]',
        b"\xff\xfe\x00garbage",
    ],
)
def test_import_rejects_malformed_files(raw) -> None:
    with pytest.raises(MalformedImportError):
        parse_import(raw)


@pytest.mark.parametrize("raw", ["[]", '{"tasks": []}'])
def test_import_rejects_empty_task_lists(raw: str) -> None:
    with pytest.raises(EmptyImportError):
        parse_import(raw)


def test_empty_import_leaves_existing_collection_unchanged(tmp_path: Path) -> None:
    store = TaskStore([make_task("a"), make_task("b"), make_task("c")])
    path = tmp_path / "empty.json"
    path.write_text('{"tasks":[]}', "utf-8")

    with pytest.raises(EmptyImportError):
        store.import_merge(read_import(path))
    assert len(store) == 3


def test_read_import_missing_file_is_malformed(tmp_path: Path) -> None:
    with pytest.raises(MalformedImportError):
        read_import(tmp_path / "nope.json")


def test_import_tolerates_partial_records() -> None:
    [task] = parse_import('[{"text": "bare", "priority": "urgent", "dueDate": "", "subtasks": [1, {"text": "s"}]}]')

    assert task.id
    assert task.priority is Priority.MEDIUM
    assert task.due_date is None
    assert task.done is False and task.pinned is False
    assert [s.text for s in task.subtasks] == ["s"]


@pytest.mark.parametrize("created", ["1e999", "-Infinity", "NaN", '"soon"'])
def test_import_unusable_created_at_falls_back_to_zero(created: str) -> None:
    [task] = parse_import(f'[{{"text": "x", "createdAt": {created}}}]')
    assert task.text == "x"
    assert task.created_at == 0


def test_dump_export_is_indented_json() -> None:
    out = dump_export({"tasks": [], "exportedAt": "t"})
    assert json.loads(out) == {"tasks": [], "exportedAt": "t"}
    assert out.startswith("{\n  ")
