# src/taskly/cli/commands.py

from __future__ import annotations

import contextlib
import inspect
import logging
from collections.abc import Callable
from dataclasses import replace
from datetime import date
from pathlib import Path
from typing import cast

from ..core.clock import today_iso
from ..core.state import AppState
from ..tasks.errors import EmptyImportError, MalformedImportError, TaskValidationError
from ..tasks.task_io import read_import, write_export
from ..tasks.task_models import KNOWN_CATEGORIES, Priority, SortMode, StatusFilter, Subtask, Task, Theme
from ..tasks.task_view import category_chips
from .render import render_stats, render_view

CommandEmitter = Callable[[str], None]
CommandHandler2 = Callable[[AppState, list[str]], str]
CommandHandler3 = Callable[[AppState, list[str], CommandEmitter | None], str]
CommandHandler = CommandHandler2 | CommandHandler3

logger = logging.getLogger(__name__)

CONFIRM_WORD = "yes"
_PRIORITIES = {p.value for p in Priority}
_THEMES = {t.value for t in Theme}


class CommandRegistry:
    """Slash-command registry used by the console connector (/help, /add, ...)."""

    def __init__(self) -> None:
        self._handlers: dict[str, CommandHandler] = {}
        self._help: dict[str, str] = {}

    def register(
        self,
        name: str,
        handler: CommandHandler,
        help_text: str,
        aliases: list[str] | None = None,
    ) -> None:
        aliases = aliases or []
        key = name.lower()
        self._handlers[key] = handler
        self._help[key] = help_text
        for alias in aliases:
            self._handlers[alias.lower()] = handler

    def handle(
        self,
        state: AppState,
        line: str,
        emit: CommandEmitter | None = None,
    ) -> str | None:
        """
        Handle a string like "/command args".
        Returns a reply string or None if not a command.
        """
        if not line.startswith("/"):
            return None

        parts = line[1:].split()
        if not parts:
            return "Empty command. Use /help to list available commands."

        name = parts[0].lower()
        args = parts[1:]

        handler = self._handlers.get(name)
        if not handler:
            return f"Unknown command: /{name}. Use /help to list available commands."

        try:
            nparams = len(inspect.signature(handler).parameters)
        except (TypeError, ValueError):
            nparams = 3

        if nparams >= 3:
            h3 = cast(CommandHandler3, handler)
            return h3(state, args, emit)

        h2 = cast(CommandHandler2, handler)
        return h2(state, args)

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        return "\n".join(lines)


registry = CommandRegistry()


# ---- helpers ----


def _show(state: AppState, message: str = "") -> str:
    view = state.compute_view()
    body = render_view(
        view,
        state.criteria,
        today=today_iso(state.clock),
        now_ms=state.clock.now_ms(),
    )
    return f"{message}\n{body}" if message else body


def _resolve_task(state: AppState, ref: str) -> Task | None:
    """A 1-based position in the last shown list, or an id / unique id prefix."""
    if not state.last_view:
        state.compute_view()

    if ref.isdigit():
        pos = int(ref)
        if 1 <= pos <= len(state.last_view):
            # the shown task may have been removed since
            return state.store.get(state.last_view[pos - 1].id)
        return None

    exact = state.store.get(ref)
    if exact is not None:
        return exact
    matches = [t for t in state.store.tasks if t.id.startswith(ref)]
    return matches[0] if len(matches) == 1 else None


def _resolve_subtask(task: Task, ref: str) -> Subtask | None:
    if ref.isdigit():
        pos = int(ref)
        return task.subtasks[pos - 1] if 1 <= pos <= len(task.subtasks) else None
    return task.find_subtask(ref)


def _match_category(state: AppState, raw: str) -> str:
    """Reuse the stored spelling of a category typed in any case."""
    folded = raw.casefold()
    for cat in category_chips(state.store.tasks):
        if cat.casefold() == folded:
            return cat
    return folded if folded in KNOWN_CATEGORIES else raw


def _confirmed(args: list[str]) -> tuple[bool, list[str]]:
    if args and args[-1].lower() == CONFIRM_WORD:
        return True, args[:-1]
    return False, args


class _TaskFields:
    """Words of an /add or /edit line split into text and !priority #category @due %color."""

    def __init__(self, state: AppState, args: list[str]) -> None:
        self.priority: Priority | None = None
        self.category: str | None = None
        self.due_date: str | None = None
        self.color: str | None = None
        self.errors: list[str] = []
        words: list[str] = []

        for word in args:
            if len(word) > 1 and word[0] == "!" and word[1:].lower() in _PRIORITIES:
                self.priority = Priority(word[1:].lower())
            elif len(word) > 1 and word[0] == "#":
                self.category = "" if word == "#-" else _match_category(state, word[1:])
            elif len(word) > 1 and word[0] == "@":
                self.due_date = self._parse_due(word[1:])
            elif len(word) > 1 and word[0] == "%":
                self.color = "" if word == "%-" else word[1:]
            else:
                words.append(word)

        self.text = " ".join(words)

    def _parse_due(self, raw: str) -> str:
        if raw == "-":
            return ""
        try:
            return date.fromisoformat(raw).isoformat()
        except ValueError:
            self.errors.append(f"Bad due date {raw!r}; use YYYY-MM-DD.")
            return ""


_TASK_REF_USAGE = "<n|id>"


# ---- task commands ----


def cmd_help(state: AppState, args: list[str]) -> str:
    return registry.build_help()


def cmd_list(state: AppState, args: list[str]) -> str:
    return _show(state)


def cmd_stats(state: AppState, args: list[str]) -> str:
    return render_stats(state.compute_view().stats)


def cmd_add(state: AppState, args: list[str]) -> str:
    """
    /add Buy milk !high #shopping @2024-06-12 %#ff0000
    """
    fields = _TaskFields(state, args)
    if fields.errors:
        return "\n".join(fields.errors)
    try:
        state.store.add_task(
            fields.text,
            priority=fields.priority or Priority.MEDIUM,
            category=fields.category or "",
            due_date=fields.due_date,
            color=fields.color,
        )
    except TaskValidationError:
        return "⚠️ Please enter a task. Usage: /add <text> [!high|!medium|!low] [#category] [@YYYY-MM-DD] [%color]"
    return _show(state, "✅ Task added!")


def cmd_done(state: AppState, args: list[str]) -> str:
    if not args:
        return f"Usage: /done {_TASK_REF_USAGE}"
    task = _resolve_task(state, args[0])
    if task is None or state.store.toggle_done(task.id) is None:
        return f"No task {args[0]!r}."
    return _show(state, "🎉 Completed!" if task.done else "↩️ Marked active")


def cmd_pin(state: AppState, args: list[str]) -> str:
    if not args:
        return f"Usage: /pin {_TASK_REF_USAGE}"
    task = _resolve_task(state, args[0])
    if task is None or state.store.toggle_pin(task.id) is None:
        return f"No task {args[0]!r}."
    return _show(state, "📌 Pinned!" if task.pinned else "Unpinned")


def cmd_del(state: AppState, args: list[str]) -> str:
    ok, args = _confirmed(args)
    if not args:
        return f"Usage: /del {_TASK_REF_USAGE} yes"
    task = _resolve_task(state, args[0])
    if task is None:
        return f"No task {args[0]!r}."
    if not ok:
        return f"Delete {task.text!r}? Repeat as /del {args[0]} yes to confirm."
    state.store.delete_task(task.id)
    return _show(state, "🗑️ Task deleted")


def cmd_edit(state: AppState, args: list[str]) -> str:
    """
    /edit <n|id> [new text] [!priority] [#category|#-] [@date|@-] [%color|%-]

    Fields not mentioned keep their current value.
    """
    if not args:
        return f"Usage: /edit {_TASK_REF_USAGE} [text] [!priority] [#category|#-] [@YYYY-MM-DD|@-] [%color|%-]"
    task = _resolve_task(state, args[0])
    if task is None:
        return f"No task {args[0]!r}."

    fields = _TaskFields(state, args[1:])
    if fields.errors:
        return "\n".join(fields.errors)

    try:
        state.store.edit_task(
            task.id,
            text=fields.text or task.text,
            note=task.note,
            priority=fields.priority or task.priority,
            category=task.category if fields.category is None else fields.category,
            due_date=task.due_date if fields.due_date is None else fields.due_date,
            color=task.color if fields.color is None else fields.color,
        )
    except TaskValidationError:
        return "⚠️ Task cannot be empty"
    return _show(state, "✏️ Task updated!")


def cmd_note(state: AppState, args: list[str]) -> str:
    if not args:
        return f"Usage: /note {_TASK_REF_USAGE} [text]  (no text clears the note)"
    task = _resolve_task(state, args[0])
    if task is None:
        return f"No task {args[0]!r}."
    state.store.edit_task(
        task.id,
        text=task.text,
        note=" ".join(args[1:]),
        priority=task.priority,
        category=task.category,
        due_date=task.due_date,
        color=task.color,
    )
    return _show(state, "✏️ Task updated!")


# ---- subtasks ----


def cmd_sub(state: AppState, args: list[str]) -> str:
    if len(args) < 2:
        return f"Usage: /sub {_TASK_REF_USAGE} <text>"
    task = _resolve_task(state, args[0])
    if task is None:
        return f"No task {args[0]!r}."
    if state.store.add_subtask(task.id, " ".join(args[1:])) is None:
        return "⚠️ Subtask text is empty."
    return _show(state)


def cmd_subdone(state: AppState, args: list[str]) -> str:
    if len(args) < 2:
        return f"Usage: /subdone {_TASK_REF_USAGE} <subtask n|id>"
    task = _resolve_task(state, args[0])
    sub = _resolve_subtask(task, args[1]) if task is not None else None
    if task is None or sub is None:
        return f"No subtask {args[1]!r} on task {args[0]!r}."
    state.store.toggle_subtask(task.id, sub.id)
    return _show(state)


def cmd_subdel(state: AppState, args: list[str]) -> str:
    if len(args) < 2:
        return f"Usage: /subdel {_TASK_REF_USAGE} <subtask n|id>"
    task = _resolve_task(state, args[0])
    sub = _resolve_subtask(task, args[1]) if task is not None else None
    if task is None or sub is None:
        return f"No subtask {args[1]!r} on task {args[0]!r}."
    state.store.delete_subtask(task.id, sub.id)
    return _show(state)


# ---- bulk ----


def cmd_all(state: AppState, args: list[str]) -> str:
    if not len(state.store):
        return "Nothing to mark."
    done = state.store.mark_all_done()
    return _show(state, "🎉 All completed!" if done else "↩️ All marked active")


def cmd_cleardone(state: AppState, args: list[str]) -> str:
    ok, _ = _confirmed(args)
    count = sum(1 for t in state.store.tasks if t.done)
    if not count:
        return "No completed tasks"
    if not ok:
        return f"Remove {count} completed task(s)? Repeat as /cleardone yes to confirm."
    removed = state.store.clear_done()
    return _show(state, f"🗑️ {removed} task(s) cleared")


def cmd_clearall(state: AppState, args: list[str]) -> str:
    ok, _ = _confirmed(args)
    if not len(state.store):
        return "Nothing to clear"
    if not ok:
        return "Delete ALL tasks? This cannot be undone. Repeat as /clearall yes to confirm."
    state.store.clear_all()
    return _show(state, "🗑️ All tasks cleared")


def cmd_move(state: AppState, args: list[str]) -> str:
    """
    /move <src> <dest>  -> drag src onto dest (manual order)

    Moving switches the view to manual sort so the new order is visible.
    """
    if len(args) < 2:
        return f"Usage: /move {_TASK_REF_USAGE} {_TASK_REF_USAGE}"
    src = _resolve_task(state, args[0])
    dest = _resolve_task(state, args[1])
    if src is None or dest is None or not state.store.reorder(src.id, dest.id):
        return "Nothing moved."
    state.criteria = replace(state.criteria, sort=SortMode.MANUAL)
    return _show(state)


# ---- view criteria ----


def cmd_filter(state: AppState, args: list[str]) -> str:
    choices = ", ".join(f.value for f in StatusFilter)
    if not args:
        return f"Filter is {state.criteria.status.value}. Use /filter <{choices}>."
    status = StatusFilter.parse(args[0])
    if status is None:
        return f"Unknown filter {args[0]!r}. Choose one of: {choices}."
    state.criteria = replace(state.criteria, status=status)
    return _show(state)


def cmd_cat(state: AppState, args: list[str]) -> str:
    """
    /cat          -> show all categories
    /cat <name>   -> filter by category (same name again clears it)
    """
    cat = _match_category(state, args[0]) if args else ""
    if cat and cat == state.criteria.category:
        cat = ""
    state.criteria = replace(state.criteria, category=cat)
    return _show(state)


def cmd_search(state: AppState, args: list[str]) -> str:
    state.criteria = replace(state.criteria, search=" ".join(args))
    return _show(state)


def cmd_sort(state: AppState, args: list[str]) -> str:
    choices = ", ".join(m.value for m in SortMode)
    if not args:
        return f"Sort is {state.criteria.sort.value}. Use /sort <{choices}>."
    mode = SortMode.parse(args[0])
    if mode is None:
        return f"Unknown sort {args[0]!r}. Choose one of: {choices}."
    state.criteria = replace(state.criteria, sort=mode)
    return _show(state)


# ---- files / preferences ----


def cmd_export(state: AppState, args: list[str]) -> str:
    target = Path(args[0]) if args else Path(getattr(state.settings, "export_path", "taskly-backup.json"))
    try:
        path = write_export(state.store, target)
    except OSError:
        logger.exception("Export to %s failed", target)
        return f"⚠️ Could not write {target}."
    return f"📤 Exported to {path}!"


def cmd_import(
    state: AppState,
    args: list[str],
    emit: CommandEmitter | None = None,
) -> str:
    ok, args = _confirmed(args)
    if not args:
        return "Usage: /import <file.json> yes"

    if emit:
        with contextlib.suppress(Exception):
            emit(f"Reading {args[0]}...")

    try:
        imported = read_import(args[0])
    except EmptyImportError:
        return "⚠️ No tasks found"
    except MalformedImportError as e:
        logger.debug("Import rejected: %s", e)
        return "⚠️ Invalid JSON file"

    if not ok:
        return (
            f"Import {len(imported)} task(s)? Existing tasks will be kept. "
            f"Repeat as /import {args[0]} yes to confirm."
        )
    count = state.store.import_merge(imported)
    return _show(state, f"📥 Imported {count} task(s)!")


def cmd_theme(state: AppState, args: list[str]) -> str:
    """
    /theme               -> toggle dark/light
    /theme dark|light    -> set explicitly
    """
    if args:
        if args[0].lower() not in _THEMES:
            return "Usage: /theme [dark|light]"
        theme = Theme(args[0].lower())
    else:
        theme = state.theme.toggled()
    state.theme = theme
    state.persistence.save_theme(theme)
    return "🌙 Dark mode" if theme is Theme.DARK else "☀️ Light mode"


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register("list", cmd_list, help_text="Show tasks for the current filter/sort.", aliases=["ls"])
registry.register("stats", cmd_stats, help_text="Show totals and progress.")
registry.register(
    "add",
    cmd_add,
    help_text="Add a task: /add <text> [!high|!medium|!low] [#category] [@YYYY-MM-DD] [%color].",
    aliases=["a"],
)
registry.register("done", cmd_done, help_text="Toggle done: /done <n|id>.", aliases=["x"])
registry.register("pin", cmd_pin, help_text="Toggle pin: /pin <n|id>.")
registry.register("del", cmd_del, help_text="Delete a task: /del <n|id> yes.", aliases=["rm"])
registry.register("edit", cmd_edit, help_text="Edit a task: /edit <n|id> [text] [!prio] [#cat|#-] [@date|@-] [%color|%-].")
registry.register("note", cmd_note, help_text="Set a task note: /note <n|id> [text].")
registry.register("sub", cmd_sub, help_text="Add a subtask: /sub <n|id> <text>.")
registry.register("subdone", cmd_subdone, help_text="Toggle a subtask: /subdone <n|id> <subtask n>.")
registry.register("subdel", cmd_subdel, help_text="Delete a subtask: /subdel <n|id> <subtask n>.")
registry.register("all", cmd_all, help_text="Mark all done (or all active if everything is done).")
registry.register("cleardone", cmd_cleardone, help_text="Remove completed tasks: /cleardone yes.")
registry.register("clearall", cmd_clearall, help_text="Remove every task: /clearall yes.")
registry.register("move", cmd_move, help_text="Manual reorder: /move <n|id> <n|id>.")
registry.register("filter", cmd_filter, help_text="Status filter: /filter all|active|done|overdue|pinned.")
registry.register("cat", cmd_cat, help_text="Category filter: /cat [name].")
registry.register("search", cmd_search, help_text="Search text/note/category: /search [text].")
registry.register("sort", cmd_sort, help_text="Sort: /sort manual|date-desc|date-asc|alpha|due|priority.")
registry.register("export", cmd_export, help_text="Write a JSON backup: /export [path].")
registry.register("import", cmd_import, help_text="Merge tasks from a JSON backup: /import <path> yes.")
registry.register("theme", cmd_theme, help_text="Switch theme: /theme [dark|light].")
