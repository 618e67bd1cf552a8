# src/taskly/cli/render.py

"""Plain-text rendering of a TaskView for the console connector."""

from __future__ import annotations

from ..core.clock import is_due_soon, is_overdue, time_ago
from ..tasks.task_models import Priority, Task, category_style
from ..tasks.task_view import TaskStats, TaskView, ViewCriteria

_PRIORITY_BADGE = {Priority.HIGH: "[High]", Priority.MEDIUM: "[Med]", Priority.LOW: "[Low]"}
_BAR_WIDTH = 20


def render_stats(stats: TaskStats) -> str:
    filled = round(_BAR_WIDTH * stats.completion_percent / 100)
    bar = "#" * filled + "-" * (_BAR_WIDTH - filled)
    return (
        f"Total {stats.total} | Done {stats.done} | Pending {stats.pending} | "
        f"Overdue {stats.overdue}  [{bar}] {stats.completion_percent}%"
    )


def render_chips(categories: list[str], active: str) -> str:
    if not categories:
        return ""
    chips = ["(All)" if not active else "All"]
    for cat in categories:
        emoji = category_style(cat).emoji
        label = f"{emoji} {cat.capitalize()}".strip()
        chips.append(f"({label})" if cat == active else label)
    return "Categories: " + "  ".join(chips)


def _due_label(task: Task, today: str) -> str:
    if not task.due_date:
        return ""
    if is_overdue(task, today):
        return f"⚠ {task.due_date}"
    if is_due_soon(task, today):
        return f"⏰ Due {task.due_date}"
    return f"📅 {task.due_date}"


def render_task(index: int, task: Task, *, today: str, now_ms: int) -> list[str]:
    check = "[x]" if task.done else "[ ]"
    dot = f"● {task.color} " if task.color else ""
    pin = "📌 " if task.pinned else ""
    head = f"{index:>3}. {check} {dot}{pin}{task.text} {_PRIORITY_BADGE[task.priority]}"
    if task.category:
        style = category_style(task.category)
        head += " " + f"{style.emoji} {task.category}".strip() + f" ({style.color})"

    meta: list[str] = []
    due = _due_label(task, today)
    if due:
        meta.append(due)
    sub_done, sub_total = task.subtask_progress()
    if sub_total:
        meta.append(f"📎 {sub_done}/{sub_total} subtasks")
    meta.append(f"Added {time_ago(task.created_at, now_ms)}")
    meta.append(f"id {task.id[:8]}")

    lines = [head, "       " + " · ".join(meta)]
    if task.note:
        lines.append(f"       📝 {task.note}")
    for n, sub in enumerate(task.subtasks, start=1):
        lines.append(f"       {n}. {'[x]' if sub.done else '[ ]'} {sub.text}")
    return lines


def render_view(view: TaskView, criteria: ViewCriteria, *, today: str, now_ms: int) -> str:
    out = [render_stats(view.stats)]
    chips = render_chips(view.categories, criteria.category)
    if chips:
        out.append(chips)
    out.append(
        f"Filter: {criteria.status.value} | Sort: {criteria.sort.value}"
        + (f" | Search: {criteria.search!r}" if criteria.search else "")
    )

    if not view.tasks:
        out.append("No tasks here. Add one with /add <text>.")
        return "\n".join(out)

    for i, task in enumerate(view.tasks, start=1):
        out.extend(render_task(i, task, today=today, now_ms=now_ms))
    return "\n".join(out)
