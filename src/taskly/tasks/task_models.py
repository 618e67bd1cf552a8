# src/taskly/tasks/task_models.py

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any


def new_id() -> str:
    """Opaque identifier for tasks and subtasks."""
    return uuid.uuid4().hex


class Priority(StrEnum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"

    @classmethod
    def parse(cls, raw: Any) -> Priority:
        if not raw:
            return cls.MEDIUM
        try:
            return cls(str(raw).strip().lower())
        except ValueError:
            return cls.MEDIUM


class StatusFilter(StrEnum):
    ALL = "all"
    ACTIVE = "active"
    DONE = "done"
    OVERDUE = "overdue"
    PINNED = "pinned"

    @classmethod
    def parse(cls, raw: Any) -> StatusFilter | None:
        try:
            return cls(str(raw).strip().lower())
        except ValueError:
            return None


class SortMode(StrEnum):
    MANUAL = "manual"
    DATE_DESC = "date-desc"
    DATE_ASC = "date-asc"
    ALPHA = "alpha"
    DUE = "due"
    PRIORITY = "priority"

    @classmethod
    def parse(cls, raw: Any) -> SortMode | None:
        try:
            return cls(str(raw).strip().lower())
        except ValueError:
            return None


class Theme(StrEnum):
    DARK = "dark"
    LIGHT = "light"

    @classmethod
    def parse(cls, raw: Any) -> Theme:
        if not raw:
            return cls.DARK
        try:
            return cls(str(raw).strip().lower())
        except ValueError:
            return cls.DARK

    def toggled(self) -> Theme:
        return Theme.LIGHT if self is Theme.DARK else Theme.DARK


@dataclass(frozen=True, slots=True)
class CategoryStyle:
    color: str
    emoji: str


FALLBACK_CATEGORY_STYLE = CategoryStyle(color="#888", emoji="")

KNOWN_CATEGORIES: dict[str, CategoryStyle] = {
    "work": CategoryStyle("#5b8dee", "💼"),
    "personal": CategoryStyle("#e07b39", "🏠"),
    "health": CategoryStyle("#52c98a", "💪"),
    "shopping": CategoryStyle("#a86ee0", "🛒"),
    "study": CategoryStyle("#f4c430", "📚"),
    "finance": CategoryStyle("#e05252", "💰"),
}


def category_style(name: str | None) -> CategoryStyle:
    return KNOWN_CATEGORIES.get(name or "", FALLBACK_CATEGORY_STYLE)


def _opt_str(raw: Any) -> str | None:
    if raw is None:
        return None
    s = str(raw)
    return s or None


@dataclass(slots=True)
class Subtask:
    id: str
    text: str
    done: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.id, "text": self.text, "done": self.done}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Subtask:
        return cls(
            id=str(data.get("id") or new_id()),
            text=str(data.get("text") or ""),
            done=bool(data.get("done", False)),
        )


@dataclass(slots=True)
class Task:
    """
    A unit of work.

    Field names on the wire (to_dict/from_dict) are camelCase to stay
    compatible with snapshots and backup files written by the web client:
    dueDate, createdAt.
    """

    id: str
    text: str
    created_at: int  # epoch milliseconds

    done: bool = False
    pinned: bool = False
    priority: Priority = Priority.MEDIUM
    category: str = ""
    due_date: str | None = None  # YYYY-MM-DD
    color: str | None = None
    note: str = ""
    subtasks: list[Subtask] = field(default_factory=list)

    def find_subtask(self, subtask_id: str) -> Subtask | None:
        for sub in self.subtasks:
            if sub.id == subtask_id:
                return sub
        return None

    def subtask_progress(self) -> tuple[int, int]:
        return sum(1 for s in self.subtasks if s.done), len(self.subtasks)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "text": self.text,
            "done": self.done,
            "pinned": self.pinned,
            "priority": self.priority.value,
            "category": self.category,
            "dueDate": self.due_date,
            "color": self.color,
            "note": self.note,
            "subtasks": [s.to_dict() for s in self.subtasks],
            "createdAt": self.created_at,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Task:
        raw_subs = data.get("subtasks")
        subs = (
            [Subtask.from_dict(s) for s in raw_subs if isinstance(s, dict)]
            if isinstance(raw_subs, list)
            else []
        )

        try:
            created_at = int(data.get("createdAt") or 0)
        except (TypeError, ValueError, OverflowError):
            created_at = 0

        return cls(
            id=str(data.get("id") or new_id()),
            text=str(data.get("text") or ""),
            created_at=created_at,
            done=bool(data.get("done", False)),
            pinned=bool(data.get("pinned", False)),
            priority=Priority.parse(data.get("priority")),
            category=str(data.get("category") or ""),
            due_date=_opt_str(data.get("dueDate")),
            color=_opt_str(data.get("color")),
            note=str(data.get("note") or ""),
            subtasks=subs,
        )
