# src/taskly/core/clock.py

"""
Clock and date classification helpers.

"Today" is the UTC calendar date, the same date the web client derives from
Date.toISOString(). Due dates are ISO strings (YYYY-MM-DD), so overdue checks
compare strings directly.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, date, datetime

from ..tasks.task_models import Task

DUE_SOON_DAYS = 2

_MINUTE_MS = 60_000
_HOUR_MS = 3_600_000
_DAY_MS = 86_400_000


class SystemClock:
    def now(self) -> datetime:
        return datetime.now(UTC)

    def now_ms(self) -> int:
        return int(self.now().timestamp() * 1000)

    def today(self) -> date:
        return self.now().date()


@dataclass(slots=True)
class FixedClock:
    """Clock pinned to a given instant; advance() moves it forward."""

    current: datetime

    @classmethod
    def at(cls, iso_day: str, hour: int = 12) -> FixedClock:
        d = date.fromisoformat(iso_day)
        return cls(datetime(d.year, d.month, d.day, hour, tzinfo=UTC))

    def now(self) -> datetime:
        return self.current

    def now_ms(self) -> int:
        return int(self.current.timestamp() * 1000)

    def today(self) -> date:
        return self.current.date()

    def advance(self, *, ms: int) -> None:
        self.current = datetime.fromtimestamp((self.now_ms() + ms) / 1000, tz=UTC)


def today_iso(clock) -> str:
    return clock.today().isoformat()


def days_until(due_date: str, today: str) -> int | None:
    """Whole days from today to due_date; None if either is not an ISO date."""
    try:
        return (date.fromisoformat(due_date) - date.fromisoformat(today)).days
    except (TypeError, ValueError):
        return None


def is_overdue(task: Task, today: str) -> bool:
    if not task.due_date or task.done:
        return False
    return task.due_date < today


def is_due_soon(task: Task, today: str) -> bool:
    if not task.due_date or task.done:
        return False
    diff = days_until(task.due_date, today)
    return diff is not None and 0 <= diff <= DUE_SOON_DAYS


def time_ago(created_at_ms: int, now_ms: int) -> str:
    d = now_ms - created_at_ms
    if d < _MINUTE_MS:
        return "just now"
    if d < _HOUR_MS:
        return f"{d // _MINUTE_MS}m ago"
    if d < _DAY_MS:
        return f"{d // _HOUR_MS}h ago"
    return f"{d // _DAY_MS}d ago"
