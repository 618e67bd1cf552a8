# src/taskly/tasks/errors.py

from __future__ import annotations


class TasklyError(Exception):
    """Base class for recoverable task engine errors."""


class TaskValidationError(TasklyError, ValueError):
    """Task or subtask text is empty after trimming."""


class MalformedImportError(TasklyError):
    """Import file is not JSON, or not a task array / {"tasks": [...]} object."""


class EmptyImportError(TasklyError):
    """Import file is well-formed but holds no tasks."""
