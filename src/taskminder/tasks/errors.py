# src/taskminder/tasks/errors.py

from __future__ import annotations


class TaskminderError(Exception):
    """Base class for every error raised by the task subsystem."""


class ValidationError(TaskminderError, ValueError):
    """User-supplied data violates a task invariant (blank title, past due date, ...)."""


class CorruptRecordError(TaskminderError, ValueError):
    """A persisted record could not be decoded. Skipped by the loader."""

    def __init__(self, reason: str, *, line_no: int | None = None, raw: str | None = None) -> None:
        self.reason = reason
        self.line_no = line_no
        self.raw = raw
        where = f"line {line_no}: " if line_no is not None else ""
        super().__init__(f"{where}{reason}")


class PersistenceError(TaskminderError, OSError):
    """The task file could not be read or written."""
