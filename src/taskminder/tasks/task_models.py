# src/taskminder/tasks/task_models.py

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import date
from enum import StrEnum

from .errors import ValidationError


class _LabelEnum(StrEnum):
    @classmethod
    def parse(cls, raw: str | None):
        """Accept a label in any case ("high", "High", "HIGH")."""
        label = (raw or "").strip().upper()
        try:
            return cls(label)
        except ValueError:
            allowed = ", ".join(m.value for m in cls)
            raise ValidationError(f"Unknown {cls.__name__.lower()} {raw!r} (expected one of: {allowed})") from None


class Priority(_LabelEnum):
    HIGH = "HIGH"
    MEDIUM = "MEDIUM"
    LOW = "LOW"


class TaskStatus(_LabelEnum):
    """
    Task lifecycle status.

    The only transition is PENDING -> COMPLETED; there is no way back.
    """

    PENDING = "PENDING"
    COMPLETED = "COMPLETED"


@dataclass(slots=True)
class Task:
    id: int
    title: str
    description: str
    priority: Priority
    due_date: date
    status: TaskStatus = TaskStatus.PENDING

    @property
    def is_pending(self) -> bool:
        return self.status == TaskStatus.PENDING

    def copy(self) -> Task:
        return replace(self)
