"""Task dataclass for the task store."""

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional
from enum import Enum
import uuid


class TaskPriority(Enum):
    """Task priority, declared in display order."""
    HIGH = "High"
    MEDIUM = "Medium"
    LOW = "Low"

    @classmethod
    def parse(cls, value: "str | TaskPriority") -> "TaskPriority":
        """Parse a priority label case-insensitively (High, medium, LOW...)."""
        if isinstance(value, cls):
            return value
        text = str(value).strip().lower()
        for priority in cls:
            if priority.value.lower() == text:
                return priority
        raise ValueError(
            f"Unknown priority: {value!r} (expected one of: "
            + ", ".join(p.value for p in cls)
            + ")"
        )


def as_calendar_date(value: Optional[date]) -> Optional[date]:
    """Reduce a due date to a plain calendar date."""
    if isinstance(value, datetime):
        return value.date()
    return value


@dataclass
class Task:
    """
    A single to-do item.

    Attributes:
        id: Unique task identifier, fixed at creation
        title: Free text, may be empty
        priority: High, Medium or Low
        due_date: Optional calendar date
        completed: Completion flag
    """
    id: str
    title: str
    priority: TaskPriority = TaskPriority.MEDIUM
    due_date: Optional[date] = None
    completed: bool = False

    @classmethod
    def create(
        cls,
        title: str,
        priority: TaskPriority = TaskPriority.MEDIUM,
        due_date: Optional[date] = None,
    ) -> "Task":
        """Create a new task with generated ID."""
        return cls(
            id=uuid.uuid4().hex,
            title=title,
            priority=TaskPriority.parse(priority),
            due_date=as_calendar_date(due_date),
        )

    @property
    def status_icon(self) -> str:
        """Get completion box for display."""
        return "[x]" if self.completed else "[ ]"
