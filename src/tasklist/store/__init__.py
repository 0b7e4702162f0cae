"""In-memory task store."""

from .task import Task, TaskPriority
from .manager import TaskStore, StoreChange
from .exceptions import TaskNotFoundError

__all__ = [
    "Task",
    "TaskPriority",
    "TaskStore",
    "StoreChange",
    "TaskNotFoundError",
]
