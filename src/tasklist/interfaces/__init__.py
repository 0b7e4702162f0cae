"""Terminal views over the task store."""

from .cli import TaskCLI
from .renderer import TaskListRenderer

__all__ = [
    "TaskCLI",
    "TaskListRenderer",
]
