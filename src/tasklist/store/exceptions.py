"""Errors raised by the task store."""

from dataclasses import dataclass


@dataclass
class TaskNotFoundError(Exception):
    """
    No task with the given identity exists in the store.

    Recoverable: the store is left untouched when this is raised.
    """
    task_id: str

    def __str__(self):
        return f"Task not found: {self.task_id}"
