"""In-memory task store with change notifications."""

from dataclasses import dataclass, field, replace
from datetime import date
from typing import Callable, Iterable, Optional
import logging

from .task import Task, TaskPriority, as_calendar_date
from .exceptions import TaskNotFoundError

logger = logging.getLogger(__name__)

MUTABLE_FIELDS = ("title", "priority", "due_date", "completed")


@dataclass
class StoreChange:
    """Notification sent to subscribers after a mutation."""
    action: str  # added, updated, removed
    task_ids: tuple[str, ...]
    snapshot: list[Task] = field(default_factory=list)


Subscriber = Callable[[StoreChange], None]


class TaskStore:
    """
    Ordered, in-memory collection of tasks.

    Tasks keep insertion order until explicitly removed. Every Task handed
    out is a copy; state changes only through add, update and remove.
    Subscribers are called synchronously after each mutation with a
    snapshot of the whole list.
    """

    def __init__(self):
        self._tasks: list[Task] = []
        self._subscribers: list[Subscriber] = []

    def __len__(self) -> int:
        return len(self._tasks)

    # ==================== Subscriptions ====================

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        """
        Register a change callback.

        Returns:
            Function that removes the subscription
        """
        self._subscribers.append(callback)
        return lambda: self.unsubscribe(callback)

    def unsubscribe(self, callback: Subscriber):
        """Remove a change callback (no-op if not subscribed)."""
        if callback in self._subscribers:
            self._subscribers.remove(callback)

    def _notify(self, action: str, task_ids: Iterable[str]):
        """Send a change to all subscribers."""
        task_ids = tuple(task_ids)
        for callback in list(self._subscribers):
            # Each subscriber gets its own snapshot
            change = StoreChange(action=action, task_ids=task_ids, snapshot=self.list())
            try:
                callback(change)
            except Exception:
                logger.exception("Task store subscriber %r failed on %s", callback, action)

    # ==================== Queries ====================

    def get(self, task_id: str) -> Optional[Task]:
        """
        Get task by ID.

        Args:
            task_id: Full task ID

        Returns:
            Task if found, None otherwise
        """
        index = self._index_of(task_id)
        if index is None:
            return None
        return replace(self._tasks[index])

    def _index_of(self, task_id: str) -> Optional[int]:
        for i, task in enumerate(self._tasks):
            if task.id == task_id:
                return i
        return None

    # ==================== Mutations ====================

    def add(
        self,
        title: str,
        priority: TaskPriority = TaskPriority.MEDIUM,
        due_date: Optional[date] = None,
    ) -> Task:
        """
        Append a new, not yet completed task.

        Args:
            title: Task title (any text)
            priority: TaskPriority or its label
            due_date: Optional calendar date

        Returns:
            Created Task
        """
        task = Task.create(title=title, priority=priority, due_date=due_date)
        self._tasks.append(task)
        logger.debug("Added task %s at position %d", task.id, len(self._tasks) - 1)

        self._notify("added", [task.id])
        return replace(task)

    def update(self, task_id: str, **changes) -> Task:
        """
        Replace mutable fields of a task.

        Args:
            task_id: Full task ID
            **changes: Fields to replace (title, priority, due_date, completed)

        Returns:
            Updated Task

        Raises:
            TaskNotFoundError: No task has this ID
            TypeError: A field is unknown or immutable
        """
        unknown = sorted(set(changes) - set(MUTABLE_FIELDS))
        if unknown:
            raise TypeError(f"Cannot update task field(s): {', '.join(unknown)}")

        index = self._index_of(task_id)
        if index is None:
            logger.debug("Update of unknown task %s", task_id)
            raise TaskNotFoundError(task_id)

        if "priority" in changes:
            changes["priority"] = TaskPriority.parse(changes["priority"])
        if "due_date" in changes:
            changes["due_date"] = as_calendar_date(changes["due_date"])
        if "completed" in changes:
            changes["completed"] = bool(changes["completed"])

        updated = replace(self._tasks[index], **changes)
        self._tasks[index] = updated
        logger.debug("Updated task %s: %s", task_id, ", ".join(sorted(changes)) or "no fields")

        self._notify("updated", [task_id])
        return replace(updated)

    def remove(self, positions: Iterable[int]) -> list[Task]:
        """
        Delete tasks at the given zero-based positions.

        Survivors keep their relative order. Nothing is removed if any
        position is out of range.

        Args:
            positions: Positions to delete (duplicates are ignored)

        Returns:
            Removed tasks, in list order

        Raises:
            IndexError: A position is negative or past the end
        """
        wanted = set(positions)
        invalid = sorted(p for p in wanted if not 0 <= p < len(self._tasks))
        if invalid:
            raise IndexError(
                f"Task position(s) out of range: {', '.join(map(str, invalid))} "
                f"(store has {len(self._tasks)} task(s))"
            )
        if not wanted:
            return []

        removed = [task for i, task in enumerate(self._tasks) if i in wanted]
        self._tasks = [task for i, task in enumerate(self._tasks) if i not in wanted]
        logger.debug("Removed %d task(s) at positions %s", len(removed), sorted(wanted))

        self._notify("removed", [task.id for task in removed])
        return removed

    def list(self) -> list[Task]:
        """Return all tasks in display order."""
        return [replace(task) for task in self._tasks]
