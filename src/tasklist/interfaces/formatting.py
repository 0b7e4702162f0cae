"""Date and priority formatting for the terminal views."""

from datetime import date, datetime, timedelta
from typing import Optional

from ..store import Task, TaskPriority


PRIORITY_STYLES = {
    TaskPriority.HIGH: "red",
    TaskPriority.MEDIUM: "yellow",
    TaskPriority.LOW: "green",
}


def format_short_date(value: date, fmt: Optional[str] = None) -> str:
    """
    Format a date without a time component.

    Args:
        value: Date (a datetime is reduced to its date)
        fmt: Optional strftime pattern; default is short style, e.g. 3/7/26

    Returns:
        Display text
    """
    if isinstance(value, datetime):
        value = value.date()
    if fmt:
        return value.strftime(fmt)
    return f"{value.month}/{value.day}/{value.year % 100:02d}"


def format_due(task: Task, fmt: Optional[str] = None) -> str:
    """'Due: 3/7/26' for tasks with a due date, empty otherwise."""
    if task.due_date is None:
        return ""
    return f"Due: {format_short_date(task.due_date, fmt)}"


def priority_label(priority: TaskPriority) -> str:
    """Rich markup for a priority."""
    return f"[{PRIORITY_STYLES[priority]}]{priority.value}[/]"


def parse_due_date(text: str, today: Optional[date] = None) -> Optional[date]:
    """
    Parse a due date typed in the shell.

    Accepts 'today', 'tomorrow', 'none' or an ISO date (2026-03-07).

    Raises:
        ValueError: Text is not a recognised date
    """
    today = today or date.today()
    value = text.strip().lower()

    if value in ("none", "-", ""):
        return None
    if value == "today":
        return today
    if value == "tomorrow":
        return today + timedelta(days=1)

    try:
        return date.fromisoformat(value)
    except ValueError:
        raise ValueError(f"Invalid due date: {text!r} (use YYYY-MM-DD, today, tomorrow or none)")
