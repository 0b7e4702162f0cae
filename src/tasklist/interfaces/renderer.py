"""List view: draws the task table from store snapshots."""

from typing import Callable, Optional
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from ..store import Task, TaskStore, StoreChange
from .formatting import format_due, priority_label


class TaskListRenderer:
    """
    Renders the task list and redraws it whenever the store changes.

    Rows are numbered from 1; those numbers are what the shell commands
    take as positions.
    """

    def __init__(
        self,
        console: Console,
        date_format: Optional[str] = None,
        show_ids: bool = False,
    ):
        self.console = console
        self.date_format = date_format
        self.show_ids = show_ids

    def attach(self, store: TaskStore) -> Callable[[], None]:
        """Subscribe to store changes. Returns the unsubscribe function."""
        return store.subscribe(self)

    def __call__(self, change: StoreChange):
        self.render(change.snapshot)

    def build_table(self, tasks: list[Task]) -> Table:
        """Build the rich table for a snapshot."""
        table = Table(title="Tasks", show_header=True)
        table.add_column("#", style="dim", justify="right")
        if self.show_ids:
            table.add_column("ID", style="dim", width=6)
        table.add_column("", width=3)  # Completion box
        table.add_column("Title")
        table.add_column("Priority", width=8)
        table.add_column("Due", style="bright_black")

        for position, task in enumerate(tasks, start=1):
            icon = escape(task.status_icon)
            if task.completed:
                icon = f"[green]{icon}[/]"
            row = [str(position)]
            if self.show_ids:
                row.append(task.id[:6])
            row += [
                icon,
                escape(task.title),
                priority_label(task.priority),
                format_due(task, self.date_format),
            ]
            table.add_row(*row, style="dim" if task.completed else "")

        return table

    def render(self, tasks: list[Task]):
        """Display all tasks."""
        if not tasks:
            self.console.print("[dim]No tasks. Use /add <title> to create one.[/dim]")
            return

        self.console.print(self.build_table(tasks))

        # Show summary
        total = len(tasks)
        completed = sum(1 for t in tasks if t.completed)
        pending = total - completed
        self.console.print(f"[dim]{pending} pending, {completed} completed[/dim]")
