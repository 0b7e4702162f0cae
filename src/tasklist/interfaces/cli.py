"""CLI interface for the task list."""

import logging
import shlex
from datetime import date
from typing import Optional
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from prompt_toolkit import PromptSession
from prompt_toolkit.history import FileHistory

from ..store import Task, TaskPriority, TaskStore, TaskNotFoundError
from ..config import Config, config as default_config
from .formatting import parse_due_date
from .renderer import TaskListRenderer

logger = logging.getLogger(__name__)

console = Console()

# Options that take a value, keyed by every accepted spelling
VALUE_OPTIONS = {
    "-t": "title",
    "--title": "title",
    "-p": "priority",
    "--priority": "priority",
    "-d": "due",
    "--due": "due",
}

FLAG_OPTIONS = {
    "--done": "done",
    "--undone": "undone",
}


class TaskCLI:
    """
    Interactive shell over a TaskStore.

    Commands:
    - /add TITLE [-p PRIORITY] [-d DUE] - Create a task
    - /edit N [TITLE] [-t TITLE] [-p PRIORITY] [-d DUE] [--done|--undone] - Edit task N
    - /done N... - Mark tasks completed
    - /undone N... - Mark tasks not completed
    - /delete N... - Delete tasks
    - /list - Show tasks
    - /clear - Clear screen
    - /help - Show available commands
    - /quit, /exit - Exit

    Plain text without a leading slash is added as a new task. N is the
    row number shown in the list (starting at 1).
    """

    def __init__(
        self,
        store: TaskStore,
        out: Optional[Console] = None,
        settings: Optional[Config] = None,
    ):
        self.store = store
        self.console = out or console
        self.settings = settings or default_config
        self.renderer = TaskListRenderer(
            self.console,
            date_format=self.settings.display.date_format,
            show_ids=self.settings.display.show_ids,
        )
        self._detach = self.renderer.attach(store)
        self.session: Optional[PromptSession] = None

    def _prompt_session(self) -> PromptSession:
        if self.session is None:
            history_path = self.settings.paths.history
            history_path.parent.mkdir(parents=True, exist_ok=True)
            self.session = PromptSession(history=FileHistory(str(history_path)))
        return self.session

    def run(self):
        """Main CLI loop."""
        session = self._prompt_session()
        self.console.print(Panel(
            "[bold cyan]Task List[/bold cyan]\n"
            "Type /help for commands, or any text to add a task",
            title="Welcome",
            border_style="cyan",
        ))
        self.renderer.render(self.store.list())

        try:
            while True:
                try:
                    user_input = session.prompt("> ")
                    if not user_input.strip():
                        continue

                    if self.handle_command(user_input):
                        break

                except KeyboardInterrupt:
                    self.console.print("\n[yellow]Interrupted. Type /quit to exit.[/yellow]")
                except EOFError:
                    break
        finally:
            self._detach()

        self.console.print("[green]Goodbye![/green]")

    def handle_command(self, command: str) -> bool:
        """
        Handle one line of input.

        Returns:
            True if should exit, False otherwise
        """
        command = command.strip()
        if not command:
            return False

        parts = command.split(maxsplit=1)
        cmd = parts[0].lower()
        args = parts[1] if len(parts) > 1 else ""

        if cmd in ["/quit", "/exit", "/q"]:
            return True

        try:
            if not command.startswith("/"):
                # Plain text is the title, taken verbatim
                self._create_task(command, self.settings.defaults.priority, self._default_due())
            elif cmd == "/help":
                self._show_help()
            elif cmd in ["/list", "/ls", "/tasks"]:
                self.renderer.render(self.store.list())
            elif cmd == "/add":
                self._add_task(args)
            elif cmd == "/edit":
                self._edit_task(args)
            elif cmd == "/done":
                self._set_completed(args, True)
            elif cmd == "/undone":
                self._set_completed(args, False)
            elif cmd in ["/delete", "/rm", "/del"]:
                self._delete_tasks(args)
            elif cmd == "/clear":
                self.console.clear()
            else:
                self.console.print(f"[red]Unknown command: {escape(cmd)}[/red]")
                self.console.print("Type /help for available commands.")
        except (ValueError, IndexError, TaskNotFoundError) as e:
            logger.debug("Command %r failed: %s", command, e)
            self.console.print(f"[red]{escape(str(e))}[/red]")

        return False

    def _show_help(self):
        """Display help information."""
        help_table = Table(title="Available Commands", show_header=True)
        help_table.add_column("Command", style="cyan")
        help_table.add_column("Description")

        commands = [
            ("/add TITLE [-p P] [-d DUE]", "Create task (P: high, medium, low)"),
            ("/edit N [-t TITLE] [-p P] [-d DUE]", "Edit task N (--done / --undone)"),
            ("/done N...", "Mark tasks completed"),
            ("/undone N...", "Mark tasks not completed"),
            ("/delete N...", "Delete tasks"),
            ("/list", "Show tasks"),
            ("/clear", "Clear screen"),
            ("/help", "Show this help"),
            ("/quit, /exit, /q", "Exit"),
        ]

        for cmd, desc in commands:
            help_table.add_row(escape(cmd), desc)

        self.console.print(help_table)
        self.console.print("[dim]DUE is YYYY-MM-DD, today, tomorrow or none.[/dim]")

    # ==================== Argument parsing ====================

    def _split_options(self, args: str) -> tuple[list[str], dict[str, str]]:
        """Split arguments into plain words and options."""
        # Only double quotes group words, so titles like "Mom's birthday" parse
        lexer = shlex.shlex(args, posix=True)
        lexer.whitespace_split = True
        lexer.quotes = '"'
        lexer.commenters = ""
        tokens = list(lexer)
        words: list[str] = []
        options: dict[str, str] = {}

        i = 0
        while i < len(tokens):
            token = tokens[i]
            if token in VALUE_OPTIONS:
                if i + 1 >= len(tokens):
                    raise ValueError(f"Option {token} needs a value")
                options[VALUE_OPTIONS[token]] = tokens[i + 1]
                i += 2
                continue
            if token in FLAG_OPTIONS:
                options[FLAG_OPTIONS[token]] = "yes"
            else:
                words.append(token)
            i += 1

        return words, options

    def _parse_positions(self, words: list[str]) -> list[int]:
        """Turn 1-based row numbers into 0-based store positions."""
        count = len(self.store)
        positions = []
        for word in words:
            try:
                number = int(word)
            except ValueError:
                raise ValueError(f"Not a task number: {word!r}")
            if not 1 <= number <= count:
                raise IndexError(f"No task at position {number}")
            positions.append(number - 1)
        return positions

    def _usage(self, text: str):
        self.console.print(f"[red]Usage: {escape(text)}[/red]")

    def _task_at(self, position: int) -> Task:
        return self.store.list()[position]

    # ==================== Task Management ====================

    def _add_task(self, args: str):
        """Create a new task."""
        words, options = self._split_options(args)
        unsupported = sorted(set(options) - {"priority", "due"})
        if unsupported:
            raise ValueError(f"/add does not take: {', '.join(unsupported)} (use /edit)")

        priority = options.get("priority", self.settings.defaults.priority)
        if "due" in options:
            due_date = parse_due_date(options["due"])
        else:
            due_date = self._default_due()

        self._create_task(" ".join(words), priority, due_date)

    def _default_due(self) -> Optional[date]:
        if self.settings.defaults.due_today:
            return parse_due_date("today")
        return None

    def _create_task(self, title: str, priority: str, due_date: Optional[date]):
        """Append a task and report its row number."""
        task = self.store.add(title, priority=TaskPriority.parse(priority), due_date=due_date)
        self.console.print(f"[green]Created task {len(self.store)}:[/green] {escape(task.title)}")

    def _edit_task(self, args: str):
        """Replace fields of one task."""
        words, options = self._split_options(args)
        if not words:
            self._usage("/edit <n> [title] [-p priority] [-d due] [--done|--undone]")
            return

        (position,) = self._parse_positions(words[:1])
        changes = {}
        if "title" in options:
            changes["title"] = options["title"]
        elif len(words) > 1:
            changes["title"] = " ".join(words[1:])
        if "priority" in options:
            changes["priority"] = TaskPriority.parse(options["priority"])
        if "due" in options:
            changes["due_date"] = parse_due_date(options["due"])
        if "done" in options and "undone" in options:
            raise ValueError("Use only one of --done and --undone")
        if "done" in options:
            changes["completed"] = True
        elif "undone" in options:
            changes["completed"] = False

        if not changes:
            self.console.print("[yellow]Nothing to change.[/yellow]")
            return

        task = self.store.update(self._task_at(position).id, **changes)
        self.console.print(f"[green]Saved:[/green] {escape(task.title)}")

    def _set_completed(self, args: str, completed: bool):
        """Mark tasks as completed or not completed."""
        words, _ = self._split_options(args)
        if not words:
            name = "done" if completed else "undone"
            self._usage(f"/{name} <n> [n...]")
            return

        # Resolve every row before changing any of them
        positions = dict.fromkeys(self._parse_positions(words))
        tasks = [self._task_at(p) for p in positions]
        for task in tasks:
            self.store.update(task.id, completed=completed)

        label = "Completed" if completed else "Reopened"
        self.console.print(f"[green]{label} {len(tasks)} task(s)[/green]")

    def _delete_tasks(self, args: str):
        """Delete tasks by row number."""
        words, _ = self._split_options(args)
        if not words:
            self._usage("/delete <n> [n...]")
            return

        removed = self.store.remove(self._parse_positions(words))
        self.console.print(f"[green]Deleted {len(removed)} task(s)[/green]")
