"""Main entry point for the task list."""

import logging

from .store import TaskStore
from .interfaces.cli import TaskCLI
from .config import config

logger = logging.getLogger(__name__)


def setup_logging(level: str):
    """Configure root logging once, before the shell starts."""
    logging.basicConfig(
        level=getattr(logging, level, logging.WARNING),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


def cli_main():
    """Entry point for CLI."""
    setup_logging(config.log_level)

    # Tasks live only for this process
    store = TaskStore()
    logger.info("Starting task list (history: %s)", config.paths.history)

    cli = TaskCLI(store)
    cli.run()


if __name__ == "__main__":
    cli_main()
