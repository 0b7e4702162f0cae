"""Configuration management for the task list."""

from pathlib import Path
from dataclasses import dataclass, field
from typing import Optional
import os
from dotenv import load_dotenv

# Load .env file
load_dotenv()


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


@dataclass
class DisplayConfig:
    """How tasks are shown."""
    # strftime pattern for due dates; None means short style (3/7/26)
    date_format: Optional[str] = None
    show_ids: bool = False


@dataclass
class DefaultsConfig:
    """Defaults for new tasks created from the shell."""
    priority: str = "Medium"
    due_today: bool = True


@dataclass
class PathConfig:
    """Path configuration."""
    base: Path = field(default_factory=lambda: Path.home() / ".tasklist")

    @property
    def history(self) -> Path:
        return self.base / "history"


@dataclass
class Config:
    """Main configuration class."""
    display: DisplayConfig = field(default_factory=DisplayConfig)
    defaults: DefaultsConfig = field(default_factory=DefaultsConfig)
    paths: PathConfig = field(default_factory=PathConfig)
    log_level: str = "WARNING"

    @classmethod
    def from_env(cls) -> "Config":
        """Load configuration from environment variables."""
        home = os.getenv("TASKLIST_HOME")
        return cls(
            display=DisplayConfig(
                date_format=os.getenv("TASKLIST_DATE_FORMAT") or None,
                show_ids=_env_bool("TASKLIST_SHOW_IDS", False),
            ),
            defaults=DefaultsConfig(
                priority=os.getenv("TASKLIST_DEFAULT_PRIORITY", "Medium"),
                due_today=_env_bool("TASKLIST_DUE_TODAY", True),
            ),
            paths=PathConfig(base=Path(home).expanduser()) if home else PathConfig(),
            log_level=os.getenv("TASKLIST_LOG_LEVEL", "WARNING").upper(),
        )


# Global config instance
config = Config.from_env()
