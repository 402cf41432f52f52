"""Types and constants for structured logging."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any


class Level(str, Enum):
    """Severity of a log entry."""

    TRACE = "trace"
    DEBUG = "debug"
    INFO = "info"
    WARN = "warn"
    ERROR = "error"

    @property
    def rank(self) -> int:
        """Numeric order used for level filtering."""
        return _LEVEL_ORDER.index(self)

    @classmethod
    def parse(cls, value: str | None, default: "Level") -> "Level":
        """Parse level name (case-insensitive), default on unknown names."""
        if not value:
            return default
        name = value.strip().lower()
        if name == "warning":
            name = "warn"
        try:
            return cls(name)
        except ValueError:
            return default


_LEVEL_ORDER = [Level.TRACE, Level.DEBUG, Level.INFO, Level.WARN, Level.ERROR]


class Category(str, Enum):
    """Event category used to group log entries."""

    DATABASE = "database"  # Pool and repository operations
    CONFIG = "config"  # Config resolution and persistence
    ROUNDS = "rounds"  # Round limit checks
    CLI = "cli"  # Admin command line


@dataclass
class LogEntry:
    """One log record, shaped like a row of the logs table."""

    timestamp: datetime
    service_name: str
    instance_id: str
    environment: str
    level: Level
    message: str
    ingestion_time: datetime = field(default_factory=datetime.utcnow)
    category: Category | None = None
    function_name: str | None = None
    file_path: str | None = None
    line_number: int | None = None
    error_message: str | None = None
    stack_trace: str | None = None
    context: dict[str, Any] | None = None


@dataclass
class Field:
    """Key/value pair attached to a log entry."""

    key: str
    value: Any


def category(cat: Category) -> Field:
    """Override the logger category for a single entry."""
    return Field(key="_category", value=cat)


def param(key: str, value: Any) -> Field:
    """Generic context field."""
    return Field(key=key, value=value)
