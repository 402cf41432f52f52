"""Structured logger with an optional PostgreSQL sink."""

import asyncio
import inspect
import os
import sys
import traceback
import uuid
from datetime import datetime
from pathlib import Path
from typing import Any

from src.logger.postgres_writer import PostgresWriter
from src.logger.types import Category, Field, Level, LogEntry


class Logger:
    """Logger producing LogEntry records with category and context fields."""

    def __init__(
        self,
        service_name: str,
        environment: str,
        writer: PostgresWriter | None = None,
        min_level: Level = Level.DEBUG,
    ) -> None:
        """
        Initialize Logger.

        Args:
            service_name: Service name stamped on every entry
            environment: Deployment environment (dev, stage, prod)
            writer: PostgresWriter sink, entries go to stderr when None
            min_level: Entries below this level are dropped
        """
        self.service_name = service_name
        self.environment = environment
        self.writer = writer
        self.min_level = min_level
        self.instance_id = self._get_instance_id()

        self._fields: dict[str, Any] = {}
        self._category: Category | None = None

    def trace(self, msg: str, *fields: Field) -> None:
        """Log trace level message."""
        self._log(Level.TRACE, msg, None, *fields)

    def debug(self, msg: str, *fields: Field) -> None:
        """Log debug level message."""
        self._log(Level.DEBUG, msg, None, *fields)

    def info(self, msg: str, *fields: Field) -> None:
        """Log info level message."""
        self._log(Level.INFO, msg, None, *fields)

    def warn(self, msg: str, *fields: Field) -> None:
        """Log warn level message."""
        self._log(Level.WARN, msg, None, *fields)

    def error(self, msg: str, err: BaseException | None = None, *fields: Field) -> None:
        """Log error level message, with stack trace when err is given."""
        self._log(Level.ERROR, msg, err, *fields)

    def is_enabled(self, level: Level) -> bool:
        """Check whether entries of the given level are emitted."""
        return level.rank >= self.min_level.rank

    def _log(
        self,
        level: Level,
        msg: str,
        err: BaseException | None,
        *fields: Field,
    ) -> None:
        if not self.is_enabled(level):
            return

        # _log <- public method <- caller
        frame = inspect.currentframe()
        caller = frame.f_back.f_back if frame and frame.f_back else None

        context: dict[str, Any] = dict(self._fields)
        entry_category = self._category
        for f in fields:
            if f.key == "_category":
                if isinstance(f.value, Category):
                    entry_category = f.value
                continue
            context[f.key] = f.value

        entry = LogEntry(
            timestamp=datetime.utcnow(),
            service_name=self.service_name,
            instance_id=self.instance_id,
            environment=self.environment,
            level=level,
            category=entry_category,
            message=msg,
            context=context or None,
        )
        if caller:
            entry.function_name = caller.f_code.co_name
            entry.file_path = self._clean_file_path(caller.f_code.co_filename)
            entry.line_number = caller.f_lineno

        if err is not None:
            entry.error_message = str(err)
            if level is Level.ERROR:
                entry.stack_trace = "".join(
                    traceback.format_exception(type(err), err, err.__traceback__)
                )

        self._emit(entry)

    def _emit(self, entry: LogEntry) -> None:
        if self.writer is None:
            print(self.format_line(entry), file=sys.stderr)
            return

        try:
            asyncio.get_running_loop()
        except RuntimeError:
            self.writer.write_nowait(entry)
            return
        self.writer.write_soon(entry)

    @staticmethod
    def format_line(entry: LogEntry) -> str:
        """Render an entry as a single human-readable line."""
        cat = entry.category.value if entry.category else "-"
        line = f"{entry.timestamp.isoformat()} [{entry.level.value}] {cat}: {entry.message}"
        if entry.context:
            pairs = " ".join(f"{k}={v}" for k, v in entry.context.items())
            line = f"{line} {pairs}"
        if entry.error_message:
            line = f"{line} error={entry.error_message}"
        return line

    def with_category(self, cat: Category) -> "Logger":
        """Return a copy of the logger bound to a category."""
        new_logger = self._copy()
        new_logger._category = cat
        return new_logger

    def with_fields(self, *fields: Field) -> "Logger":
        """Return a copy of the logger carrying extra context fields."""
        new_logger = self._copy()
        for f in fields:
            new_logger._fields[f.key] = f.value
        return new_logger

    def _copy(self) -> "Logger":
        new_logger = Logger(
            self.service_name, self.environment, self.writer, self.min_level
        )
        new_logger.instance_id = self.instance_id
        new_logger._fields = dict(self._fields)
        new_logger._category = self._category
        return new_logger

    @staticmethod
    def _get_instance_id() -> str:
        """Container hostname when available, random UUID otherwise."""
        if hostname := os.getenv("HOSTNAME"):
            return hostname
        return str(uuid.uuid4())

    @staticmethod
    def _clean_file_path(file_path: str) -> str:
        """Strip everything before the src/ package from a path."""
        parts = Path(file_path).parts
        if "src" in parts:
            return str(Path(*parts[parts.index("src"):]))
        return Path(file_path).name


_global_logger: Logger | None = None


def get_logger() -> Logger:
    """Return the process-wide logger."""
    if _global_logger is None:
        raise RuntimeError("Logger not initialized. Call init_logger() first.")
    return _global_logger


def init_logger(
    service_name: str,
    environment: str,
    writer: PostgresWriter | None = None,
    level: str | Level = Level.DEBUG,
) -> Logger:
    """
    Initialize the process-wide logger.

    Args:
        service_name: Service name
        environment: Deployment environment (dev, stage, prod)
        writer: PostgresWriter sink, or None for stderr
        level: Minimum level, as a Level or its name

    Returns:
        Logger instance
    """
    global _global_logger
    min_level = level if isinstance(level, Level) else Level.parse(level, Level.DEBUG)
    _global_logger = Logger(service_name, environment, writer, min_level)
    return _global_logger
