"""Batched PostgreSQL sink for log entries."""

import asyncio
import contextlib
import json
import sys
from typing import Any

import psycopg2
import psycopg2.extras
from psycopg2.extensions import connection as Connection

from src.logger.types import LogEntry

INSERT_LOGS = """
    INSERT INTO logs (
        timestamp, service_name, instance_id, environment,
        level, category, function_name, file_path, line_number,
        message, error_message, stack_trace, context, ingestion_time
    ) VALUES %s
"""


class PostgresWriter:
    """Buffers log entries and inserts them into the logs table in batches."""

    def __init__(
        self,
        dsn: str,
        batch_size: int = 100,
        flush_interval: float = 5.0,
    ) -> None:
        """
        Initialize PostgresWriter.

        Args:
            dsn: PostgreSQL connection string
            batch_size: Buffer size that triggers a flush
            flush_interval: Seconds between background flushes
        """
        self.dsn = dsn
        self.batch_size = batch_size
        self.flush_interval = flush_interval
        self.buffer: list[LogEntry] = []
        self._lock = asyncio.Lock()
        self._conn: Connection | None = None
        self._flush_task: asyncio.Task[None] | None = None
        self._pending: set[asyncio.Task[None]] = set()
        self._closed = False

    async def connect(self) -> None:
        """Open the connection and start the background flush."""
        try:
            self._conn = psycopg2.connect(self.dsn)
            self._conn.set_session(autocommit=False)
        except Exception as e:
            print(f"[LOGGER ERROR] Failed to connect to PostgreSQL: {e}", file=sys.stderr)
            raise
        self._flush_task = asyncio.create_task(self._background_flush())

    async def write(self, entry: LogEntry) -> None:
        """Buffer an entry, flushing once the batch is full."""
        if self._closed:
            return

        async with self._lock:
            self.buffer.append(entry)
            if len(self.buffer) >= self.batch_size:
                self._flush_locked()

    def write_soon(self, entry: LogEntry) -> None:
        """Schedule write() on the running loop, keeping the task referenced."""
        task = asyncio.get_running_loop().create_task(self.write(entry))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    def write_nowait(self, entry: LogEntry) -> None:
        """Buffer an entry from synchronous code, written on the next flush."""
        if not self._closed:
            self.buffer.append(entry)

    async def flush(self) -> None:
        """Write buffered entries now."""
        async with self._lock:
            self._flush_locked()

    def _flush_locked(self) -> None:
        """Insert the buffer; caller holds the lock."""
        if not self.buffer:
            return
        if self._conn is None:
            self._fallback_to_stderr()
            self.buffer.clear()
            return

        try:
            with self._conn.cursor() as cur:
                psycopg2.extras.execute_values(
                    cur,
                    INSERT_LOGS,
                    [self._row(entry) for entry in self.buffer],
                    page_size=self.batch_size,
                )
            self._conn.commit()
        except Exception as e:
            print(f"[LOGGER ERROR] Failed to insert logs into PostgreSQL: {e}", file=sys.stderr)
            self._conn.rollback()
            self._fallback_to_stderr()
        self.buffer.clear()

    @staticmethod
    def _row(entry: LogEntry) -> tuple[Any, ...]:
        return (
            entry.timestamp,
            entry.service_name,
            entry.instance_id,
            entry.environment,
            entry.level.value,
            entry.category.value if entry.category else None,
            entry.function_name,
            entry.file_path,
            entry.line_number,
            entry.message,
            entry.error_message,
            entry.stack_trace,
            json.dumps(entry.context, default=str) if entry.context is not None else None,
            entry.ingestion_time,
        )

    def _fallback_to_stderr(self) -> None:
        """Dump the buffer as JSON lines when the database is unavailable."""
        for entry in self.buffer:
            data: dict[str, Any] = {
                "timestamp": entry.timestamp.isoformat(),
                "level": entry.level.value,
                "category": entry.category.value if entry.category else None,
                "message": entry.message,
                "service_name": entry.service_name,
                "environment": entry.environment,
            }
            if entry.error_message:
                data["error"] = entry.error_message
            if entry.context:
                data["context"] = entry.context
            print(json.dumps(data, default=str), file=sys.stderr)

    async def _background_flush(self) -> None:
        while not self._closed:
            try:
                await asyncio.sleep(self.flush_interval)
                await self.flush()
            except asyncio.CancelledError:
                break
            except Exception as e:
                print(f"[LOGGER ERROR] Background flush failed: {e}", file=sys.stderr)

    async def close(self) -> None:
        """Stop the background flush, write what is left and disconnect."""
        if self._pending:
            await asyncio.gather(*self._pending, return_exceptions=True)
        self._closed = True

        if self._flush_task:
            self._flush_task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await self._flush_task
            self._flush_task = None

        await self.flush()

        if self._conn:
            self._conn.close()
            self._conn = None
