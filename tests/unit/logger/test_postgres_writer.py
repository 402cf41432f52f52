"""Tests for the batched PostgreSQL log sink."""

import json
from datetime import datetime
from unittest.mock import MagicMock

import pytest

from src.logger import postgres_writer
from src.logger.postgres_writer import PostgresWriter
from src.logger.types import Category, Level, LogEntry


def make_entry(message: str = "msg") -> LogEntry:
    return LogEntry(
        timestamp=datetime(2026, 1, 1),
        service_name="svc",
        instance_id="i",
        environment="test",
        level=Level.INFO,
        message=message,
        category=Category.CONFIG,
        context={"round_id": "r1"},
    )


@pytest.fixture
def execute_values(monkeypatch):
    mock = MagicMock()
    monkeypatch.setattr(postgres_writer.psycopg2.extras, "execute_values", mock)
    return mock


async def test_flush_when_batch_full(execute_values):
    writer = PostgresWriter("dsn", batch_size=2)
    writer._conn = MagicMock()

    await writer.write(make_entry("one"))
    execute_values.assert_not_called()
    await writer.write(make_entry("two"))

    execute_values.assert_called_once()
    rows = execute_values.call_args.args[2]
    assert [row[9] for row in rows] == ["one", "two"]
    assert json.loads(rows[0][12]) == {"round_id": "r1"}
    writer._conn.commit.assert_called_once()
    assert writer.buffer == []


async def test_insert_failure_falls_back_to_stderr(execute_values, capsys):
    execute_values.side_effect = RuntimeError("table missing")
    writer = PostgresWriter("dsn")
    writer._conn = MagicMock()

    await writer.write(make_entry("lost?"))
    await writer.flush()

    writer._conn.rollback.assert_called_once()
    err = capsys.readouterr().err
    assert "table missing" in err
    assert '"message": "lost?"' in err
    assert writer.buffer == []


async def test_close_flushes_and_ignores_later_writes(execute_values):
    writer = PostgresWriter("dsn")
    conn = MagicMock()
    writer._conn = conn

    await writer.write(make_entry())
    await writer.close()
    await writer.write(make_entry("after close"))

    execute_values.assert_called_once()
    conn.close.assert_called_once()
    assert writer.buffer == []


async def test_write_nowait_is_flushed_later(execute_values):
    writer = PostgresWriter("dsn")
    writer._conn = MagicMock()

    writer.write_nowait(make_entry("from sync code"))
    await writer.flush()

    rows = execute_values.call_args.args[2]
    assert rows[0][9] == "from sync code"


async def test_write_soon_tasks_are_kept_until_close(execute_values):
    writer = PostgresWriter("dsn")
    writer._conn = MagicMock()

    writer.write_soon(make_entry("scheduled"))
    assert len(writer._pending) == 1

    await writer.close()

    assert writer._pending == set()
    rows = execute_values.call_args.args[2]
    assert rows[0][9] == "scheduled"
