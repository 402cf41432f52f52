"""Tests for PostgresClient query helpers."""

from unittest.mock import MagicMock

import psycopg2
import pytest

from src.database.postgres import PostgresClient, PostgresConfig


@pytest.fixture
def pooled_client():
    """PostgresClient with a mocked pool handing out one mocked connection."""
    client = PostgresClient(PostgresConfig(host="db", password="secret"))
    conn = MagicMock()
    cursor = conn.cursor.return_value.__enter__.return_value
    client.pool = MagicMock()
    client.pool.getconn.return_value = conn
    return client, conn, cursor


def test_dsn():
    config = PostgresConfig(
        host="db", port=6543, database="game", user="u", password="p"
    )

    assert config.dsn == "host=db port=6543 dbname=game user=u password=p"


def test_config_from_dict():
    client = PostgresClient({"host": "db", "password": "p"})

    assert client.config.host == "db"


def test_get_connection_requires_pool():
    with pytest.raises(RuntimeError):
        PostgresClient(PostgresConfig(password="p")).get_connection()


def test_fetch_one_commits_and_releases(pooled_client):
    client, conn, cursor = pooled_client
    cursor.fetchone.return_value = {"value": "5"}

    row = client.fetch_one("SELECT value FROM config WHERE key = %s", ("k",))

    assert row == {"value": "5"}
    cursor.execute.assert_called_once_with(
        "SELECT value FROM config WHERE key = %s", ("k",)
    )
    conn.commit.assert_called_once()
    client.pool.putconn.assert_called_once_with(conn)


def test_fetch_one_no_row(pooled_client):
    client, _, cursor = pooled_client
    cursor.fetchone.return_value = None

    assert client.fetch_one("SELECT 1") is None


def test_fetch_all(pooled_client):
    client, _, cursor = pooled_client
    cursor.fetchall.return_value = [{"number": 2}, {"number": 1}]

    assert client.fetch_all("SELECT number FROM rounds") == [{"number": 2}, {"number": 1}]


def test_execute_rolls_back_on_error(pooled_client):
    client, conn, cursor = pooled_client
    cursor.execute.side_effect = psycopg2.OperationalError("gone")

    with pytest.raises(psycopg2.OperationalError):
        client.execute("INSERT INTO config VALUES (%s)", ("x",))

    conn.rollback.assert_called_once()
    conn.commit.assert_not_called()
    client.pool.putconn.assert_called_once_with(conn)


async def test_close_releases_pool(pooled_client):
    client, _, _ = pooled_client
    pool = client.pool

    await client.close()

    pool.closeall.assert_called_once()
    assert client.pool is None
