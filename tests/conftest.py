"""Shared test fixtures for the PizzaRound config test suite."""

from collections.abc import Generator
from unittest.mock import MagicMock

import pytest

from src.domain.config import ConfigEntry
from src.logger import logger as logger_module
from src.logger.logger import Logger, init_logger


class InMemoryConfigRepository:
    """ConfigRepository stand-in keeping entries in a dict."""

    def __init__(self, entries: dict[str, str] | None = None) -> None:
        self.entries: dict[str, ConfigEntry] = {
            key: ConfigEntry(key=key, value=value)
            for key, value in (entries or {}).items()
        }

    def get(self, key: str) -> ConfigEntry | None:
        return self.entries.get(key)

    def set(
        self,
        key: str,
        value: str,
        description: str | None = None,
        updated_by: str = "system",
    ) -> None:
        self.entries[key] = ConfigEntry(
            key=key, value=value, description=description, updated_by=updated_by
        )

    def get_all(self) -> list[ConfigEntry]:
        return [self.entries[key] for key in sorted(self.entries)]


@pytest.fixture(autouse=True)
def test_logger() -> Generator[Logger, None, None]:
    """Process-wide logger writing to stderr, reset after each test."""
    logger = init_logger("pizzaround-config-test", "test", level="debug")
    yield logger
    logger_module._global_logger = None


@pytest.fixture
def config_repo() -> InMemoryConfigRepository:
    """Empty in-memory config store."""
    return InMemoryConfigRepository()


@pytest.fixture
def round_repo() -> MagicMock:
    """Round repository with no rounds."""
    repo = MagicMock()
    repo.list_by_number_desc.return_value = []
    return repo


@pytest.fixture
def flavor_history_repo() -> MagicMock:
    """Flavor history repository with no history."""
    repo = MagicMock()
    repo.get_max_order.return_value = None
    return repo


@pytest.fixture
def mock_postgres() -> MagicMock:
    """PostgresClient stand-in for repository tests."""
    client = MagicMock()
    client.fetch_one.return_value = None
    client.fetch_all.return_value = []
    client.execute.return_value = 1
    return client


@pytest.fixture
def make_config_repo() -> type[InMemoryConfigRepository]:
    """Factory for in-memory config stores seeded with key/value pairs."""
    return InMemoryConfigRepository
