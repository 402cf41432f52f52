"""Configuration repository for PostgreSQL."""

from typing import Any

from src.database.postgres import PostgresClient
from src.domain.config import ConfigEntry
from src.logger.logger import get_logger
from src.logger.types import Category, param


class ConfigRepository:
    """Repository for key/value game settings in the config table."""

    def __init__(self, postgres_client: PostgresClient) -> None:
        """
        Initialize ConfigRepository.

        Args:
            postgres_client: PostgreSQL client instance
        """
        self.postgres = postgres_client
        self.logger = get_logger().with_category(Category.DATABASE)

    def get(self, key: str) -> ConfigEntry | None:
        """
        Get configuration entry by key.

        Args:
            key: Configuration key

        Returns:
            ConfigEntry or None if not found
        """
        row = self.postgres.fetch_one(
            """
            SELECT key, value, description, updated_at, updated_by
            FROM config
            WHERE key = %s
            """,
            (key,),
        )
        if row is None:
            return None
        return self._row_to_entry(row)

    def set(
        self,
        key: str,
        value: str,
        description: str | None = None,
        updated_by: str = "system",
    ) -> None:
        """
        Insert or overwrite a configuration value.

        Args:
            key: Configuration key
            value: Configuration value
            description: Human-readable description of the setting
            updated_by: Who updated (system, admin, cli)

        Raises:
            Exception: Store errors, logged by the caller
        """
        self.postgres.execute(
            """
            INSERT INTO config (key, value, description, updated_by, updated_at)
            VALUES (%s, %s, %s, %s, NOW())
            ON CONFLICT (key) DO UPDATE SET
                value = EXCLUDED.value,
                description = EXCLUDED.description,
                updated_by = EXCLUDED.updated_by,
                updated_at = NOW()
            """,
            (key, value, description, updated_by),
        )
        self.logger.debug(
            "Config updated",
            param("key", key),
            param("value", value),
            param("updated_by", updated_by),
        )

    def get_all(self) -> list[ConfigEntry]:
        """
        Get all configuration entries.

        Returns:
            List of ConfigEntry ordered by key
        """
        rows = self.postgres.fetch_all(
            """
            SELECT key, value, description, updated_at, updated_by
            FROM config
            ORDER BY key
            """
        )
        return [self._row_to_entry(row) for row in rows]

    @staticmethod
    def _row_to_entry(row: dict[str, Any]) -> ConfigEntry:
        return ConfigEntry(
            key=row["key"],
            value=row["value"],
            description=row.get("description"),
            updated_at=row.get("updated_at"),
            updated_by=row.get("updated_by") or "system",
        )
