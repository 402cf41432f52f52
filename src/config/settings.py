"""Settings module for the PizzaRound config service."""

import os

from src.database.postgres import PostgresConfig
from src.domain.config import DEFAULT_PLANNED_UNITS, DEFAULT_ROUND_LIMIT


def _positive_int_env(name: str, default: int) -> int:
    """Read a positive integer from the environment, default otherwise."""
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        value = int(raw)
    except ValueError:
        return default
    return value if value > 0 else default


class GameConfig:
    """Fallback values used when nothing is stored for a setting."""

    def __init__(self) -> None:
        self.default_planned_units = _positive_int_env(
            "GAME_DEFAULT_PLANNED_UNITS", DEFAULT_PLANNED_UNITS
        )
        self.default_round_limit = _positive_int_env(
            "GAME_DEFAULT_ROUND_LIMIT", DEFAULT_ROUND_LIMIT
        )


class Settings:
    """Application settings."""

    def __init__(self) -> None:
        # Service info
        self.environment = os.getenv("ENVIRONMENT", "dev")
        self.service_name = os.getenv("SERVICE_NAME", "pizzaround-config")
        self.service_version = os.getenv("SERVICE_VERSION", "0.1.0")
        self.log_level = os.getenv("LOG_LEVEL", "info")
        self.log_to_postgres = os.getenv("LOG_TO_POSTGRES", "false").lower() in (
            "1",
            "true",
            "yes",
        )

        # PostgreSQL
        self.postgres = PostgresConfig()

        # Game defaults
        self.game = GameConfig()
