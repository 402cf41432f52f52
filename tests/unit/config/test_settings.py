"""Tests for environment-driven settings."""

from src.config.settings import Settings


def test_defaults(monkeypatch):
    for name in (
        "ENVIRONMENT",
        "LOG_LEVEL",
        "LOG_TO_POSTGRES",
        "GAME_DEFAULT_PLANNED_UNITS",
        "GAME_DEFAULT_ROUND_LIMIT",
    ):
        monkeypatch.delenv(name, raising=False)

    settings = Settings()

    assert settings.environment == "dev"
    assert settings.log_level == "info"
    assert settings.log_to_postgres is False
    assert settings.game.default_planned_units == 5
    assert settings.game.default_round_limit == 5


def test_overrides(monkeypatch):
    monkeypatch.setenv("LOG_TO_POSTGRES", "true")
    monkeypatch.setenv("DB_HOST", "pg")
    monkeypatch.setenv("GAME_DEFAULT_PLANNED_UNITS", "8")
    monkeypatch.setenv("GAME_DEFAULT_ROUND_LIMIT", "12")

    settings = Settings()

    assert settings.log_to_postgres is True
    assert settings.postgres.host == "pg"
    assert settings.game.default_planned_units == 8
    assert settings.game.default_round_limit == 12


def test_invalid_game_defaults_fall_back(monkeypatch):
    monkeypatch.setenv("GAME_DEFAULT_PLANNED_UNITS", "many")
    monkeypatch.setenv("GAME_DEFAULT_ROUND_LIMIT", "0")

    settings = Settings()

    assert settings.game.default_planned_units == 5
    assert settings.game.default_round_limit == 5
