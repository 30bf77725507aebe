"""Tests for settings loading."""

import pytest

import config


@pytest.fixture(autouse=True)
def _fresh_settings():
    yield
    config.reload_settings()


def test_defaults(monkeypatch) -> None:
    monkeypatch.delenv("DATABASE_URL", raising=False)
    monkeypatch.delenv("DB_ECHO", raising=False)
    monkeypatch.delenv("MIGRATIONS_DIR", raising=False)

    settings = config.Settings(_env_file=None)

    assert settings.database_url == "sqlite:///travelbooks.db"
    assert settings.db_echo is False
    assert settings.migrations_dir == config.PROJECT_ROOT / "migrations"
    assert settings.is_sqlite is True


def test_environment_overrides(monkeypatch, tmp_path) -> None:
    monkeypatch.setenv("DATABASE_URL", "postgresql://books@localhost/books")
    monkeypatch.setenv("DB_ECHO", "true")
    monkeypatch.setenv("MIGRATIONS_DIR", str(tmp_path))
    monkeypatch.setenv("LOG_LEVEL", "DEBUG")

    settings = config.reload_settings()

    assert settings.database_url == "postgresql://books@localhost/books"
    assert settings.db_echo is True
    assert settings.migrations_dir == tmp_path
    assert settings.log_level == "DEBUG"
    assert settings.is_sqlite is False


def test_get_settings_is_cached() -> None:
    assert config.get_settings() is config.get_settings()


def test_default_migrations_directory_ships_the_schema() -> None:
    assert (config.PROJECT_ROOT / "migrations" / "001_create_transactions.sql").is_file()
