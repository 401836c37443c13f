"""Tests for front-end settings."""

from pathlib import Path

import pytest
from pydantic import ValidationError

from literal_tables.config import Settings, get_settings


def test_defaults(monkeypatch):
    for var in ("LOG_LEVEL", "LOG_FORMAT", "HISTORY_FILE", "HISTORY_LENGTH", "PROMPT"):
        monkeypatch.delenv(f"LITERAL_TABLES_{var}", raising=False)
    settings = Settings()
    assert settings.log_level == "WARNING"
    assert settings.log_format == "console"
    assert settings.history_length == 1000
    assert settings.prompt == "ltsql> "


def test_environment_override(monkeypatch):
    monkeypatch.setenv("LITERAL_TABLES_LOG_LEVEL", "DEBUG")
    monkeypatch.setenv("LITERAL_TABLES_LOG_FORMAT", "json")
    monkeypatch.setenv("LITERAL_TABLES_HISTORY_LENGTH", "50")
    settings = Settings()
    assert settings.log_level == "DEBUG"
    assert settings.log_format == "json"
    assert settings.history_length == 50


def test_history_path_expands_user():
    settings = Settings(history_file=Path("~/history"))
    assert settings.history_path == Path.home() / "history"


def test_invalid_values():
    with pytest.raises(ValidationError):
        Settings(history_length=-1)
    with pytest.raises(ValidationError):
        Settings(log_level="LOUD")


def test_get_settings_is_cached():
    get_settings.cache_clear()
    try:
        assert get_settings() is get_settings()
    finally:
        get_settings.cache_clear()
