"""Settings for the ltsql front end.

The engine itself takes no configuration; these settings cover logging and
the interactive shell only. Values come from ``LITERAL_TABLES_*``
environment variables.
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Front-end configuration."""

    model_config = SettingsConfigDict(
        env_prefix="LITERAL_TABLES_",
        case_sensitive=False,
    )

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="WARNING", description="Log level"
    )
    log_format: Literal["json", "console"] = Field(default="console", description="Log format")
    history_file: Path = Field(
        default=Path("~/.ltsql_history"), description="Readline history file for the shell"
    )
    history_length: int = Field(default=1000, ge=0, description="Max history entries kept")
    prompt: str = Field(default="ltsql> ", description="Shell prompt")

    @property
    def history_path(self) -> Path:
        return self.history_file.expanduser()


@lru_cache
def get_settings() -> Settings:
    """Get the cached settings instance."""
    return Settings()
