"""Application settings powered by Pydantic BaseSettings."""

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


def default_journal_dir() -> Path:
    """Game journal folder under the user's Saved Games directory."""
    return Path.home() / "Saved Games" / "Frontier Developments" / "Elite Dangerous"


class AppSettings(BaseSettings):
    """Centralized environment configuration."""

    model_config = SettingsConfigDict(
        env_prefix="", case_sensitive=False, env_file=".env", env_file_encoding="utf-8"
    )

    journal_dir: Path = Field(
        default_factory=default_journal_dir, validation_alias="ELITE_JOURNAL_DIR"
    )
    data_dir: Path = Field(
        default=Path("."), validation_alias="STALE_STATIONS_DATA_DIR"
    )


def get_settings() -> AppSettings:
    """Get a settings instance."""
    return AppSettings()
