"""Centralized settings management for OmniEvent."""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Runtime settings powered by pydantic-settings.

    Values are read from OMNIEVENT_* environment variables and an optional
    .env file in the working directory.
    """

    # -------------------------------------------------------------------------
    # ENVIRONMENT
    # -------------------------------------------------------------------------
    ENV: str = "development"
    DEBUG: bool = False

    # -------------------------------------------------------------------------
    # LOGGING
    # -------------------------------------------------------------------------
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = Field(default="text", pattern="^(text|json)$")

    # -------------------------------------------------------------------------
    # PATHS
    # -------------------------------------------------------------------------
    # BASE_DIR points to the omnievent package
    BASE_DIR: Path = Path(__file__).resolve().parents[1]

    STRATEGIES_CONFIG_PATH: Path = BASE_DIR / "configs" / "strategies.yaml"
    DEVELOPER_FIXTURE_PATH: Path = BASE_DIR / "fixtures" / "list_events.json"

    model_config = SettingsConfigDict(
        env_prefix="OMNIEVENT_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings.

    Returns
    -------
    Settings
        The singleton settings instance.
    """
    return Settings()
