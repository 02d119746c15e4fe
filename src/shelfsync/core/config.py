"""Configuration management for ShelfSync.

This module uses Pydantic Settings to load and validate configuration from
environment variables and .env files. Configuration is loaded once per
process and is immutable during a sync cycle.
"""

import os
from functools import lru_cache
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration settings.

    Settings are loaded from environment variables and .env files.
    Paths are kept as strings; the catalog path helpers turn them into
    ``Path`` objects when a store is built.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="SHELFSYNC_",
        case_sensitive=False,
        extra="ignore",
    )

    # Application Settings
    app_version: str = "0.1.0"

    # Steam Locations
    steam_path: str | None = Field(
        default=None,
        description="Steam install directory, root of the userdata catalog files",
    )
    local_app_data: str | None = Field(
        default_factory=lambda: os.environ.get("LOCALAPPDATA"),
        validate_default=True,
        description="Local application data root holding Steam's htmlcache",
    )
    leveldb_path: str | None = Field(
        default=None,
        description="Explicit Local Storage leveldb directory (overrides local_app_data)",
    )

    # Catalog Settings
    catalog_backend: Literal["auto", "file", "leveldb"] = "auto"
    backup_on_commit: bool = True
    leveldb_paranoid_checks: bool = True

    # Logging Settings
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    log_format: Literal["json", "console"] = "console"

    @field_validator("steam_path", "local_app_data", "leveldb_path", mode="before")
    @classmethod
    def blank_path_to_none(cls, v: str | None) -> str | None:
        """Strip path values and treat empty strings as unset."""
        if isinstance(v, str):
            v = v.strip()
            return v or None
        return v


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance.

    Returns:
        Settings: Cached application settings instance.
    """
    return Settings()
