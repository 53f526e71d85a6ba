"""Application configuration using pydantic-settings."""

from functools import lru_cache
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Database
    database_url: str = "sqlite:///charbuilder.db"

    # Content
    content_dir: Path | None = None  # None = bundled charbuilder/data

    # Choice validation defaults
    validate_on_path_change: bool = True
    validate_on_ancestry_change: bool = True
    preserve_invalid_choices: bool = False

    # Debug
    debug: bool = False
    log_level: str = "WARNING"
    trace_resolution: bool = False  # Attach the Rich console observer in the CLI


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


# Convenience alias
settings = get_settings()
