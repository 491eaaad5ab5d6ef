"""
Application configuration using Pydantic Settings.

Centralizes all configuration with environment variable support.
"""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings with environment variable support."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",  # Ignore extra env vars
    )

    # Database
    database_url: str = "sqlite+aiosqlite:///./data/legal_profile.db"

    # Deployment-wide theme name, used as editor on generated censor rules
    theme_name: str = "nicaragua"

    # Locale for validation messages and generated rule text
    default_locale: str = "es"

    # Environment
    environment: str = "development"
    debug: bool = False
    log_level: str = "INFO"


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


def is_production() -> bool:
    return get_settings().environment == "production"


def is_testing() -> bool:
    return get_settings().environment == "test"
