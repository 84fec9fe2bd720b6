"""Application configuration management.

Loads settings from environment with validation.
"""

from functools import lru_cache
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings with environment variable support."""

    model_config = SettingsConfigDict(
        env_prefix="SOUNDSHIFT_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    # Similarity search
    fuzzy_threshold: float = Field(default=0.6, ge=0.0, le=1.0)

    # Storage
    rules_filename: str = "sca_rules.json"

    # Development
    debug: bool = False
    log_level: str = "INFO"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
