"""Configuration management.

Uses pydantic-settings for type-safe configuration from environment variables.
"""

from functools import lru_cache
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings.

    All settings can be overridden via environment variables.
    Prefix: SQLTRIM_
    """

    model_config = SettingsConfigDict(
        env_prefix="SQLTRIM_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Scanning
    chunk_size: int = Field(
        default=1024 * 1024,
        ge=1,
        description="Number of bytes read from the dump per chunk",
    )

    # Logging
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(default="WARNING")
    log_format: Literal["console", "json"] = Field(default="console")

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, value: object) -> object:
        return value.upper() if isinstance(value, str) else value


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
