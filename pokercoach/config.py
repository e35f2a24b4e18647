"""
Configuration settings for the pokercoach scheduler.

Uses Pydantic Settings for environment variable management with .env file support.
"""
from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ========================================
    # Database
    # ========================================
    database_url: str = Field(
        default="sqlite:///pokercoach.db",
        description="SQLAlchemy connection string (PostgreSQL in production)",
    )

    # ========================================
    # Logging
    # ========================================
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO",
        description="Logging level",
    )
    log_file: str | None = Field(
        default=None,
        description="Optional log file path",
    )

    # ========================================
    # Drill Queue
    # ========================================
    queue_batch_size: int = Field(
        default=10,
        ge=0,
        description="Number of queue items created per batch",
    )
    queue_focus_share: float = Field(
        default=0.7,
        ge=0.0,
        le=1.0,
        description="Share of the batch allocated to the primary focus tag",
    )
    mistake_window_days: int = Field(
        default=30,
        ge=1,
        description="Rolling window for focus mix mistake statistics",
    )
    due_drills_limit: int = Field(
        default=5,
        ge=1,
        description="Default number of due drills returned to a client",
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
