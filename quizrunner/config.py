"""
Configuration settings for the quiz runner.

Uses Pydantic Settings for environment variable management with .env file support.
All variables are prefixed with QUIZ_ (e.g. QUIZ_QUESTION_SOURCE).
"""
from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="QUIZ_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ========================================
    # Question Source
    # ========================================
    question_source: str = Field(
        default="questions.json",
        description="Path or http(s) URL of the question list JSON",
    )
    http_timeout_seconds: float = Field(
        default=10.0,
        gt=0,
        description="Timeout for fetching the question list over HTTP",
    )

    # ========================================
    # Persistence
    # ========================================
    state_db_path: Path = Field(
        default=Path.home() / ".quizrunner" / "state.db",
        description="SQLite file holding the key-value records",
    )
    progress_key: str = Field(
        default="gcpDevOpsQuizProgress",
        description="Storage key for the correctly answered question ids",
    )
    categories_key: str = Field(
        default="gcpDevOpsQuizCategories",
        description="Storage key for the selected categories",
    )

    # ========================================
    # Logging
    # ========================================
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="WARNING",
        description="Minimum level written to stderr",
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
