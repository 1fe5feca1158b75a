"""
Configuration settings for the spaced-review scheduler.

Uses Pydantic Settings for environment variable management with .env file support.
Every field can be overridden with a SPACED_REVIEW_ prefixed variable, e.g.
SPACED_REVIEW_REVIEW_STORE_BACKEND=sqlite.
"""
from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Any, Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_DATA_DIR = Path.home() / ".spaced_review"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="SPACED_REVIEW_",
        case_sensitive=False,
        extra="ignore",
    )

    # ========================================
    # Review Storage
    # ========================================
    review_store_backend: Literal["memory", "json", "sqlite"] = Field(
        default="json",
        description="Persistence backend for review records",
    )
    review_store_path: Path | None = Field(
        default=None,
        description="File used by the json/sqlite backends (per-backend default if None)",
    )

    # ========================================
    # SM-2 Settings (for spaced repetition)
    # ========================================
    sm2_default_ease_factor: float = Field(
        default=2.5,
        description="Ease factor given to modules on their first schedule",
    )
    sm2_minimum_ease_factor: float = Field(
        default=1.3,
        description="Floor applied after every ease update",
    )
    sm2_first_interval_days: int = Field(
        default=1,
        description="Interval after the first successful recall",
    )
    sm2_second_interval_days: int = Field(
        default=6,
        description="Interval after the second successful recall",
    )

    # ========================================
    # Review Queries
    # ========================================
    upcoming_window_days: int = Field(
        default=7,
        description="Default look-ahead for upcoming reviews",
    )
    week_days: int = Field(
        default=7,
        description="Window used for the 'due this week' statistic",
    )

    # ========================================
    # Logging
    # ========================================
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO",
        description="Logging verbosity level",
    )
    log_file: str | None = Field(
        default=None,
        description="Log file path (None for stderr only)",
    )

    @field_validator("sm2_minimum_ease_factor")
    @classmethod
    def _minimum_ease_positive(cls, value: float) -> float:
        if value <= 0:
            raise ValueError("sm2_minimum_ease_factor must be positive")
        return value

    @field_validator("sm2_first_interval_days", "sm2_second_interval_days")
    @classmethod
    def _interval_at_least_one(cls, value: int) -> int:
        if value < 1:
            raise ValueError("intervals must be at least one day")
        return value

    # ========================================
    # Helper Methods
    # ========================================
    def get_review_store_path(self) -> Path:
        """Get the store file, defaulting to a backend-specific name in the data dir."""
        if self.review_store_path is not None:
            return self.review_store_path
        filename = "reviews.db" if self.review_store_backend == "sqlite" else "progress.json"
        return DEFAULT_DATA_DIR / filename

    def get_sm2_config(self) -> dict[str, Any]:
        """Get SM-2 algorithm configuration as a dictionary."""
        return {
            "default_ease_factor": self.sm2_default_ease_factor,
            "minimum_ease_factor": self.sm2_minimum_ease_factor,
            "first_interval": self.sm2_first_interval_days,
            "second_interval": self.sm2_second_interval_days,
        }


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
