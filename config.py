"""
Configuration settings for the pathwise normalization service.

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
    # Request Limits
    # ========================================
    default_item_count: int = Field(
        default=5,
        ge=1,
        description="Number of items generated when the request omits a count",
    )
    max_item_count: int = Field(
        default=50,
        ge=1,
        description="Largest count a single request may ask for",
    )

    # ========================================
    # Answer Redaction
    # ========================================
    keep_answers_secret: str = Field(
        default="",
        description="Admin secret required to receive correct answers (empty disables keepAnswers)",
    )

    # ========================================
    # Parsing & Normalization
    # ========================================
    quiz_max_options: int = Field(
        default=4,
        ge=2,
        description="Options kept per quiz question",
    )
    json_scan_max_chars: int = Field(
        default=20000,
        ge=1,
        description="Window size for the incremental bracket scan over model output",
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

    # ========================================
    # API Server
    # ========================================
    api_host: str = Field(
        default="127.0.0.1",
        description="API server host",
    )
    api_port: int = Field(
        default=8100,
        description="API server port",
    )

    def answers_enabled(self) -> bool:
        """Check if answer disclosure can ever be authorized."""
        return bool(self.keep_answers_secret)

    def get_limits(self) -> dict[str, int]:
        """Get request limits as a dictionary."""
        return {
            "default_item_count": self.default_item_count,
            "max_item_count": self.max_item_count,
            "quiz_max_options": self.quiz_max_options,
            "json_scan_max_chars": self.json_scan_max_chars,
        }


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
