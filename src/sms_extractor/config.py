"""Configuration management for SMS Extractor.

This module handles application configuration using Pydantic settings.
Configuration can be loaded from environment variables or .env files.
"""

from functools import lru_cache
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings with environment variable support.

    All settings can be overridden via environment variables with
    the SMS_EXTRACTOR_ prefix (e.g., SMS_EXTRACTOR_MIN_CONFIDENCE).
    """

    model_config = SettingsConfigDict(
        env_prefix="SMS_EXTRACTOR_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Review policy
    min_confidence: float = Field(
        default=0.6,
        ge=0.0,
        le=1.0,
        description="Minimum confidence for a transaction to be accepted without review",
    )

    # Batch / stream processing
    batch_chunk_size: int = Field(
        default=50,
        gt=0,
        description="Number of messages processed together in one batch chunk",
    )
    max_concurrency: int = Field(
        default=8,
        gt=0,
        description="Maximum number of messages extracted concurrently within a chunk",
    )
    stream_buffer_size: int = Field(
        default=50,
        gt=0,
        description="Maximum number of in-flight messages while streaming",
    )
    processing_timeout_ms: int = Field(
        default=5000,
        gt=0,
        description="Per-message processing deadline in milliseconds",
    )

    # Deduplication cache
    cache_enabled: bool = Field(
        default=True,
        description="Enable the processed-message deduplication cache",
    )
    cache_size_limit: int = Field(
        default=1000,
        gt=1,
        description="Maximum number of cached extraction results",
    )

    # Scoring
    fast_processing_ms: float = Field(
        default=100.0,
        ge=0.0,
        description="Extractions faster than this earn the processing-time bonus",
    )

    # Patterns
    custom_patterns_path: Path | None = Field(
        default=None,
        description="Optional JSON file with additional institution pattern bundles",
    )

    # Application Configuration
    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    )
    debug: bool = Field(
        default=False,
        description="Enable debug mode",
    )


@lru_cache
def get_settings() -> Settings:
    """Get cached application settings.

    Returns:
        Settings: Application settings instance.
    """
    return Settings()
