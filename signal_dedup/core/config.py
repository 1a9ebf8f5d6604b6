"""
Deduplication configuration with fail-fast validation.
Out-of-range thresholds are rejected when settings load.
"""
from __future__ import annotations

import logging
from functools import lru_cache

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from signal_dedup.core.logging import configure_logging

logger = logging.getLogger(__name__)

# Constants
HIGH_SIMILARITY_THRESHOLD = 0.90
DEFAULT_SIMILARITY_THRESHOLD = 0.85
DEFAULT_MIN_QUALITY = 0.6

_LOG_LEVELS = {"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"}


class Settings(BaseSettings):
    """
    Deduplication settings.
    Only the medium-pass threshold is tunable; the high-pass threshold and
    the scoring weights are fixed module constants.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    DEDUP_SIMILARITY_THRESHOLD: float = DEFAULT_SIMILARITY_THRESHOLD
    MIN_QUALITY_SCORE: float = DEFAULT_MIN_QUALITY

    LOG_LEVEL: str = "INFO"
    ENVIRONMENT: str = "production"

    @field_validator("DEDUP_SIMILARITY_THRESHOLD")
    @classmethod
    def validate_threshold(cls, v: float) -> float:
        """Similarity thresholds must lie in (0, 1]."""
        if not 0.0 < v <= 1.0:
            raise ValueError(f"DEDUP_SIMILARITY_THRESHOLD must be in (0, 1], got {v}")
        return v

    @field_validator("MIN_QUALITY_SCORE")
    @classmethod
    def validate_min_quality(cls, v: float) -> float:
        if not 0.0 <= v <= 1.0:
            raise ValueError(f"MIN_QUALITY_SCORE must be in [0, 1], got {v}")
        return v

    @field_validator("LOG_LEVEL")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.strip().upper()
        if level not in _LOG_LEVELS:
            raise ValueError(f"LOG_LEVEL must be one of {', '.join(sorted(_LOG_LEVELS))}")
        return level

    def log_startup_summary(self) -> None:
        """Log configuration summary on startup."""
        logger.info("=" * 60)
        logger.info("Signal Dedup - Configuration")
        logger.info("=" * 60)
        logger.info("Environment: %s", self.ENVIRONMENT)
        logger.info("Log Level: %s", self.LOG_LEVEL)
        logger.info("High Similarity Threshold: %.2f (fixed)", HIGH_SIMILARITY_THRESHOLD)
        logger.info("Medium Similarity Threshold: %.2f", self.DEDUP_SIMILARITY_THRESHOLD)
        logger.info("Minimum Quality Score: %.2f", self.MIN_QUALITY_SCORE)
        logger.info("=" * 60)


@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings instance.
    Will raise ValidationError if configuration is invalid.
    """
    settings = Settings()
    configure_logging(settings.LOG_LEVEL)
    settings.log_startup_summary()
    return settings


def reset_settings_cache() -> None:
    """Clear cached settings (useful in tests)."""
    get_settings.cache_clear()
