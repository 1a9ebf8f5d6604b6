"""Custom exceptions for the signal deduplication core."""

from __future__ import annotations


class SignalDedupError(Exception):
    """Base exception for all signal deduplication errors."""
    pass


class ConfigurationError(SignalDedupError):
    """Raised when the core is configured with unusable values."""
    pass


class InvalidThresholdError(ConfigurationError):
    """Raised when a similarity threshold falls outside (0, 1]."""

    def __init__(self, threshold: float, name: str = "similarity_threshold"):
        self.threshold = threshold
        self.name = name
        super().__init__(f"{name} must be in (0, 1], got {threshold!r}")
