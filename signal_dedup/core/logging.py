from __future__ import annotations

import json
import logging
from datetime import datetime, timezone

PACKAGE_LOGGER = "signal_dedup"

# Keys passed through ``extra=`` that are copied into the JSON payload.
CONTEXT_FIELDS = ("total", "unique", "duplicates", "dedupe_rate", "threshold", "pass_name")


class JsonFormatter(logging.Formatter):
    """Format logs as structured JSON for production observability."""

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "timestamp": datetime.now(timezone.utc).isoformat(timespec="seconds").replace("+00:00", "Z"),
            "level": record.levelname,
            "module": record.name,
            "message": record.getMessage(),
        }
        for field in CONTEXT_FIELDS:
            if hasattr(record, field):
                payload[field] = getattr(record, field)
        return json.dumps(payload)


def get_logger(name: str) -> logging.Logger:
    """Create or reuse a configured JSON logger."""
    logger = logging.getLogger(name)
    if logger.handlers:
        return logger
    logger.setLevel(logging.INFO)
    handler = logging.StreamHandler()
    handler.setFormatter(JsonFormatter())
    logger.addHandler(handler)
    logger.propagate = False
    return logger


def configure_logging(level: str = "INFO") -> logging.Logger:
    """Attach the JSON handler to the package logger and apply ``level``."""
    logger = get_logger(PACKAGE_LOGGER)
    logger.setLevel(level.upper())
    return logger
