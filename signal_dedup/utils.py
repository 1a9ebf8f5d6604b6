from __future__ import annotations

import re
from datetime import datetime, timezone

_WHITESPACE = re.compile(r"\s+")


def normalize_content(content: str) -> str:
    """Lower-case, trim and collapse whitespace for exact-match comparison."""
    if not content:
        return ""
    return _WHITESPACE.sub(" ", content.lower().strip())


def ensure_utc(value: datetime) -> datetime:
    """Treat naive datetimes as UTC so they compare with aware ones."""
    return value if value.tzinfo else value.replace(tzinfo=timezone.utc)


def tokenize_words(text: str) -> list[str]:
    """Lower-case ``text`` and split it on whitespace."""
    return [word for word in text.lower().split() if word]
