from __future__ import annotations

from datetime import datetime, timedelta, timezone
from itertools import count

import pytest

from signal_dedup.domain.models import Signal, SourceType
from signal_dedup.services.quality_svc import QualityScorer

NOW = datetime(2024, 6, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def now() -> datetime:
    return NOW


@pytest.fixture
def scorer() -> QualityScorer:
    """Quality scorer pinned to a fixed clock."""
    return QualityScorer(clock=lambda: NOW)


@pytest.fixture
def make_signal():
    """Build signals with sensible defaults; ``age_days`` offsets the timestamp from NOW."""
    ids = count(1)

    def _make(content: str = "Some signal content", *, source=SourceType.REDDIT, age_days: float = 0, **overrides) -> Signal:
        index = next(ids)
        fields = {
            "id": f"signal-{index}",
            "source": source,
            "content": content,
            "url": f"https://example.com/{index}",
            "timestamp": NOW - timedelta(days=age_days),
            "metadata": {},
        }
        fields.update(overrides)
        return Signal(**fields)

    return _make
