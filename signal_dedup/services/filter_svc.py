from __future__ import annotations

from collections.abc import Iterable, Sequence
from datetime import datetime
from typing import Literal

from signal_dedup.core.config import DEFAULT_MIN_QUALITY, Settings
from signal_dedup.domain.models import Signal, SourceType
from signal_dedup.services.quality_svc import QualityScorer
from signal_dedup.utils import ensure_utc

KeywordMode = Literal["any", "all"]


class SignalFilter:
    """Order-preserving predicate filters applied after deduplication."""

    def __init__(self, quality_scorer: QualityScorer | None = None, min_quality: float = DEFAULT_MIN_QUALITY) -> None:
        self.quality_scorer = quality_scorer or QualityScorer()
        self.min_quality = min_quality

    @classmethod
    def from_settings(cls, settings: Settings) -> "SignalFilter":
        return cls(min_quality=settings.MIN_QUALITY_SCORE)

    def filter_by_quality(self, signals: Sequence[Signal], min_score: float | None = None) -> list[Signal]:
        """Keep signals whose freshly computed overall score reaches ``min_score``.

        Without ``min_score`` the filter's own ``min_quality`` applies.
        """
        threshold = self.min_quality if min_score is None else min_score
        return [signal for signal in signals if self.quality_scorer.score(signal).overall >= threshold]

    def filter_by_source(self, signals: Sequence[Signal], sources: Iterable[SourceType | str]) -> list[Signal]:
        allowed = list(sources)
        return [signal for signal in signals if signal.source in allowed]

    def filter_by_date_range(self, signals: Sequence[Signal], start: datetime, end: datetime) -> list[Signal]:
        """Keep signals captured between ``start`` and ``end``, both inclusive."""
        lower, upper = ensure_utc(start), ensure_utc(end)
        return [signal for signal in signals if lower <= ensure_utc(signal.timestamp) <= upper]

    def filter_by_keywords(
        self,
        signals: Sequence[Signal],
        keywords: Sequence[str],
        mode: KeywordMode = "any",
    ) -> list[Signal]:
        """Match lower-cased keywords as substrings of the content: any of them, or all of them."""
        terms = [keyword.lower() for keyword in keywords]
        match = all if mode == "all" else any
        return [signal for signal in signals if match(term in signal.content.lower() for term in terms)]

    def apply_filters(
        self,
        signals: Sequence[Signal],
        *,
        min_quality: float | None = None,
        sources: Iterable[SourceType | str] | None = None,
        date_range: tuple[datetime, datetime] | None = None,
        keywords: Sequence[str] | None = None,
        keyword_mode: KeywordMode = "any",
    ) -> list[Signal]:
        """Apply the given filters in order: quality, source, date range, keywords."""
        filtered = list(signals)
        if min_quality is not None:
            filtered = self.filter_by_quality(filtered, min_quality)
        if sources is not None:
            filtered = self.filter_by_source(filtered, sources)
        if date_range is not None:
            filtered = self.filter_by_date_range(filtered, *date_range)
        if keywords is not None:
            filtered = self.filter_by_keywords(filtered, keywords, keyword_mode)
        return filtered
