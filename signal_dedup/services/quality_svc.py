from __future__ import annotations

import math
from collections.abc import Callable, Mapping
from datetime import datetime, timezone
from typing import Any

from signal_dedup.domain.models import QualityBreakdown, QualityScore, Signal, SourceType
from signal_dedup.utils import ensure_utc


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class QualityScorer:
    """Scores a signal from five self-bounded factors, each in [0, 1]."""

    LENGTH_WEIGHT = 0.2
    METADATA_WEIGHT = 0.15
    ENGAGEMENT_WEIGHT = 0.30
    RECENCY_WEIGHT = 0.15
    AUTHORITY_WEIGHT = 0.20

    METADATA_FIELD_CAP = 10
    NEUTRAL_ENGAGEMENT = 0.5

    REDDIT_SCORE_DIVISOR = 100.0
    STACKOVERFLOW_POINTS_DIVISOR = 100.0
    HACKERNEWS_POINTS_DIVISOR = 50.0
    TWITTER_LIKES_DIVISOR = 50.0
    GITHUB_REACTIONS_DIVISOR = 20.0
    GITHUB_REACTION_KEYS = (("plusOne", "+1"), ("heart",), ("hooray",), ("rocket",), ("eyes",))

    AUTHOR_PRESENT_AUTHORITY = 0.7
    AUTHOR_MISSING_AUTHORITY = 0.5

    def __init__(self, clock: Callable[[], datetime] | None = None) -> None:
        self._clock = clock or _utc_now

    def score(self, signal: Signal) -> QualityScore:
        """Compute the overall score and its per-factor breakdown."""
        breakdown = QualityBreakdown(
            length=self.calculate_length_score(signal.content),
            metadata=self.calculate_metadata_score(signal.metadata),
            engagement=self.calculate_engagement_score(signal),
            recency=self.calculate_recency_score(signal.timestamp),
            authority=self.calculate_authority_score(signal),
        )
        overall = (
            self.LENGTH_WEIGHT * breakdown.length
            + self.METADATA_WEIGHT * breakdown.metadata
            + self.ENGAGEMENT_WEIGHT * breakdown.engagement
            + self.RECENCY_WEIGHT * breakdown.recency
            + self.AUTHORITY_WEIGHT * breakdown.authority
        )
        return QualityScore(overall=overall, breakdown=breakdown)

    def annotate(self, signal: Signal) -> Signal:
        """Return a copy of ``signal`` carrying its overall quality score."""
        return signal.model_copy(update={"quality_score": self.score(signal).overall})

    def calculate_length_score(self, content: str) -> float:
        """Band the character count; 100-500 characters is the sweet spot."""
        length = len(content)
        if length < 50:
            return 0.2
        if length > 2000:
            return 0.8
        if 100 <= length <= 500:
            return 1.0
        if length < 100:
            return 0.6
        return 0.9

    def calculate_metadata_score(self, metadata: Mapping[str, Any]) -> float:
        return min(len(metadata) / self.METADATA_FIELD_CAP, 1.0)

    def calculate_engagement_score(self, signal: Signal) -> float:
        """Normalise the source's own engagement metric; unknown sources are neutral."""
        metadata = signal.metadata
        match signal.source:
            case SourceType.REDDIT:
                return self._ratio(metadata.get("score"), self.REDDIT_SCORE_DIVISOR)
            case SourceType.STACKOVERFLOW:
                points = metadata.get("points")
                if points is None:
                    points = metadata.get("score")
                return self._ratio(points, self.STACKOVERFLOW_POINTS_DIVISOR)
            case SourceType.HACKERNEWS:
                return self._ratio(metadata.get("points"), self.HACKERNEWS_POINTS_DIVISOR)
            case SourceType.TWITTER:
                return self._ratio(metadata.get("likeCount"), self.TWITTER_LIKES_DIVISOR)
            case SourceType.GITHUB:
                return self._ratio(self._total_reactions(metadata.get("reactions")), self.GITHUB_REACTIONS_DIVISOR)
            case _:
                return self.NEUTRAL_ENGAGEMENT

    def calculate_recency_score(self, timestamp: datetime) -> float:
        """Step down with age: a week, a month, a quarter, then older."""
        age_days = (self._clock() - ensure_utc(timestamp)).total_seconds() / 86_400
        if age_days <= 7:
            return 1.0
        if age_days <= 30:
            return 0.8
        if age_days <= 90:
            return 0.6
        return 0.4

    def calculate_authority_score(self, signal: Signal) -> float:
        # TODO: use author karma/follower counts once scrapers expose them.
        if signal.author is not None:
            return self.AUTHOR_PRESENT_AUTHORITY
        return self.AUTHOR_MISSING_AUTHORITY

    def _ratio(self, value: Any, divisor: float) -> float:
        number = _as_number(value)
        if number is None:
            return self.NEUTRAL_ENGAGEMENT
        return max(0.0, min(number / divisor, 1.0))

    def _total_reactions(self, reactions: Any) -> float | None:
        if not isinstance(reactions, Mapping):
            return None
        total = 0.0
        for aliases in self.GITHUB_REACTION_KEYS:
            for key in aliases:
                count = _as_number(reactions.get(key))
                if count is not None:
                    total += count
                    break
        return total


def _as_number(value: Any) -> float | None:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    if math.isnan(value):
        return None
    return float(value)
