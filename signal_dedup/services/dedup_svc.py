from __future__ import annotations

import logging
from collections.abc import Sequence

from signal_dedup.core.config import DEFAULT_SIMILARITY_THRESHOLD, HIGH_SIMILARITY_THRESHOLD, Settings
from signal_dedup.core.exceptions import InvalidThresholdError
from signal_dedup.domain.models import (
    DeduplicationResult,
    DeduplicationStats,
    DuplicateGroup,
    MatchPass,
    Signal,
)
from signal_dedup.services.quality_svc import QualityScorer
from signal_dedup.services.similarity_svc import SimilarityCalculator
from signal_dedup.utils import normalize_content

logger = logging.getLogger(__name__)


class Deduplicator:
    """
    Collapses near-duplicate signals into groups and keeps the best of each.

    Three passes run over the signals no earlier pass has grouped:
    exact normalised content, then combined similarity at the fixed high
    threshold, then at the configured medium threshold. Grouping is greedy
    single linkage against each seed in input order, so results depend only
    on the batch order and the threshold.
    """

    def __init__(
        self,
        similarity_threshold: float = DEFAULT_SIMILARITY_THRESHOLD,
        similarity_calculator: SimilarityCalculator | None = None,
        quality_scorer: QualityScorer | None = None,
    ) -> None:
        _validate_threshold(similarity_threshold, "similarity_threshold")
        self.similarity_threshold = similarity_threshold
        self.high_similarity_threshold = HIGH_SIMILARITY_THRESHOLD
        self.similarity_calculator = similarity_calculator or SimilarityCalculator()
        self.quality_scorer = quality_scorer or QualityScorer()

    @classmethod
    def from_settings(cls, settings: Settings) -> "Deduplicator":
        return cls(similarity_threshold=settings.DEDUP_SIMILARITY_THRESHOLD)

    def deduplicate(self, signals: Sequence[Signal]) -> DeduplicationResult:
        """Group duplicates and pick one canonical signal per group."""
        if not signals:
            return DeduplicationResult()

        exact_groups, remaining = self._group_by_exact_content(signals)
        logger.debug(
            "Exact pass formed %d groups, %d signals remain",
            len(exact_groups),
            len(remaining),
            extra={"pass_name": MatchPass.EXACT.value},
        )

        # Pair scores shared by both similarity passes, dropped when this call returns.
        pair_scores: dict[tuple[int, int], float] = {}
        high_groups, remaining = _split_singletons(
            self._group_by_similarity(signals, remaining, self.high_similarity_threshold, pair_scores)
        )
        logger.debug(
            "High similarity pass formed %d groups, %d signals remain",
            len(high_groups),
            len(remaining),
            extra={"pass_name": MatchPass.HIGH_SIMILARITY.value, "threshold": self.high_similarity_threshold},
        )

        medium_groups = self._group_by_similarity(signals, remaining, self.similarity_threshold, pair_scores)

        groups: list[DuplicateGroup] = []
        for match_pass, index_groups in (
            (MatchPass.EXACT, exact_groups),
            (MatchPass.HIGH_SIMILARITY, high_groups),
            (MatchPass.MEDIUM_SIMILARITY, medium_groups),
        ):
            for indices in index_groups:
                groups.append(self._build_group([signals[index] for index in indices], match_pass))

        unique = [group.canonical for group in groups]
        duplicates = {group.canonical.id: group.duplicates for group in groups if group.size > 1}
        stats = self._calculate_stats(len(signals), len(unique))

        logger.info(
            "Deduplicated %d signals into %d unique (%.1f%% duplicates)",
            stats.total,
            stats.unique,
            stats.dedupe_rate,
            extra={
                "total": stats.total,
                "unique": stats.unique,
                "duplicates": stats.duplicates,
                "dedupe_rate": round(stats.dedupe_rate, 2),
                "threshold": self.similarity_threshold,
            },
        )
        return DeduplicationResult(unique=unique, duplicates=duplicates, stats=stats, groups=groups)

    def _group_by_exact_content(self, signals: Sequence[Signal]) -> tuple[list[list[int]], list[int]]:
        """Bucket by normalised content; only buckets with two or more members are groups."""
        buckets: dict[str, list[int]] = {}
        for index, signal in enumerate(signals):
            buckets.setdefault(normalize_content(signal.content), []).append(index)
        return _split_singletons(list(buckets.values()))

    def _group_by_similarity(
        self,
        signals: Sequence[Signal],
        candidates: list[int],
        threshold: float,
        pair_scores: dict[tuple[int, int], float],
    ) -> list[list[int]]:
        """Seed a group from each unclustered candidate and absorb later ones similar to the seed.

        Every candidate ends up in exactly one returned group, singletons included.
        """
        clustered: set[int] = set()
        groups: list[list[int]] = []

        for position, seed in enumerate(candidates):
            if seed in clustered:
                continue
            clustered.add(seed)
            group = [seed]
            for other in candidates[position + 1:]:
                if other in clustered:
                    continue
                if self._pair_similarity(signals, seed, other, pair_scores) >= threshold:
                    group.append(other)
                    clustered.add(other)
            groups.append(group)

        return groups

    def _pair_similarity(
        self,
        signals: Sequence[Signal],
        seed: int,
        other: int,
        pair_scores: dict[tuple[int, int], float],
    ) -> float:
        key = (seed, other)
        if key not in pair_scores:
            pair_scores[key] = self.similarity_calculator.similarity(signals[seed].content, signals[other].content)
        return pair_scores[key]

    def _build_group(self, members: list[Signal], match_pass: MatchPass) -> DuplicateGroup:
        scored = [self.quality_scorer.annotate(member) for member in members]
        return DuplicateGroup(
            canonical=self._select_canonical(scored),
            members=scored,
            match_pass=match_pass if len(scored) > 1 else MatchPass.UNIQUE,
        )

    def _select_canonical(self, group: list[Signal]) -> Signal:
        """Highest quality wins; the earliest member keeps a tie."""
        best = group[0]
        for signal in group[1:]:
            if signal.quality_score > best.quality_score:
                best = signal
        return best

    def _calculate_stats(self, total: int, unique: int) -> DeduplicationStats:
        duplicates = total - unique
        dedupe_rate = (duplicates / total) * 100 if total > 0 else 0.0
        return DeduplicationStats(total=total, unique=unique, duplicates=duplicates, dedupe_rate=dedupe_rate)


def _validate_threshold(threshold: float, name: str) -> None:
    if not 0.0 < threshold <= 1.0:
        raise InvalidThresholdError(threshold, name=name)


def _split_singletons(groups: list[list[int]]) -> tuple[list[list[int]], list[int]]:
    """Separate multi-member groups from the indices left on their own, keeping input order."""
    multi = [group for group in groups if len(group) > 1]
    singles = sorted(group[0] for group in groups if len(group) == 1)
    return multi, singles
