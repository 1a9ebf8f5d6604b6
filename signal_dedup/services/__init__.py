from signal_dedup.services.dedup_svc import Deduplicator
from signal_dedup.services.filter_svc import SignalFilter
from signal_dedup.services.quality_svc import QualityScorer
from signal_dedup.services.similarity_svc import SimilarityCalculator

__all__ = [
    "Deduplicator",
    "QualityScorer",
    "SignalFilter",
    "SimilarityCalculator",
]
