from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class SourceType(str, Enum):
    """Sources that scrapers harvest signals from."""

    TWITTER = "twitter"  # social posts
    GITHUB = "github"  # code forge issues and discussions
    STACKOVERFLOW = "stackoverflow"  # Q&A site
    HACKERNEWS = "hackernews"  # news aggregator
    REDDIT = "reddit"  # link aggregator


class Signal(BaseModel):
    """One unit of harvested text plus source-specific metadata."""

    model_config = ConfigDict(frozen=True)

    id: str
    source: SourceType | str
    content: str
    url: str
    timestamp: datetime
    author: str | None = None
    metadata: dict[str, Any] = Field(default_factory=dict)
    sentiment: float | None = Field(default=None, description="Sentiment from -1 (negative) to 1 (positive)")
    tags: list[str] | None = None
    quality_score: float | None = Field(default=None, description="Derived overall quality, attached by the scorer")

    @field_validator("source", mode="before")
    @classmethod
    def coerce_source(cls, v: Any) -> Any:
        """Known source tags become SourceType; unknown tags pass through as strings."""
        try:
            return SourceType(v)
        except ValueError:
            return v

    @field_validator("id", "url")
    @classmethod
    def validate_not_empty(cls, v: str, info) -> str:
        if not v or not v.strip():
            raise ValueError(f"{info.field_name} cannot be empty")
        return v

    @field_validator("sentiment")
    @classmethod
    def validate_sentiment(cls, v: float | None) -> float | None:
        if v is not None and not -1.0 <= v <= 1.0:
            raise ValueError("sentiment must be between -1 and 1")
        return v


class QualityBreakdown(BaseModel):
    """Per-factor quality sub-scores, each in [0, 1]."""

    length: float
    metadata: float
    engagement: float
    recency: float
    authority: float


class QualityScore(BaseModel):
    overall: float
    breakdown: QualityBreakdown


class MatchPass(str, Enum):
    """Deduplication pass that formed a group."""

    EXACT = "exact"
    HIGH_SIMILARITY = "high_similarity"
    MEDIUM_SIMILARITY = "medium_similarity"
    UNIQUE = "unique"


class DuplicateGroup(BaseModel):
    """Signals judged to carry the same content, with their canonical pick."""

    canonical: Signal
    members: list[Signal]
    match_pass: MatchPass

    @property
    def size(self) -> int:
        return len(self.members)

    @property
    def duplicates(self) -> list[Signal]:
        return [member for member in self.members if member.id != self.canonical.id]


class DeduplicationStats(BaseModel):
    total: int = 0
    unique: int = 0
    duplicates: int = 0
    dedupe_rate: float = Field(default=0.0, description="Duplicates removed as a percentage of the input")


class DeduplicationResult(BaseModel):
    """Canonical signals, the duplicates each absorbed, and summary statistics."""

    unique: list[Signal] = Field(default_factory=list)
    duplicates: dict[str, list[Signal]] = Field(default_factory=dict)
    stats: DeduplicationStats = Field(default_factory=DeduplicationStats)
    groups: list[DuplicateGroup] = Field(default_factory=list)
