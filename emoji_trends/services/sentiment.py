"""Sentiment scatter-plot filtering and summary statistics."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Sequence

from emoji_trends.config.settings import settings
from emoji_trends.models.sentiment import SentimentRecord

POLARITY_ALL = "all"
POLARITY_POSITIVE = "positive"
POLARITY_NEGATIVE = "negative"
POLARITY_NEUTRAL = "neutral"

POLARITIES = (POLARITY_ALL, POLARITY_POSITIVE, POLARITY_NEGATIVE, POLARITY_NEUTRAL)


@dataclass(slots=True)
class SentimentConfig:
    polarity_threshold: float = field(
        default_factory=lambda: getattr(settings, "SENTIMENT_POLARITY_THRESHOLD", 0.2)
    )
    rare_min_occurrences: int = field(
        default_factory=lambda: getattr(settings, "SENTIMENT_RARE_MIN_OCCURRENCES", 30)
    )


@dataclass(slots=True)
class SentimentStats:
    total: int = 0
    average_score: float = 0.0
    most_used: Optional[SentimentRecord] = None
    most_positive: Optional[SentimentRecord] = None

    def to_dict(self) -> dict[str, object]:
        return {
            "total": self.total,
            "average_score": self.average_score,
            "most_used": self.most_used.emoji if self.most_used else None,
            "most_positive": self.most_positive.emoji if self.most_positive else None,
        }


def filter_sentiment(
    records: Sequence[SentimentRecord],
    *,
    polarity: str = POLARITY_ALL,
    hide_rare: bool = False,
    config: SentimentConfig | None = None,
) -> list[SentimentRecord]:
    """Apply the rare-emoji cutoff and the polarity band."""

    cfg = config or SentimentConfig()
    min_occurrences = cfg.rare_min_occurrences if hide_rare else 1
    threshold = cfg.polarity_threshold
    filtered = [record for record in records if record.occurrences >= min_occurrences]

    if polarity == POLARITY_POSITIVE:
        return [record for record in filtered if record.sentiment_score > threshold]
    if polarity == POLARITY_NEGATIVE:
        return [record for record in filtered if record.sentiment_score < -threshold]
    if polarity == POLARITY_NEUTRAL:
        return [record for record in filtered if -threshold <= record.sentiment_score <= threshold]
    if polarity != POLARITY_ALL:
        raise ValueError(f"Unknown sentiment polarity: {polarity!r}")
    return filtered


def sentiment_stats(records: Sequence[SentimentRecord]) -> SentimentStats:
    if not records:
        return SentimentStats()

    most_used = records[0]
    most_positive = records[0]
    total_score = 0.0
    for record in records:
        total_score += record.sentiment_score
        if record.occurrences > most_used.occurrences:
            most_used = record
        if record.sentiment_score > most_positive.sentiment_score:
            most_positive = record

    return SentimentStats(
        total=len(records),
        average_score=total_score / len(records),
        most_used=most_used,
        most_positive=most_positive,
    )
