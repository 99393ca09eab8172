"""Per-emoji sentiment counts for the scatter plot."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class SentimentRecord:
    """Sentiment counts for one emoji with its derived score."""

    emoji: str
    name: str
    occurrences: int
    negative: int
    neutral: int
    positive: int
    position: float = 0.0

    @property
    def sentiment_score(self) -> float:
        total = self.positive + self.neutral + self.negative
        if total == 0:
            return 0.0
        return (self.positive - self.negative) / total
