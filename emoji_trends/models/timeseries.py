"""Time-series records, aggregation buckets and projected chart series."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Any, Literal, Union

ALL_YEARS: Literal["all"] = "all"

YearFilter = Union[Literal["all"], int]


class Granularity(str, Enum):
    """Time-bucket width used for aggregation."""

    DAY = "day"
    WEEK = "week"
    MONTH = "month"
    YEAR = "year"

    @classmethod
    def parse(cls, raw: "Granularity | str") -> "Granularity":
        if isinstance(raw, Granularity):
            return raw
        try:
            return cls(str(raw).strip().lower())
        except ValueError:
            raise ValueError(f"Unknown granularity: {raw!r}") from None


@dataclass(frozen=True, slots=True)
class TimeSeriesRecord:
    """A dated usage count for one emoji."""

    entity_id: str
    timestamp: date
    usage: float


@dataclass(frozen=True, slots=True)
class Bucket:
    """One aggregated row covering a day, week, month or year."""

    entity_id: str
    bucket_start: date
    usage: float

    def to_point(self) -> dict[str, Any]:
        return {"date": self.bucket_start, "usage": self.usage}


@dataclass(slots=True)
class ProjectedSeries:
    """Chart-ready series for one selected emoji."""

    entity_id: str
    effective_granularity: Granularity
    buckets: list[Bucket] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.buckets

    def to_chart_payload(self, name: str | None = None) -> dict[str, Any]:
        return {
            "name": name or self.entity_id,
            "values": [bucket.to_point() for bucket in self.buckets],
        }
