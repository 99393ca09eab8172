"""Bucket aggregation helpers for emoji usage time series."""

from __future__ import annotations

from datetime import date, timedelta
from typing import Iterable

from emoji_trends.models.timeseries import Bucket, Granularity, TimeSeriesRecord


def sunday_week_offset(day: date) -> int:
    """Days since the most recent Sunday (Sunday = 0, Saturday = 6)."""
    return (day.weekday() + 1) % 7


def bucket_start(day: date, granularity: Granularity) -> date:
    """Return the canonical start date of the bucket containing `day`."""

    if granularity == Granularity.DAY:
        return day
    if granularity == Granularity.WEEK:
        return day - timedelta(days=sunday_week_offset(day))
    if granularity == Granularity.MONTH:
        return date(day.year, day.month, 1)
    if granularity == Granularity.YEAR:
        return date(day.year, 1, 1)
    raise ValueError(f"Unsupported granularity: {granularity!r}")


def aggregate(records: Iterable[TimeSeriesRecord], granularity: Granularity | str) -> list[Bucket]:
    """Group records into time buckets and sum usage per bucket.

    Day granularity is the identity transform: each record becomes one bucket
    without merging, so callers pass at most one record per day (the
    timeseries loader merges repeated days). Coarser granularities partition
    by bucket start, sum in ascending key order and emit buckets sorted by
    start date.
    """

    effective = Granularity.parse(granularity)
    source = list(records)
    if not source:
        return []

    if effective == Granularity.DAY:
        return [
            Bucket(entity_id=record.entity_id, bucket_start=record.timestamp, usage=record.usage)
            for record in sorted(source, key=lambda item: item.timestamp)
        ]

    grouped: dict[date, list[TimeSeriesRecord]] = {}
    for record in source:
        grouped.setdefault(bucket_start(record.timestamp, effective), []).append(record)

    buckets: list[Bucket] = []
    for key in sorted(grouped):
        members = sorted(grouped[key], key=lambda item: item.timestamp)
        total = 0
        for member in members:
            total += member.usage
        buckets.append(Bucket(entity_id=members[0].entity_id, bucket_start=key, usage=total))
    return buckets


def total_usage(items: Iterable[TimeSeriesRecord | Bucket]) -> float:
    total = 0
    for item in items:
        total += item.usage
    return total
