from __future__ import annotations

from datetime import date, timedelta

import pytest

from emoji_trends.models.timeseries import Bucket, Granularity, TimeSeriesRecord
from emoji_trends.services.timeseries.aggregation import aggregate, bucket_start, total_usage


def _records(*rows: tuple[date, float], entity_id: str = "dog") -> list[TimeSeriesRecord]:
    return [TimeSeriesRecord(entity_id=entity_id, timestamp=day, usage=usage) for day, usage in rows]


def _year_of_daily_records() -> list[TimeSeriesRecord]:
    start = date(2022, 11, 20)
    return _records(*[(start + timedelta(days=offset), offset % 7 + 1) for offset in range(120)])


def test_month_aggregation_sums_within_calendar_month() -> None:
    records = _records((date(2023, 1, 5), 3), (date(2023, 1, 20), 5), (date(2023, 2, 2), 2))

    buckets = aggregate(records, Granularity.MONTH)

    assert buckets == [
        Bucket(entity_id="dog", bucket_start=date(2023, 1, 1), usage=8),
        Bucket(entity_id="dog", bucket_start=date(2023, 2, 1), usage=2),
    ]


def test_week_bucket_starts_on_preceding_sunday() -> None:
    assert bucket_start(date(2023, 3, 15), Granularity.WEEK) == date(2023, 3, 12)
    assert bucket_start(date(2023, 3, 12), Granularity.WEEK) == date(2023, 3, 12)
    assert bucket_start(date(2023, 3, 18), Granularity.WEEK) == date(2023, 3, 12)
    assert bucket_start(date(2023, 1, 1), Granularity.WEEK) == date(2023, 1, 1)
    assert bucket_start(date(2022, 12, 31), Granularity.WEEK) == date(2022, 12, 25)


def test_week_aggregation_does_not_mutate_source_dates() -> None:
    wednesday = date(2023, 3, 15)
    records = _records((wednesday, 4), (date(2023, 3, 16), 1))

    buckets = aggregate(records, "week")

    assert buckets == [Bucket(entity_id="dog", bucket_start=date(2023, 3, 12), usage=5)]
    assert records[0].timestamp == wednesday


def test_year_aggregation_keys_on_january_first() -> None:
    records = _records((date(2022, 6, 1), 1), (date(2022, 12, 31), 2), (date(2023, 1, 1), 5))

    buckets = aggregate(records, Granularity.YEAR)

    assert [(bucket.bucket_start, bucket.usage) for bucket in buckets] == [
        (date(2022, 1, 1), 3),
        (date(2023, 1, 1), 5),
    ]


def test_day_aggregation_is_identity_and_idempotent() -> None:
    records = _year_of_daily_records()

    once = aggregate(records, Granularity.DAY)
    twice = aggregate(
        [TimeSeriesRecord(bucket.entity_id, bucket.bucket_start, bucket.usage) for bucket in once],
        Granularity.DAY,
    )

    assert once == twice
    assert [(bucket.bucket_start, bucket.usage) for bucket in once] == [
        (record.timestamp, record.usage) for record in records
    ]


def test_day_aggregation_does_not_merge_repeated_dates() -> None:
    records = _records((date(2023, 1, 2), 1), (date(2023, 1, 1), 2), (date(2023, 1, 1), 3))

    buckets = aggregate(records, Granularity.DAY)

    assert [(bucket.bucket_start, bucket.usage) for bucket in buckets] == [
        (date(2023, 1, 1), 2),
        (date(2023, 1, 1), 3),
        (date(2023, 1, 2), 1),
    ]
    assert [(bucket.bucket_start, bucket.usage) for bucket in aggregate(records, Granularity.WEEK)] == [
        (date(2023, 1, 1), 6),
    ]


@pytest.mark.parametrize("granularity", list(Granularity))
def test_aggregation_preserves_total_usage(granularity: Granularity) -> None:
    records = _year_of_daily_records()

    buckets = aggregate(records, granularity)

    assert total_usage(buckets) == total_usage(records)


@pytest.mark.parametrize("granularity", list(Granularity))
def test_bucket_starts_are_strictly_ascending(granularity: Granularity) -> None:
    records = list(reversed(_year_of_daily_records()))

    starts = [bucket.bucket_start for bucket in aggregate(records, granularity)]

    assert all(starts[index] < starts[index + 1] for index in range(len(starts) - 1))


def test_empty_input_yields_empty_output() -> None:
    assert aggregate([], Granularity.MONTH) == []
    assert aggregate([], Granularity.DAY) == []


def test_unknown_granularity_is_rejected() -> None:
    with pytest.raises(ValueError):
        aggregate(_records((date(2023, 1, 1), 1)), "fortnight")
