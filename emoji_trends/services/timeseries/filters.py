"""Year filtering and effective granularity policy."""

from __future__ import annotations

from typing import Any, Sequence

from emoji_trends.models.timeseries import ALL_YEARS, Granularity, TimeSeriesRecord, YearFilter


def is_all_years(year: YearFilter | None) -> bool:
    return year is None or year == ALL_YEARS


def parse_year_filter(raw: Any) -> YearFilter:
    """Normalize "all", None, blank or a year-like value into a year filter."""
    if raw is None:
        return ALL_YEARS
    text = str(raw).strip().lower()
    if not text or text == ALL_YEARS:
        return ALL_YEARS
    try:
        return int(text)
    except ValueError:
        raise ValueError(f"Invalid year filter: {raw!r}") from None


def apply_year_filter(records: Sequence[TimeSeriesRecord], year: YearFilter) -> Sequence[TimeSeriesRecord]:
    """Keep records whose calendar year equals `year`; "all" passes the input through."""

    if is_all_years(year):
        return records
    return [record for record in records if record.timestamp.year == int(year)]


def resolve_granularity(requested: Granularity | str, year: YearFilter) -> Granularity:
    """Return the granularity actually used for aggregation.

    Monthly buckets inside a single selected year collapse to at most twelve
    points, so a month request narrowed to one year switches to daily detail.
    """

    granularity = Granularity.parse(requested)
    if granularity == Granularity.MONTH and not is_all_years(year):
        return Granularity.DAY
    return granularity
