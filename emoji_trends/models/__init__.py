"""Data models"""

from emoji_trends.models.catalog import CatalogEntry, CatalogPage, EmojiDetails
from emoji_trends.models.sentiment import SentimentRecord
from emoji_trends.models.timeseries import (
    ALL_YEARS,
    Bucket,
    Granularity,
    ProjectedSeries,
    TimeSeriesRecord,
    YearFilter,
)

__all__ = [
    "ALL_YEARS",
    "Bucket",
    "Granularity",
    "ProjectedSeries",
    "TimeSeriesRecord",
    "YearFilter",
    "CatalogEntry",
    "CatalogPage",
    "EmojiDetails",
    "SentimentRecord",
]
