"""Time-series pipeline: filtering, aggregation and projection."""

from emoji_trends.services.timeseries.aggregation import aggregate, bucket_start
from emoji_trends.services.timeseries.filters import apply_year_filter, resolve_granularity
from emoji_trends.services.timeseries.nearest import nearest_in_sorted
from emoji_trends.services.timeseries.projector import project, view_state
from emoji_trends.services.timeseries.selection_store import SelectionStore

__all__ = [
    "aggregate",
    "bucket_start",
    "apply_year_filter",
    "resolve_granularity",
    "nearest_in_sorted",
    "project",
    "view_state",
    "SelectionStore",
]
