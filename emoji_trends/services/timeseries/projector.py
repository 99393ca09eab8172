"""Projection of selection state into chart-ready series."""

from __future__ import annotations

from typing import Sequence

from emoji_trends.models.timeseries import Granularity, ProjectedSeries, YearFilter
from emoji_trends.services.timeseries.aggregation import aggregate
from emoji_trends.services.timeseries.filters import apply_year_filter, resolve_granularity
from emoji_trends.services.timeseries.selection_store import SelectionStore

VIEW_NOTHING_SELECTED = "nothing_selected"
VIEW_NO_DATA = "no_data"
VIEW_READY = "ready"


def project(
    store: SelectionStore,
    year_filter: YearFilter,
    requested_granularity: Granularity | str,
) -> list[ProjectedSeries]:
    """Filter, resolve and aggregate every selected emoji in selection order.

    Emojis without a cache entry are still loading and are omitted. The
    effective granularity depends only on the request and the year filter, so
    it is shared by every emitted series.
    """

    effective = resolve_granularity(requested_granularity, year_filter)
    projected: list[ProjectedSeries] = []
    for entity_id in store.selected:
        raw = store.get(entity_id)
        if raw is None:
            continue
        filtered = apply_year_filter(raw, year_filter)
        projected.append(
            ProjectedSeries(
                entity_id=entity_id,
                effective_granularity=effective,
                buckets=aggregate(filtered, effective),
            )
        )
    return projected


def view_state(selected: Sequence[str], series: Sequence[ProjectedSeries]) -> str:
    if not selected:
        return VIEW_NOTHING_SELECTED
    if all(item.is_empty for item in series):
        return VIEW_NO_DATA
    return VIEW_READY
