"""Explorer entrypoints for UI events (selection, filters, catalog, sentiment)."""

from __future__ import annotations

from typing import Any, Iterable, Sequence

from emoji_trends.explorer import TrendsExplorer
from emoji_trends.models.timeseries import Granularity, YearFilter
from emoji_trends.services.timeseries.filters import parse_year_filter
from emoji_trends.services.timeseries.selection_store import dedupe_ids


def normalize_selection(raw: str | Sequence[str] | None) -> list[str]:
    """Normalize selection input ("a,b" or a list) into ordered, unique slugs."""
    if raw is None:
        return []

    if isinstance(raw, str):
        values: Iterable[Any] = raw.split(",")
    elif isinstance(raw, (list, tuple, set)):
        values = raw
    else:
        values = [raw]
    return dedupe_ids(str(value) for value in values)


def parse_year(raw: Any) -> YearFilter:
    """Parse the year dropdown value; "all" and blanks mean no year scope."""
    return parse_year_filter(raw)


async def run_selection_change(
    *,
    explorer: TrendsExplorer,
    selection: str | Sequence[str] | None = None,
    granularity: str | None = None,
    year: Any = None,
    update_filters: bool = False,
) -> dict[str, Any]:
    """Apply optional filter updates, then project the requested selection."""
    if update_filters:
        if granularity is not None:
            explorer.granularity = Granularity.parse(granularity)
        explorer.year = parse_year(year)
    return await explorer.handle_selection_change(normalize_selection(selection))


async def run_catalog_page(
    *,
    explorer: TrendsExplorer,
    page: int = 1,
    page_size: int | None = None,
    category: str | None = None,
    query: str | None = None,
    sort: str = "unicode",
    only_tracked: bool = False,
) -> dict[str, Any]:
    """Return one page of the emoji catalog, loading metadata on first use."""
    load_result: dict[str, Any] | None = None
    if not explorer.catalog.is_loaded:
        load_result = await explorer.load_datasets(stages=["catalog"])

    entries = explorer.catalog.filter_entries(category=category, query=query, only_tracked=only_tracked, sort=sort)
    catalog_page = explorer.catalog.paginate(entries, page=page, page_size=page_size)
    return {
        "success": explorer.catalog.is_loaded,
        "page": catalog_page.page,
        "page_size": catalog_page.page_size,
        "total": catalog_page.total,
        "total_pages": catalog_page.total_pages,
        "has_previous": catalog_page.has_previous,
        "has_next": catalog_page.has_next,
        "categories": explorer.catalog.categories(),
        "entries": [
            {
                "id": entry.id,
                "name": entry.name,
                "char": entry.char,
                "category": entry.category,
                "score": entry.score,
                "tracked": entry.has_local_data,
            }
            for entry in catalog_page.entries
        ],
        "errors": (load_result or {}).get("errors", []),
    }


async def run_sentiment_view(
    *,
    explorer: TrendsExplorer,
    polarity: str = "all",
    hide_rare: bool = False,
) -> dict[str, Any]:
    """Return filtered scatter points and stats, loading the dataset on first use."""
    errors: list[str] = []
    if not explorer.sentiment:
        load_result = await explorer.load_datasets(stages=["sentiment"])
        errors = load_result["errors"]
    return {**explorer.sentiment_view(polarity=polarity, hide_rare=hide_rare), "errors": errors}
