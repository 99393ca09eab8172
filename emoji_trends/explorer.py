"""Emoji trends explorer: session state container and dataset orchestration."""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime
from typing import Any, Callable, Iterable, Optional, Sequence

from emoji_trends.loaders.catalog import CatalogLoader
from emoji_trends.loaders.client import DataClient
from emoji_trends.loaders.sentiment import SentimentLoader
from emoji_trends.loaders.timeseries import TimeSeriesLoader
from emoji_trends.models.sentiment import SentimentRecord
from emoji_trends.models.timeseries import ALL_YEARS, Granularity, TimeSeriesRecord, YearFilter
from emoji_trends.services.catalog import CatalogService
from emoji_trends.services.chart_axes import ChartConfig, YearContext, axis_format
from emoji_trends.services.sentiment import filter_sentiment, sentiment_stats
from emoji_trends.services.timeseries.aggregation import total_usage
from emoji_trends.services.timeseries.filters import parse_year_filter, resolve_granularity
from emoji_trends.services.timeseries.projector import VIEW_NOTHING_SELECTED, project, view_state
from emoji_trends.services.timeseries.selection_store import SelectionStore
from emoji_trends.services.tracked_emojis import display_name, get_tracked_emojis

logger = logging.getLogger(__name__)

STAGE_CATALOG = "catalog"
STAGE_SENTIMENT = "sentiment"

ALL_STAGES = (STAGE_CATALOG, STAGE_SENTIMENT)

VIEW_STALE = "stale"

TITLE_EMPTY = "Select emojis to start! ✨"
TITLE_READY = "Usage Trends Over Time"


class TrendsExplorer:
    """Holds selection, filters and caches for one reading session.

    Every selection change takes a sequence number. When its fetches resolve
    after a newer change has started, its view is reported as stale and
    discarded by the caller; the fetched records are still cached.
    """

    def __init__(
        self,
        *,
        data_client_factory: Callable[[], Any] = DataClient,
        store: SelectionStore | None = None,
        timeseries_loader: Any | None = None,
        catalog_loader: Any | None = None,
        sentiment_loader: Any | None = None,
        catalog_service: CatalogService | None = None,
        chart_config: ChartConfig | None = None,
        tracked_emojis: Sequence[str] | None = None,
    ) -> None:
        self._data_client_factory = data_client_factory
        self._data_client: Any | None = None
        self.store = store or SelectionStore()
        self._timeseries_loader = timeseries_loader
        self._catalog_loader = catalog_loader
        self._sentiment_loader = sentiment_loader
        self.catalog = catalog_service or CatalogService()
        self.chart_config = chart_config or ChartConfig()
        self.tracked_emojis = list(tracked_emojis) if tracked_emojis is not None else get_tracked_emojis()
        self.granularity = Granularity.DAY
        self.year: YearFilter = ALL_YEARS
        self.sentiment: list[SentimentRecord] = []
        self._sequence = 0

    @property
    def sequence(self) -> int:
        return self._sequence

    async def aclose(self) -> None:
        if self._data_client is not None and hasattr(self._data_client, "aclose"):
            await self._data_client.aclose()
        self._data_client = None

    async def handle_selection_change(self, entity_ids: Iterable[str]) -> dict[str, Any]:
        """Replace the selection, load new emojis, then project the view."""

        self._sequence += 1
        sequence = self._sequence
        missing = self.store.select(entity_ids)
        logger.info(
            "Selection changed",
            extra={"sequence": sequence, "selected": list(self.store.selected), "to_load": missing},
        )

        if missing:
            await self.store.load_missing(self._load_series, missing)

        if sequence != self._sequence:
            logger.info("Discarding stale selection view", extra={"sequence": sequence, "latest": self._sequence})
            return {"sequence": sequence, "state": VIEW_STALE}
        return self.current_view(sequence=sequence)

    async def set_granularity(self, granularity: Granularity | str) -> dict[str, Any]:
        self.granularity = Granularity.parse(granularity)
        return await self.handle_selection_change(self.store.selected)

    async def set_year(self, year: YearFilter | str | None) -> dict[str, Any]:
        self.year = parse_year_filter(year)
        return await self.handle_selection_change(self.store.selected)

    def current_view(self, *, sequence: Optional[int] = None, month: Optional[int] = None) -> dict[str, Any]:
        series = project(self.store, self.year, self.granularity)
        state = view_state(self.store.selected, series)
        effective = resolve_granularity(self.granularity, self.year)

        context = YearContext(year=self.year, month=month)
        axis = axis_format(effective, context)
        return {
            "sequence": self._sequence if sequence is None else sequence,
            "state": state,
            "title": TITLE_EMPTY if state == VIEW_NOTHING_SELECTED else TITLE_READY,
            "granularity": self.granularity.value,
            "effective_granularity": effective.value,
            "year": self.year,
            "series": [
                {
                    **item.to_chart_payload(display_name(item.entity_id)),
                    "id": item.entity_id,
                    "color": self.chart_config.color_for(index),
                }
                for index, item in enumerate(series)
            ],
            "loading": [entity_id for entity_id in self.store.selected if self.store.is_loading(entity_id)],
            "axis": {
                "tick_format": axis.tick_format,
                "label": axis.label,
                "tooltip_format": axis.tooltip_format,
                "curve": axis.curve,
                "ticks": self.chart_config.tick_count,
            },
        }

    async def load_datasets(self, *, stages: Sequence[str] | None = None) -> dict[str, Any]:
        """Load catalog and sentiment datasets with per-stage failure isolation."""

        selected_stages = tuple(stages or ALL_STAGES)
        run_stats: dict[str, Any] = {
            "started_at": datetime.utcnow().isoformat(),
            "stages_requested": list(selected_stages),
            "stages": {},
            "errors": [],
        }

        for stage_name in selected_stages:
            stage_runner = self._resolve_stage_runner(stage_name)
            if stage_runner is None:
                run_stats["stages"][stage_name] = {"success": False, "error": f"Unknown stage: {stage_name}", "stats": {}}
                run_stats["errors"].append(f"{stage_name}: unknown stage")
                logger.warning("Explorer received unknown stage", extra={"stage": stage_name})
                continue

            try:
                result = await stage_runner()
                run_stats["stages"][stage_name] = result
                if not result.get("success", False):
                    run_stats["errors"].append(f"{stage_name}: {result.get('error', 'stage failed')}")
            except Exception as exc:
                logger.exception("Explorer stage raised exception", extra={"stage": stage_name, "error": str(exc)})
                run_stats["stages"][stage_name] = {"success": False, "error": str(exc), "stats": {}}
                run_stats["errors"].append(f"{stage_name}: {exc}")

        run_stats["completed_at"] = datetime.utcnow().isoformat()
        run_stats["success"] = all(stage.get("success", False) for stage in run_stats["stages"].values())
        return run_stats

    def _resolve_stage_runner(self, stage_name: str):
        mapping = {
            STAGE_CATALOG: self.load_catalog,
            STAGE_SENTIMENT: self.load_sentiment,
        }
        return mapping.get(stage_name)

    async def load_catalog(self) -> dict[str, Any]:
        """Fetch metadata and score tracked emojis by their total local usage."""

        loader = self._catalog_loader or CatalogLoader(self._client())
        metadata, scores = await asyncio.gather(loader.load_metadata(), self._local_scores())
        if not metadata:
            return {"success": False, "error": "Emoji metadata unavailable", "stats": {"tracked": len(scores)}}

        entries = self.catalog.build(metadata, tracked_slugs=self.tracked_emojis, local_scores=scores)
        return {
            "success": True,
            "stats": {
                "entries": len(entries),
                "tracked": sum(1 for entry in entries if entry.has_local_data),
                "categories": len(self.catalog.categories()),
            },
        }

    async def load_sentiment(self) -> dict[str, Any]:
        loader = self._sentiment_loader or SentimentLoader(self._client())
        self.sentiment = await loader.load()
        if not self.sentiment:
            return {"success": False, "error": "Sentiment dataset unavailable", "stats": {"records": 0}}
        return {"success": True, "stats": {"records": len(self.sentiment)}}

    def sentiment_view(self, *, polarity: str = "all", hide_rare: bool = False) -> dict[str, Any]:
        filtered = filter_sentiment(self.sentiment, polarity=polarity, hide_rare=hide_rare)
        return {
            "polarity": polarity,
            "hide_rare": hide_rare,
            "points": [
                {
                    "emoji": record.emoji,
                    "name": record.name,
                    "occurrences": record.occurrences,
                    "sentiment_score": record.sentiment_score,
                    "positive": record.positive,
                    "neutral": record.neutral,
                    "negative": record.negative,
                }
                for record in filtered
            ],
            "stats": sentiment_stats(filtered).to_dict(),
        }

    async def _local_scores(self) -> dict[str, float]:
        await self.store.load_missing(self._load_series, self.tracked_emojis)
        scores: dict[str, float] = {}
        for slug in self.tracked_emojis:
            records = self.store.get(slug)
            if records:
                scores[slug] = total_usage(records)
        return scores

    async def _load_series(self, entity_id: str) -> list[TimeSeriesRecord]:
        loader = self._timeseries_loader or TimeSeriesLoader(self._client())
        return await loader.load(entity_id)

    def _client(self) -> Any:
        if self._data_client is None:
            self._data_client = self._data_client_factory()
        return self._data_client
