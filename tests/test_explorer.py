from __future__ import annotations

import asyncio
from datetime import date
from typing import Any

import pytest

from emoji_trends.explorer import TITLE_EMPTY, TITLE_READY, VIEW_STALE, TrendsExplorer
from emoji_trends.jobs.explore import (
    normalize_selection,
    parse_year,
    run_catalog_page,
    run_selection_change,
    run_sentiment_view,
)
from emoji_trends.models.sentiment import SentimentRecord
from emoji_trends.models.timeseries import ALL_YEARS, TimeSeriesRecord

SERIES = {
    "dog": [
        TimeSeriesRecord("dog", date(2022, 12, 30), 7),
        TimeSeriesRecord("dog", date(2023, 1, 5), 3),
        TimeSeriesRecord("dog", date(2023, 1, 20), 5),
        TimeSeriesRecord("dog", date(2023, 2, 2), 2),
    ],
    "cat": [
        TimeSeriesRecord("cat", date(2023, 1, 1), 1),
    ],
}


class FakeTimeSeriesLoader:
    def __init__(self, gates: dict[str, asyncio.Event] | None = None) -> None:
        self.calls: list[str] = []
        self.gates = gates or {}

    async def load(self, entity_id: str) -> list[TimeSeriesRecord]:
        self.calls.append(entity_id)
        gate = self.gates.get(entity_id)
        if gate is not None:
            await gate.wait()
        return list(SERIES.get(entity_id, []))


class FakeCatalogLoader:
    def __init__(self, metadata: list[dict[str, Any]] | None = None) -> None:
        self.metadata = metadata or []

    async def load_metadata(self) -> list[dict[str, Any]]:
        return self.metadata


class FakeSentimentLoader:
    async def load(self) -> list[SentimentRecord]:
        return [
            SentimentRecord("😂", "FACE WITH TEARS OF JOY", 1000, 200, 300, 500),
            SentimentRecord("😭", "LOUDLY CRYING FACE", 20, 10, 5, 5),
        ]


class FailingSentimentLoader:
    async def load(self) -> list[SentimentRecord]:
        raise RuntimeError("sentiment offline")


def _explorer(**kwargs: Any) -> TrendsExplorer:
    kwargs.setdefault("timeseries_loader", FakeTimeSeriesLoader())
    kwargs.setdefault("tracked_emojis", ["dog", "cat"])
    return TrendsExplorer(data_client_factory=lambda: None, **kwargs)


def test_empty_selection_reports_nothing_selected() -> None:
    explorer = _explorer()

    view = asyncio.run(explorer.handle_selection_change([]))

    assert view["state"] == "nothing_selected"
    assert view["title"] == TITLE_EMPTY
    assert view["series"] == []


def test_selection_loads_once_and_projects_chart_payload() -> None:
    loader = FakeTimeSeriesLoader()
    explorer = _explorer(timeseries_loader=loader)

    async def scenario() -> tuple[dict[str, Any], dict[str, Any]]:
        first = await explorer.handle_selection_change(["dog", "cat"])
        await explorer.handle_selection_change(["cat"])
        again = await explorer.handle_selection_change(["dog", "cat"])
        return first, again

    first, again = asyncio.run(scenario())

    assert sorted(loader.calls) == ["cat", "dog"]
    assert first["state"] == "ready"
    assert first["title"] == TITLE_READY
    assert [item["name"] for item in first["series"]] == ["Dog", "Cat"]
    assert first["series"][0]["values"][0] == {"date": date(2022, 12, 30), "usage": 7}
    assert again["series"] == first["series"]


def test_month_with_year_switches_to_daily_and_labels_axis() -> None:
    explorer = _explorer()

    async def scenario() -> dict[str, Any]:
        await explorer.handle_selection_change(["dog"])
        await explorer.set_granularity("month")
        return await explorer.set_year("2023")

    view = asyncio.run(scenario())

    assert view["granularity"] == "month"
    assert view["effective_granularity"] == "day"
    assert view["year"] == 2023
    assert [point["usage"] for point in view["series"][0]["values"]] == [3, 5, 2]
    assert view["axis"]["label"] == "Date (2023)"


def test_month_over_all_years_aggregates() -> None:
    explorer = _explorer()

    async def scenario() -> dict[str, Any]:
        await explorer.handle_selection_change(["dog"])
        await explorer.set_year("all")
        return await explorer.set_granularity("month")

    view = asyncio.run(scenario())

    assert view["year"] == ALL_YEARS
    assert view["effective_granularity"] == "month"
    assert [(point["date"], point["usage"]) for point in view["series"][0]["values"]] == [
        (date(2022, 12, 1), 7),
        (date(2023, 1, 1), 8),
        (date(2023, 2, 1), 2),
    ]


def test_year_without_data_reports_no_data() -> None:
    explorer = _explorer()

    async def scenario() -> dict[str, Any]:
        await explorer.handle_selection_change(["cat"])
        return await explorer.set_year(2019)

    view = asyncio.run(scenario())

    assert view["state"] == "no_data"


@pytest.mark.asyncio
async def test_superseded_selection_change_is_reported_stale() -> None:
    gate = asyncio.Event()
    loader = FakeTimeSeriesLoader(gates={"dog": gate})
    explorer = _explorer(timeseries_loader=loader)

    slow = asyncio.ensure_future(explorer.handle_selection_change(["dog"]))
    await asyncio.sleep(0)
    fast = await explorer.handle_selection_change(["cat"])
    gate.set()
    stale = await slow

    assert stale == {"sequence": 1, "state": VIEW_STALE}
    assert fast["sequence"] == 2
    assert [item["id"] for item in fast["series"]] == ["cat"]
    assert explorer.store.is_cached("dog")


@pytest.mark.asyncio
async def test_load_datasets_isolates_stage_failures() -> None:
    explorer = _explorer(
        catalog_loader=FakeCatalogLoader(
            [{"short_name": "dog", "short_names": ["dog"], "name": "DOG FACE", "unified": "1F436", "sort_order": 1}]
        ),
        sentiment_loader=FailingSentimentLoader(),
    )

    result = await explorer.load_datasets()

    assert result["stages"]["catalog"]["success"] is True
    assert result["stages"]["catalog"]["stats"]["tracked"] == 1
    assert result["stages"]["sentiment"]["success"] is False
    assert result["success"] is False
    assert any(error.startswith("sentiment:") for error in result["errors"])
    assert explorer.catalog.get("dog").score == 17
    assert explorer.store.is_cached("cat")


@pytest.mark.asyncio
async def test_load_datasets_reports_unknown_stage() -> None:
    explorer = _explorer()

    result = await explorer.load_datasets(stages=["rankings"])

    assert result["stages"]["rankings"]["success"] is False
    assert result["errors"] == ["rankings: unknown stage"]


@pytest.mark.asyncio
async def test_jobs_forward_filters_catalog_and_sentiment() -> None:
    explorer = _explorer(
        catalog_loader=FakeCatalogLoader(
            [
                {"short_name": "dog", "name": "DOG FACE", "unified": "1F436", "sort_order": 2, "category": "Animals"},
                {"short_name": "cat", "name": "CAT FACE", "unified": "1F431", "sort_order": 1, "category": "Animals"},
            ]
        ),
        sentiment_loader=FakeSentimentLoader(),
    )

    view = await run_selection_change(
        explorer=explorer,
        selection="dog,cat,dog",
        granularity="year",
        year="all",
        update_filters=True,
    )
    page = await run_catalog_page(explorer=explorer, page=1, page_size=1, sort="score")
    sentiment = await run_sentiment_view(explorer=explorer, polarity="all", hide_rare=True)

    assert [item["id"] for item in view["series"]] == ["dog", "cat"]
    assert view["effective_granularity"] == "year"
    assert page["total"] == 2
    assert page["total_pages"] == 2
    assert page["entries"][0]["id"] == "dog"
    assert page["categories"] == ["Animals"]
    assert [point["emoji"] for point in sentiment["points"]] == ["😂"]
    assert sentiment["stats"]["total"] == 1


def test_normalize_selection_and_parse_year() -> None:
    assert normalize_selection(None) == []
    assert normalize_selection("dog, cat,,dog") == ["dog", "cat"]
    assert normalize_selection(["cat", "cat", "pizza"]) == ["cat", "pizza"]
    assert parse_year("all") == ALL_YEARS
    assert parse_year("2020") == 2020
