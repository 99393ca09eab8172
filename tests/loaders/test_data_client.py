from __future__ import annotations

import httpx
import pytest

from emoji_trends.loaders.client import DataClient
from emoji_trends.loaders.contracts import FetchState


def _client(handler, **kwargs) -> DataClient:
    return DataClient(
        base_url="https://data.example",
        transport=httpx.MockTransport(handler),
        backoff_base_seconds=0.001,
        backoff_max_seconds=0.002,
        **kwargs,
    )


@pytest.mark.asyncio
async def test_get_text_returns_ok_payload() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.path == "/data/emojis_50/dog.csv"
        return httpx.Response(200, text="day,usage\n2023-01-01,4\n")

    async with _client(handler) as client:
        result = await client.get_text("data/emojis_50/dog.csv")

    assert result.state == FetchState.OK
    assert result.data.startswith("day,usage")


@pytest.mark.asyncio
async def test_get_text_reports_failure_without_raising() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(404, text="missing")

    async with _client(handler) as client:
        result = await client.get_text("data/emojis_50/ghost.csv")

    assert result.state == FetchState.FAILED
    assert result.status_code == 404


@pytest.mark.asyncio
async def test_retryable_status_is_retried_then_succeeds() -> None:
    attempts = {"count": 0}

    def handler(request: httpx.Request) -> httpx.Response:
        attempts["count"] += 1
        if attempts["count"] < 3:
            return httpx.Response(503, text="busy")
        return httpx.Response(200, text="day,usage\n2023-01-01,1\n")

    async with _client(handler, max_retries=3) as client:
        result = await client.get_text("data/emojis_50/cat.csv")

    assert attempts["count"] == 3
    assert result.state == FetchState.OK


@pytest.mark.asyncio
async def test_retryable_status_exhausts_retries_as_failed() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(429, text="slow down")

    async with _client(handler, max_retries=2) as client:
        result = await client.get_text("data/emojis_50/cat.csv")

    assert result.state == FetchState.FAILED
    assert result.status_code == 429


@pytest.mark.asyncio
async def test_get_json_handles_empty_and_invalid_payloads() -> None:
    payloads = {"/empty.json": "[]", "/broken.json": "{not json", "/ok.json": '[{"short_name": "dog"}]'}

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, text=payloads[request.url.path])

    async with _client(handler) as client:
        empty = await client.get_json("/empty.json")
        broken = await client.get_json("/broken.json")
        ok = await client.get_json("/ok.json")

    assert empty.state == FetchState.EMPTY
    assert broken.state == FetchState.FAILED
    assert ok.state == FetchState.OK
    assert ok.data == [{"short_name": "dog"}]


@pytest.mark.asyncio
async def test_local_data_dir_reads_files_from_disk(tmp_path) -> None:
    series_dir = tmp_path / "data" / "emojis_50"
    series_dir.mkdir(parents=True)
    (series_dir / "dog.csv").write_text("day,usage\n2023-01-01,4\n", encoding="utf-8")

    def handler(request: httpx.Request) -> httpx.Response:
        raise AssertionError("local reads must not hit the network")

    async with _client(handler, data_dir=str(tmp_path)) as client:
        found = await client.get_text("data/emojis_50/dog.csv")
        missing = await client.get_text("data/emojis_50/cat.csv")

    assert found.state == FetchState.OK
    assert missing.state == FetchState.FAILED


@pytest.mark.asyncio
async def test_zero_max_retries_makes_a_single_attempt() -> None:
    attempts = {"count": 0}

    def handler(request: httpx.Request) -> httpx.Response:
        attempts["count"] += 1
        return httpx.Response(503, text="busy")

    async with _client(handler, max_retries=0) as client:
        result = await client.get_text("data/emojis_50/cat.csv")

    assert attempts["count"] == 1
    assert result.state == FetchState.FAILED
    assert result.status_code == 503
