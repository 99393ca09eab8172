"""Resilient async data client for CSV and JSON sources."""

from __future__ import annotations

import asyncio
import json
import logging
from pathlib import Path
from typing import Any, Optional

import httpx
from tenacity import AsyncRetrying, retry_if_exception_type, stop_after_attempt, wait_exponential

from emoji_trends.config.settings import settings
from emoji_trends.loaders.contracts import FetchResult, FetchState

logger = logging.getLogger(__name__)

_RETRYABLE_STATUS_CODES = frozenset({429, 500, 502, 503, 504})


class _RetryableStatusError(Exception):
    """Retryable upstream signal for tenacity."""

    def __init__(self, status_code: int) -> None:
        super().__init__(f"Retryable upstream status ({status_code})")
        self.status_code = status_code


class DataClient:
    """Fetches dataset files over HTTP, or from a local directory when configured."""

    def __init__(
        self,
        *,
        base_url: Optional[str] = None,
        data_dir: Optional[str] = None,
        timeout_seconds: Optional[float] = None,
        max_retries: Optional[int] = None,
        backoff_base_seconds: Optional[float] = None,
        backoff_max_seconds: Optional[float] = None,
        concurrency: Optional[int] = None,
        transport: Optional[Any] = None,
    ) -> None:
        self._base_url = base_url or settings.DATA_BASE_URL
        self._data_dir = Path(data_dir) if data_dir else (Path(settings.DATA_DIR) if settings.DATA_DIR else None)
        self._timeout_seconds = _or_default(timeout_seconds, getattr(settings, "FETCH_TIMEOUT_SECONDS", 15.0))
        self._max_retries = _or_default(max_retries, getattr(settings, "FETCH_MAX_RETRIES", 3))
        self._backoff_base_seconds = _or_default(backoff_base_seconds, getattr(settings, "FETCH_BACKOFF_BASE_SECONDS", 0.5))
        self._backoff_max_seconds = _or_default(backoff_max_seconds, getattr(settings, "FETCH_BACKOFF_MAX_SECONDS", 8.0))
        self._semaphore = asyncio.Semaphore(max(1, _or_default(concurrency, getattr(settings, "FETCH_CONCURRENCY", 8))))
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    async def __aenter__(self) -> "DataClient":
        await self._ensure_client()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._client:
            await self._client.aclose()
            self._client = None

    async def get_text(self, path: str) -> FetchResult[str]:
        """Fetch a text resource; absolute URLs bypass the local data directory."""

        if self._data_dir is not None and not _is_absolute_url(path):
            return await self._read_local(path)

        response = await self._request(path)
        if response.state != FetchState.OK:
            return response

        text = response.data or ""
        if not text.strip():
            return FetchResult(state=FetchState.EMPTY, data="", status_code=response.status_code, source=path)
        return response

    async def get_json(self, path: str) -> FetchResult[Any]:
        response = await self.get_text(path)
        if response.state != FetchState.OK:
            return FetchResult(
                state=response.state,
                data=None,
                status_code=response.status_code,
                error=response.error,
                source=path,
            )

        try:
            payload = json.loads(response.data or "")
        except ValueError as exc:
            logger.warning("Invalid JSON payload", extra={"source": path, "error": str(exc)})
            return FetchResult(
                state=FetchState.FAILED,
                error=f"Invalid JSON payload: {exc}",
                status_code=response.status_code,
                source=path,
            )

        if isinstance(payload, (list, dict)) and len(payload) == 0:
            return FetchResult(state=FetchState.EMPTY, data=payload, status_code=response.status_code, source=path)
        return FetchResult(state=FetchState.OK, data=payload, status_code=response.status_code, source=path)

    async def _read_local(self, path: str) -> FetchResult[str]:
        target = self._data_dir / path.lstrip("/")
        try:
            text = await asyncio.to_thread(target.read_text, encoding="utf-8")
        except OSError as exc:
            logger.warning("Failed to read local data file", extra={"source": str(target), "error": str(exc)})
            return FetchResult(state=FetchState.FAILED, error=str(exc), source=str(target))

        if not text.strip():
            return FetchResult(state=FetchState.EMPTY, data="", source=str(target))
        return FetchResult(state=FetchState.OK, data=text, source=str(target))

    async def _request(self, path: str) -> FetchResult[str]:
        client = await self._ensure_client()

        try:
            async with self._semaphore:
                async for attempt in AsyncRetrying(
                    stop=stop_after_attempt(max(1, self._max_retries)),
                    wait=wait_exponential(multiplier=self._backoff_base_seconds, max=self._backoff_max_seconds),
                    retry=retry_if_exception_type(_RetryableStatusError),
                    reraise=True,
                ):
                    with attempt:
                        response = await client.get(path, follow_redirects=True)

                        if response.status_code in _RETRYABLE_STATUS_CODES:
                            logger.warning(
                                "Retryable status from data source",
                                extra={"source": path, "status_code": response.status_code},
                            )
                            raise _RetryableStatusError(response.status_code)

                        response.raise_for_status()
                        return FetchResult(
                            state=FetchState.OK,
                            data=response.text,
                            status_code=response.status_code,
                            source=path,
                        )
        except _RetryableStatusError as exc:
            logger.warning(
                "Data request failed after retries",
                extra={"source": path, "error": str(exc), "status_code": exc.status_code},
            )
            return FetchResult(state=FetchState.FAILED, error=str(exc), status_code=exc.status_code, source=path)
        except httpx.HTTPError as exc:
            status_code = getattr(getattr(exc, "response", None), "status_code", None)
            logger.warning(
                "Data request failed",
                extra={"source": path, "error": str(exc), "status_code": status_code},
            )
            return FetchResult(state=FetchState.FAILED, error=str(exc), status_code=status_code, source=path)

        return FetchResult(state=FetchState.FAILED, error="Unknown data request failure", source=path)

    async def _ensure_client(self) -> httpx.AsyncClient:
        if self._client:
            return self._client

        self._client = httpx.AsyncClient(
            base_url=self._base_url,
            headers={"User-Agent": settings.USER_AGENT},
            timeout=self._timeout_seconds,
            transport=self._transport,
        )
        return self._client


def _is_absolute_url(path: str) -> bool:
    return path.startswith("http://") or path.startswith("https://")


def _or_default(value: Any, default: Any) -> Any:
    return default if value is None else value
