"""Per-emoji usage time-series loader."""

from __future__ import annotations

import csv
import io
import logging
import math
from datetime import date
from typing import Any, Iterable, Optional

from dateutil import parser as date_parser

from emoji_trends.config.settings import settings
from emoji_trends.loaders.contracts import FetchState
from emoji_trends.models.timeseries import TimeSeriesRecord

logger = logging.getLogger(__name__)


class TimeSeriesLoader:
    """Loads `{slug}.csv` files with `day` and `usage` columns into sorted records."""

    def __init__(self, data_client: Any, *, path_prefix: Optional[str] = None) -> None:
        self._data_client = data_client
        self._path_prefix = (path_prefix or settings.TIMESERIES_PATH).strip("/")

    def path_for(self, entity_id: str) -> str:
        return f"{self._path_prefix}/{entity_id}.csv"

    async def load(self, entity_id: str) -> list[TimeSeriesRecord]:
        """Fetch and parse one emoji's series; any failure yields an empty list."""

        response = await self._data_client.get_text(self.path_for(entity_id))
        if response.state == FetchState.FAILED:
            logger.warning(
                "Failed to fetch time series",
                extra={"entity_id": entity_id, "error": response.error, "status_code": response.status_code},
            )
            return []
        if response.state == FetchState.EMPTY or not response.data:
            return []

        try:
            records = self.parse_rows(entity_id, csv.DictReader(io.StringIO(response.data)))
        except csv.Error as exc:
            logger.warning("Failed to parse time series CSV", extra={"entity_id": entity_id, "error": str(exc)})
            return []

        logger.info(f"Loaded {len(records)} records for {entity_id}")
        return records

    @classmethod
    def parse_rows(cls, entity_id: str, rows: Iterable[dict[str, Any]]) -> list[TimeSeriesRecord]:
        """Drop malformed rows, merge duplicate days and sort ascending by date."""

        by_day: dict[date, float] = {}
        for row in rows:
            day = cls._parse_day(row.get("day"))
            usage = cls._parse_usage(row.get("usage"))
            if day is None or usage is None:
                logger.debug("Skipping malformed time series row", extra={"entity_id": entity_id, "row": row})
                continue
            by_day[day] = by_day.get(day, 0) + usage

        return [
            TimeSeriesRecord(entity_id=entity_id, timestamp=day, usage=by_day[day])
            for day in sorted(by_day)
        ]

    @staticmethod
    def _parse_day(raw: Any) -> Optional[date]:
        if not isinstance(raw, str) or not raw.strip():
            return None
        try:
            return date_parser.isoparse(raw.strip()).date()
        except (TypeError, ValueError, OverflowError):
            return None

    @staticmethod
    def _parse_usage(raw: Any) -> Optional[float]:
        if raw is None:
            return None
        try:
            value = float(str(raw).strip())
        except ValueError:
            return None
        if not math.isfinite(value) or value < 0:
            return None
        if value.is_integer():
            return int(value)
        return value
