"""Emoji sentiment dataset loader."""

from __future__ import annotations

import csv
import io
import logging
from typing import Any, Iterable, Optional

from emoji_trends.config.settings import settings
from emoji_trends.loaders.contracts import FetchState
from emoji_trends.models.sentiment import SentimentRecord

logger = logging.getLogger(__name__)

# Non-emoji characters and noisy rows in the published dataset.
SENTIMENT_BLACKLIST = frozenset({"┊", "▃", "◤", "☁", "da", "—"})


class SentimentLoader:
    """Loads the Emoji Sentiment Ranking CSV into records."""

    def __init__(self, data_client: Any, *, path: Optional[str] = None) -> None:
        self._data_client = data_client
        self._path = path or settings.SENTIMENT_PATH

    async def load(self) -> list[SentimentRecord]:
        response = await self._data_client.get_text(self._path)
        if response.state != FetchState.OK or not response.data:
            logger.warning(
                "Failed to load sentiment dataset",
                extra={"state": response.state.value, "error": response.error},
            )
            return []

        try:
            records = self.parse_rows(csv.DictReader(io.StringIO(response.data)))
        except csv.Error as exc:
            logger.warning("Failed to parse sentiment CSV", extra={"error": str(exc)})
            return []

        logger.info(f"Sentiment CSV loaded: {len(records)} emojis")
        return records

    @classmethod
    def parse_rows(cls, rows: Iterable[dict[str, Any]]) -> list[SentimentRecord]:
        records: list[SentimentRecord] = []
        for row in rows:
            emoji = (row.get("Emoji") or "").strip()
            if not emoji or emoji in SENTIMENT_BLACKLIST:
                continue
            try:
                record = SentimentRecord(
                    emoji=emoji,
                    name=(row.get("Unicode name") or "").strip(),
                    occurrences=cls._to_int(row.get("Occurrences")),
                    negative=cls._to_int(row.get("Negative")),
                    neutral=cls._to_int(row.get("Neutral")),
                    positive=cls._to_int(row.get("Positive")),
                    position=float(row.get("Position") or 0),
                )
            except (TypeError, ValueError):
                logger.debug("Skipping malformed sentiment row", extra={"row": row})
                continue
            if record.occurrences <= 0:
                continue
            records.append(record)
        return records

    @staticmethod
    def _to_int(raw: Any) -> int:
        return int(float(str(raw).strip()))
