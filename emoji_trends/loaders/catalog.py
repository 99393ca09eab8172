"""Emoji metadata loader (emoji-datasource JSON)."""

from __future__ import annotations

import logging
from typing import Any, Optional

from emoji_trends.config.settings import settings
from emoji_trends.loaders.contracts import FetchState

logger = logging.getLogger(__name__)


class CatalogLoader:
    """Fetches the full emoji metadata list once and keeps it for the session."""

    def __init__(self, data_client: Any, *, metadata_url: Optional[str] = None) -> None:
        self._data_client = data_client
        self._metadata_url = metadata_url or settings.EMOJI_METADATA_URL
        self._metadata: Optional[list[dict[str, Any]]] = None

    async def load_metadata(self) -> list[dict[str, Any]]:
        if self._metadata is not None:
            return self._metadata

        logger.info("Fetching external emoji metadata")
        response = await self._data_client.get_json(self._metadata_url)
        if response.state != FetchState.OK or not isinstance(response.data, list):
            logger.warning(
                "Failed to load emoji metadata",
                extra={"state": response.state.value, "error": response.error},
            )
            return []

        self._metadata = [item for item in response.data if isinstance(item, dict) and item.get("short_name")]
        return self._metadata
