"""Selected emojis and the write-once cache of their loaded time series."""

from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable, Iterable, Optional, Sequence

from emoji_trends.models.timeseries import TimeSeriesRecord

logger = logging.getLogger(__name__)

RecordLoader = Callable[[str], Awaitable[Sequence[TimeSeriesRecord]]]


def dedupe_ids(entity_ids: Iterable[str]) -> list[str]:
    """Strip blanks and duplicates while keeping first-seen order."""
    ordered: list[str] = []
    seen: set[str] = set()
    for raw in entity_ids:
        entity_id = str(raw).strip()
        if not entity_id or entity_id in seen:
            continue
        seen.add(entity_id)
        ordered.append(entity_id)
    return ordered


class SelectionStore:
    """Holds the active selection and an insert-if-absent record cache.

    Cache entries are never evicted: deselecting an emoji keeps its records so
    re-selecting it does not refetch. Each slot is written once.
    """

    def __init__(self) -> None:
        self._selected: list[str] = []
        self._cache: dict[str, tuple[TimeSeriesRecord, ...]] = {}
        self._inflight: dict[str, asyncio.Task[tuple[TimeSeriesRecord, ...]]] = {}

    @property
    def selected(self) -> tuple[str, ...]:
        return tuple(self._selected)

    def get(self, entity_id: str) -> Optional[tuple[TimeSeriesRecord, ...]]:
        """Return cached records, or None when the emoji was never loaded."""
        return self._cache.get(entity_id)

    def is_cached(self, entity_id: str) -> bool:
        return entity_id in self._cache

    def is_loading(self, entity_id: str) -> bool:
        return entity_id in self._inflight

    def select(self, entity_ids: Iterable[str]) -> list[str]:
        """Replace the selection and return the selected ids not yet cached."""
        self._selected = dedupe_ids(entity_ids)
        return self.missing()

    def deselect(self, entity_ids: Iterable[str]) -> None:
        removed = set(dedupe_ids(entity_ids))
        self._selected = [entity_id for entity_id in self._selected if entity_id not in removed]

    def missing(self) -> list[str]:
        return [entity_id for entity_id in self._selected if entity_id not in self._cache]

    def insert_if_absent(self, entity_id: str, records: Iterable[TimeSeriesRecord]) -> bool:
        """Store records for `entity_id` unless a slot already exists."""
        if entity_id in self._cache:
            return False
        self._cache[entity_id] = tuple(records)
        return True

    async def ensure_loaded(self, entity_id: str, loader: RecordLoader) -> tuple[TimeSeriesRecord, ...]:
        """Load one emoji once; concurrent callers share the in-flight fetch."""
        cached = self._cache.get(entity_id)
        if cached is not None:
            return cached

        task = self._inflight.get(entity_id)
        if task is None:
            task = asyncio.ensure_future(self._fetch(entity_id, loader))
            self._inflight[entity_id] = task
        return await task

    async def load_missing(self, loader: RecordLoader, entity_ids: Iterable[str] | None = None) -> list[str]:
        """Fetch every uncached id concurrently and wait for all of them."""
        targets = dedupe_ids(entity_ids) if entity_ids is not None else self.missing()
        targets = [entity_id for entity_id in targets if entity_id not in self._cache]
        if not targets:
            return []

        await asyncio.gather(*(self.ensure_loaded(entity_id, loader) for entity_id in targets))
        return targets

    async def _fetch(self, entity_id: str, loader: RecordLoader) -> tuple[TimeSeriesRecord, ...]:
        try:
            records: Iterable[TimeSeriesRecord] = await loader(entity_id)
        except Exception as exc:
            logger.warning(
                "Failed to load time series, caching empty series",
                extra={"entity_id": entity_id, "error": str(exc)},
            )
            records = ()
        finally:
            self._inflight.pop(entity_id, None)

        self.insert_if_absent(entity_id, records)
        return self._cache[entity_id]
