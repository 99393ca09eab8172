"""Catalog entries built from emoji-datasource metadata."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional


@dataclass(slots=True)
class CatalogEntry:
    """One emoji in the ranking/catalog grid."""

    id: str
    name: str
    char: str
    unified: str
    local_id: Optional[str] = None
    score: float = 0
    category: str = "Unknown"
    subcategory: Optional[str] = None
    sort_order: int = 99999
    variations: list[str] = field(default_factory=list)
    has_img_apple: bool = False
    has_img_google: bool = False
    has_img_twitter: bool = False
    has_img_facebook: bool = False

    @property
    def has_local_data(self) -> bool:
        return self.local_id is not None


@dataclass(slots=True)
class CatalogPage:
    """A page of catalog entries with paging metadata."""

    entries: list[CatalogEntry]
    page: int
    page_size: int
    total: int

    @property
    def total_pages(self) -> int:
        if self.total == 0:
            return 1
        return (self.total + self.page_size - 1) // self.page_size

    @property
    def has_previous(self) -> bool:
        return self.page > 1

    @property
    def has_next(self) -> bool:
        return self.page < self.total_pages


@dataclass(slots=True)
class EmojiDetails:
    """Detail-modal payload for one catalog entry."""

    char: str
    name: str
    score: float
    popularity_rank: str
    category: str
    description: str
    variations: list[dict[str, str]] = field(default_factory=list)
    platforms: list[dict[str, str]] = field(default_factory=list)
    notes: list[str] = field(default_factory=list)
