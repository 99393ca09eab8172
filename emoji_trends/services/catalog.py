"""Emoji ranking/catalog: enrichment, filtering, ordering and pagination."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterable, Mapping, Optional, Sequence

from emoji_trends.config.settings import settings
from emoji_trends.models.catalog import CatalogEntry, CatalogPage, EmojiDetails
from emoji_trends.services.tracked_emojis import display_name

SORT_UNICODE = "unicode"
SORT_SCORE = "score"
SORT_NAME = "name"

PLATFORMS = (
    ("apple", "Apple"),
    ("google", "Google"),
    ("twitter", "Twitter"),
    ("facebook", "Facebook"),
)


def unified_to_char(unified: str) -> str:
    """Convert a dash-separated hex code point string ("1F1FA-1F1F8") to text."""
    if not unified:
        return ""
    try:
        return "".join(chr(int(part, 16)) for part in unified.split("-") if part)
    except ValueError:
        return ""


@dataclass(slots=True)
class CatalogConfig:
    """Catalog paging and image source knobs."""

    page_size: int = field(default_factory=lambda: getattr(settings, "CATALOG_PAGE_SIZE", 48))
    image_url_template: str = field(default_factory=lambda: settings.PLATFORM_IMAGE_URL_TEMPLATE)


class CatalogService:
    """Builds catalog entries from metadata and serves filtered, paged views."""

    def __init__(self, config: CatalogConfig | None = None) -> None:
        self.config = config or CatalogConfig()
        self._entries: list[CatalogEntry] = []
        self._by_id: dict[str, CatalogEntry] = {}

    @property
    def entries(self) -> list[CatalogEntry]:
        return list(self._entries)

    @property
    def is_loaded(self) -> bool:
        return bool(self._entries)

    def build(
        self,
        metadata: Iterable[Mapping[str, Any]],
        *,
        tracked_slugs: Sequence[str],
        local_scores: Mapping[str, float],
    ) -> list[CatalogEntry]:
        """Enrich metadata with local usage scores and sort by Unicode order."""

        entries: list[CatalogEntry] = []
        for meta in metadata:
            short_name = str(meta.get("short_name") or "").strip()
            if not short_name:
                continue
            short_names = meta.get("short_names") or []
            local_id = next(
                (slug for slug in tracked_slugs if slug == short_name or slug in short_names),
                None,
            )
            skin_variations = meta.get("skin_variations") or {}
            entries.append(
                CatalogEntry(
                    id=short_name,
                    local_id=local_id,
                    name=meta.get("name") or display_name(short_name),
                    char=unified_to_char(str(meta.get("unified") or "")),
                    unified=str(meta.get("unified") or ""),
                    score=local_scores.get(local_id, 0) if local_id else 0,
                    category=meta.get("category") or "Unknown",
                    subcategory=meta.get("subcategory") or None,
                    sort_order=int(meta.get("sort_order") or 99999),
                    variations=[
                        str(variation.get("unified"))
                        for variation in skin_variations.values()
                        if isinstance(variation, Mapping) and variation.get("unified")
                    ],
                    has_img_apple=bool(meta.get("has_img_apple")),
                    has_img_google=bool(meta.get("has_img_google")),
                    has_img_twitter=bool(meta.get("has_img_twitter")),
                    has_img_facebook=bool(meta.get("has_img_facebook")),
                )
            )

        entries.sort(key=lambda entry: entry.sort_order)
        self._entries = entries
        self._by_id = {entry.id: entry for entry in entries}
        return self.entries

    def categories(self) -> list[str]:
        seen: dict[str, None] = {}
        for entry in self._entries:
            seen.setdefault(entry.category, None)
        return list(seen)

    def filter_entries(
        self,
        *,
        category: Optional[str] = None,
        query: Optional[str] = None,
        only_tracked: bool = False,
        sort: str = SORT_UNICODE,
    ) -> list[CatalogEntry]:
        entries: Iterable[CatalogEntry] = self._entries
        if category and category != "all":
            entries = [entry for entry in entries if entry.category == category]
        if query and query.strip():
            needle = query.strip().lower()
            entries = [
                entry
                for entry in entries
                if needle in entry.name.lower() or needle in entry.id.lower() or needle == entry.char
            ]
        if only_tracked:
            entries = [entry for entry in entries if entry.has_local_data]
        return self._sorted(list(entries), sort)

    def paginate(self, entries: Sequence[CatalogEntry], page: int = 1, page_size: int | None = None) -> CatalogPage:
        """Slice one 1-based page; out-of-range pages clamp to the nearest valid page."""

        size = max(int(page_size or self.config.page_size), 1)
        total = len(entries)
        last_page = max((total + size - 1) // size, 1)
        current = min(max(int(page), 1), last_page)
        start = (current - 1) * size
        return CatalogPage(entries=list(entries[start : start + size]), page=current, page_size=size, total=total)

    def get(self, entry_id: str) -> Optional[CatalogEntry]:
        return self._by_id.get(entry_id)

    def details(self, entry_id: str) -> Optional[EmojiDetails]:
        entry = self.get(entry_id)
        if entry is None:
            return None

        if entry.score > 0:
            notes = [f"Total Usage: {entry.score:,}"]
        else:
            notes = ["No local usage data available for this emoji."]

        return EmojiDetails(
            char=entry.char,
            name=entry.name,
            score=entry.score,
            popularity_rank="Top 50" if entry.score > 0 else "General Library",
            category=entry.category,
            description=entry.name,
            variations=[
                {"char": unified_to_char(unified), "name": "Skin Tone", "unified": unified}
                for unified in entry.variations
            ],
            platforms=[
                {"name": label, "url": self.platform_image_url(entry.unified, platform)}
                for platform, label in PLATFORMS
                if getattr(entry, f"has_img_{platform}")
            ],
            notes=notes,
        )

    def platform_image_url(self, unified: str, platform: str) -> str:
        return self.config.image_url_template.format(platform=platform, unified=unified.lower())

    @staticmethod
    def _sorted(entries: list[CatalogEntry], sort: str) -> list[CatalogEntry]:
        if sort == SORT_SCORE:
            return sorted(entries, key=lambda entry: (-entry.score, entry.sort_order))
        if sort == SORT_NAME:
            return sorted(entries, key=lambda entry: (entry.name.lower(), entry.sort_order))
        return sorted(entries, key=lambda entry: entry.sort_order)
