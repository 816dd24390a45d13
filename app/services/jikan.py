"""Anime and manga search against Jikan, the unofficial MyAnimeList API."""

from __future__ import annotations

import logging
from typing import Any

from ..models import Candidate
from ..normalizers import normalize_genres, resolve_platform_with_default
from ..taxonomy import (
    DEFAULT_PLATFORMS,
    MANGA_HIGH_SCORE_THRESHOLD,
    MANGA_MAJOR_PUBLISHER_PLATFORM,
    MANGA_MAJOR_PUBLISHERS,
    MANGA_TOP_TIER_MAGAZINES,
    MANGA_TOP_TIER_PLATFORM,
)
from .base import CatalogAdapter, as_dict, dict_items, names_of, safe_number

logger = logging.getLogger(__name__)


class JikanClient(CatalogAdapter):
    """Shared search and field mapping for Jikan's anime and manga endpoints."""

    name = "Jikan"
    endpoint = ""
    media_type = ""
    date_field = ""

    async def search(self, query: str, variant: str | None = None) -> list[Candidate]:
        data = await self._get_json(
            self.endpoint, params={"q": query, "limit": self.limit}
        )
        results = dict_items(as_dict(data).get("data"))
        return self._build_candidates(results, self._to_candidate)

    def _resolve_platform(self, item: dict[str, Any]) -> tuple[str | None, str | None]:
        raise NotImplementedError

    def _to_candidate(self, item: dict[str, Any]) -> Candidate:
        platform, confidence = self._resolve_platform(item)
        jpg = as_dict(as_dict(item.get("images")).get("jpg"))
        published = as_dict(as_dict(item.get(self.date_field)).get("prop"))
        raw_genres = names_of(item.get("genres")) + names_of(item.get("demographics"))
        return Candidate(
            media_type=self.media_type,
            title=item.get("title_english") or item.get("title") or "",
            year=as_dict(published.get("from")).get("year"),
            overview=item.get("synopsis") or "",
            image_url=jpg.get("large_image_url") or jpg.get("image_url"),
            platform=platform,
            platform_confidence=confidence,
            genres=normalize_genres(raw_genres),
            external_url=item.get("url") or "",
            # Member counts run to the millions; scale them down.
            score=safe_number(item.get("members")) / 1000,
        )


class JikanAnimeClient(JikanClient):
    key = "anime"
    endpoint = "/anime"
    media_type = "anime"
    date_field = "aired"

    def _resolve_platform(self, item: dict[str, Any]) -> tuple[str | None, str | None]:
        return resolve_platform_with_default(
            names_of(item.get("streaming")), "jikan", "anime"
        )


class JikanMangaClient(JikanClient):
    """Manga search with a best-effort guess at where to read each title.

    Jikan has no availability data for manga, so the platform is inferred
    from serialization and publisher names and the community score. The
    result is always tagged ``inferred``.
    """

    key = "manga"
    endpoint = "/manga"
    media_type = "manga"
    date_field = "published"

    def _resolve_platform(self, item: dict[str, Any]) -> tuple[str | None, str | None]:
        return infer_manga_platform(item), "inferred"


def infer_manga_platform(item: dict[str, Any]) -> str:
    """Guess the reading platform for a Jikan manga record."""

    magazines = names_of(item.get("serializations"))
    publishers = magazines + names_of(item.get("publishers"))
    if any(top in name for name in magazines for top in MANGA_TOP_TIER_MAGAZINES):
        return MANGA_TOP_TIER_PLATFORM
    if any(major in name for name in publishers for major in MANGA_MAJOR_PUBLISHERS):
        return MANGA_MAJOR_PUBLISHER_PLATFORM
    if safe_number(item.get("score")) > MANGA_HIGH_SCORE_THRESHOLD:
        return MANGA_MAJOR_PUBLISHER_PLATFORM
    return DEFAULT_PLATFORMS["manga"]
