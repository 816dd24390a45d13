"""Video game search against the RAWG database."""

from __future__ import annotations

import logging
from typing import Any

from ..models import Candidate
from ..normalizers import normalize_genres, resolve_platform_with_default
from .base import CatalogAdapter, as_dict, as_list, dict_items, names_of, safe_number

logger = logging.getLogger(__name__)

SITE_BASE_URL = "https://rawg.io/games"


class RAWGClient(CatalogAdapter):
    """Search RAWG for games and pick a storefront from the listed stores."""

    key = "game"
    name = "RAWG"

    @property
    def configured(self) -> bool:
        return bool(self._settings.rawg_api_key)

    async def search(self, query: str, variant: str | None = None) -> list[Candidate]:
        if not self.configured:
            logger.info("RAWG API key missing, returning no game results")
            return []
        data = await self._get_json(
            "/games",
            params={
                "key": self._settings.rawg_api_key,
                "search": query,
                "page_size": self.limit,
            },
        )
        results = dict_items(as_dict(data).get("results"))
        return self._build_candidates(results, self._to_candidate)

    def _to_candidate(self, item: dict[str, Any]) -> Candidate:
        store_slugs = [
            as_dict(as_dict(entry).get("store")).get("slug")
            for entry in as_list(item.get("stores"))
        ]
        platform, confidence = resolve_platform_with_default(store_slugs, "rawg", "game")
        slug = item.get("slug")
        rating = safe_number(item.get("rating")) or 3
        return Candidate(
            media_type="game",
            title=item.get("name") or "",
            year=item.get("released"),
            # Search results carry no description.
            overview="",
            image_url=item.get("background_image"),
            platform=platform,
            platform_confidence=confidence,
            genres=normalize_genres(names_of(item.get("genres"))),
            external_url=f"{SITE_BASE_URL}/{slug}" if slug else "",
            score=safe_number(item.get("ratings_count")) * rating,
        )
