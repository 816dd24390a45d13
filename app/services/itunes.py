"""Podcast search against the iTunes Search API."""

from __future__ import annotations

import logging
from typing import Any

from ..models import Candidate
from ..normalizers import normalize_genres
from ..taxonomy import DEFAULT_PLATFORMS
from .base import CatalogAdapter, as_dict, as_list, dict_items, safe_number

logger = logging.getLogger(__name__)


class ITunesClient(CatalogAdapter):
    key = "podcast"
    name = "iTunes"

    async def search(self, query: str, variant: str | None = None) -> list[Candidate]:
        data = await self._get_json(
            "/search",
            params={
                "term": query,
                "entity": "podcast",
                "limit": self.limit,
                "country": self._settings.itunes_country,
            },
        )
        results = dict_items(as_dict(data).get("results"))
        return self._build_candidates(results, self._to_candidate)

    def _to_candidate(self, item: dict[str, Any]) -> Candidate:
        genres = [genre for genre in as_list(item.get("genres")) if isinstance(genre, str)]
        return Candidate(
            media_type="podcast",
            title=item.get("collectionName") or item.get("trackName") or "",
            year=item.get("releaseDate"),
            overview=item.get("description") or "",
            image_url=item.get("artworkUrl600") or item.get("artworkUrl100"),
            platform=DEFAULT_PLATFORMS["podcast"],
            platform_confidence="confirmed",
            genres=normalize_genres(genres),
            author=item.get("artistName") or "",
            external_url=item.get("collectionViewUrl") or item.get("trackViewUrl") or "",
            # Episode count stands in for popularity.
            score=safe_number(item.get("trackCount")),
        )
