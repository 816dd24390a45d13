"""Screen-media search against The Movie Database (TMDB)."""

from __future__ import annotations

import asyncio
import logging
from typing import Any

import httpx

from ..models import Candidate
from ..normalizers import normalize_genres, resolve_platform, tmdb_genre_names
from .base import (
    CatalogAdapter,
    ServiceNotConfiguredError,
    UpstreamError,
    as_dict,
    as_list,
    dict_items,
    safe_number,
)

logger = logging.getLogger(__name__)

POSTER_BASE_URL = "https://image.tmdb.org/t/p/w500"
SITE_BASE_URL = "https://www.themoviedb.org"
SCREEN_TYPES = ("movie", "tv")
# Availability buckets in priority order.
PROVIDER_BUCKETS = ("flatrate", "free", "ads")


class TMDBClient(CatalogAdapter):
    """Search TMDB for movies and TV shows and resolve where they stream."""

    key = "screen"
    name = "TMDB"

    @property
    def configured(self) -> bool:
        return bool(self._settings.tmdb_api_key)

    async def search(self, query: str, variant: str | None = None) -> list[Candidate]:
        """Return up to ``limit`` movie/TV candidates for ``query``.

        ``variant`` is ``"movie"``, ``"tv"`` or ``"multi"`` (the default).
        """

        if not self.configured:
            logger.info("TMDB API key missing, returning no screen results")
            return []
        variant = variant if variant in SCREEN_TYPES else "multi"
        params = {
            "query": query,
            "include_adult": "false",
            "api_key": self._settings.tmdb_api_key,
        }
        data = await self._get_json(f"/search/{variant}", params=params)
        results = dict_items(as_dict(data).get("results"))
        if variant == "multi":
            results = [item for item in results if item.get("media_type") in SCREEN_TYPES]
        top = results[: self.limit]
        if not top:
            return []

        platforms = await asyncio.gather(
            *(
                self._fetch_platform(item.get("id"), self._media_type(item, variant))
                for item in top
            ),
            return_exceptions=True,
        )

        def build(pair: tuple[dict[str, Any], Any]) -> Candidate:
            item, platform = pair
            if isinstance(platform, BaseException):
                logger.warning(
                    "TMDB provider lookup failed for %s: %s", item.get("id"), platform
                )
                platform = None
            return self._to_candidate(item, variant, platform)

        return self._build_candidates(zip(top, platforms), build)

    async def details(self, media_id: str, media_type: str) -> dict[str, Any]:
        """Return the raw TMDB record for ``media_id`` tagged with its type."""

        if not self.configured:
            raise ServiceNotConfiguredError("TMDB API key not configured")
        if media_type not in SCREEN_TYPES:
            raise ValueError("Details are only available for movie or tv")

        try:
            response = await self._client.get(
                f"/{media_type}/{media_id}",
                params={"api_key": self._settings.tmdb_api_key},
            )
        except httpx.HTTPError as exc:
            raise UpstreamError(f"TMDB details request failed: {exc}") from exc
        try:
            payload = response.json()
        except ValueError:
            payload = {}
        if response.status_code >= 400:
            message = as_dict(payload).get("status_message") or "TMDB API error"
            raise UpstreamError(str(message))
        if not isinstance(payload, dict):
            raise UpstreamError("Unexpected TMDB details payload")
        payload["type"] = media_type
        return payload

    async def _fetch_platform(self, tmdb_id: Any, media_type: str) -> str | None:
        """Resolve the regional streaming platform for a single title."""

        if tmdb_id is None:
            return None
        data = await self._get_json(
            f"/{media_type}/{tmdb_id}/watch/providers",
            params={"api_key": self._settings.tmdb_api_key},
        )
        regions = as_dict(as_dict(data).get("results"))
        region = as_dict(regions.get(self._settings.tmdb_watch_region))
        if not region:
            return None
        provider_names = [
            as_dict(provider).get("provider_name")
            for bucket in PROVIDER_BUCKETS
            for provider in as_list(region.get(bucket))
        ]
        return resolve_platform(provider_names, "tmdb")

    def _to_candidate(
        self, item: dict[str, Any], variant: str, platform: str | None
    ) -> Candidate:
        media_type = self._media_type(item, variant)
        is_movie = media_type == "movie"
        poster_path = item.get("poster_path")
        tmdb_id = item.get("id")
        return Candidate(
            media_type=media_type,
            title=(item.get("title") if is_movie else item.get("name")) or "",
            year=item.get("release_date" if is_movie else "first_air_date"),
            overview=item.get("overview") or "",
            image_url=self._build_image_url(poster_path) if poster_path else None,
            platform=platform,
            platform_confidence="confirmed" if platform else None,
            genres=normalize_genres(tmdb_genre_names(as_list(item.get("genre_ids")))),
            external_url=f"{SITE_BASE_URL}/{media_type}/{tmdb_id}" if tmdb_id else "",
            score=safe_number(item.get("popularity")),
        )

    @staticmethod
    def _media_type(item: dict[str, Any], variant: str) -> str:
        if variant in SCREEN_TYPES:
            return variant
        return "movie" if item.get("media_type") == "movie" else "tv"

    @staticmethod
    def _build_image_url(path: str) -> str:
        if not isinstance(path, str) or not path:
            return ""
        if path.startswith("http"):
            return path
        return f"{POSTER_BASE_URL}{path}"
