"""Fan-out search across every catalog adapter."""

from __future__ import annotations

import asyncio
import logging
from typing import Mapping, Sequence

from ..config import Settings
from ..models import Candidate
from .base import CatalogAdapter

logger = logging.getLogger(__name__)

# Directed searches: media type -> (adapter key, variant passed to the adapter).
DIRECTED_ROUTES: Mapping[str, tuple[str, str | None]] = {
    "movie": ("screen", "movie"),
    "tv": ("screen", "tv"),
    "anime": ("anime", None),
    "manga": ("manga", None),
    "book": ("book", "book"),
    "audiobook": ("book", "audiobook"),
    "podcast": ("podcast", None),
    "game": ("game", None),
}
ANIME_FALLBACK_ROUTE = ("screen", "tv")


class SearchService:
    """Route a query to one catalog or rank hits across several.

    Directed searches (a concrete media type) keep the adapter's own ordering.
    Auto searches run every configured adapter concurrently, wait for all of
    them, and sort the pooled candidates by raw score. Scores come from
    different popularity signals per catalog and are not rescaled, so
    cross-catalog ordering is approximate.
    """

    def __init__(self, settings: Settings, adapters: Sequence[CatalogAdapter]):
        self._settings = settings
        self._adapters: dict[str, CatalogAdapter] = {
            adapter.key: adapter for adapter in adapters
        }

    @property
    def adapters(self) -> Mapping[str, CatalogAdapter]:
        return self._adapters

    async def search(
        self, query: str, media_type: str, *, limit: int | None = None
    ) -> list[Candidate]:
        """Return candidates for ``query``.

        ``media_type`` is a concrete media type or ``"auto"``.
        """

        query = query.strip()
        if not query:
            raise ValueError("Query is required")
        if media_type == "auto":
            return await self._search_auto(query, limit=limit)
        if media_type not in DIRECTED_ROUTES:
            raise ValueError(f"Unsupported media type: {media_type}")
        return await self._search_directed(query, media_type)

    async def search_best(self, query: str, media_type: str) -> Candidate | None:
        """Return the single best candidate for ``query``, if any."""

        results = await self.search(query, media_type, limit=1)
        return results[0] if results else None

    async def _search_directed(self, query: str, media_type: str) -> list[Candidate]:
        key, variant = DIRECTED_ROUTES[media_type]
        results = await self._run_adapter(key, query, variant)
        if results or media_type != "anime":
            return results

        # Some anime only exist on TMDB as TV series.
        fallback_key, fallback_variant = ANIME_FALLBACK_ROUTE
        fallback = await self._run_adapter(fallback_key, query, fallback_variant)
        if fallback:
            logger.info("Anime search for %r fell back to %s", query, fallback_key)
        return [
            candidate.model_copy(update={"media_type": "anime"})
            for candidate in fallback
        ]

    async def _search_auto(
        self, query: str, *, limit: int | None = None
    ) -> list[Candidate]:
        keys = [key for key in self._settings.auto_sources if key in self._adapters]
        tasks = {
            key: asyncio.create_task(self._adapters[key].search(query))
            for key in keys
        }
        if not tasks:
            return []

        deadline = self._settings.search_deadline_seconds
        if deadline is None:
            await asyncio.gather(*tasks.values(), return_exceptions=True)
        else:
            try:
                await asyncio.wait(tasks.values(), timeout=deadline)
            finally:
                # Also runs when the caller itself is cancelled mid-wait.
                pending = [task for task in tasks.values() if not task.done()]
                for task in pending:
                    task.cancel()
            if pending:
                await asyncio.gather(*pending, return_exceptions=True)

        pool: list[Candidate] = []
        for key, task in tasks.items():
            if task.cancelled():
                logger.warning("%s search was cancelled before returning results", key)
                continue
            exc = task.exception()
            if exc is not None:
                logger.warning("%s search failed for %r: %s", key, query, exc)
                continue
            pool.extend(task.result())

        # sorted() is stable, so equal scores keep source order.
        pool = sorted(pool, key=lambda candidate: candidate.score, reverse=True)
        return pool[: limit or self._settings.result_limit]

    async def _run_adapter(
        self, key: str, query: str, variant: str | None
    ) -> list[Candidate]:
        adapter = self._adapters.get(key)
        if adapter is None:
            logger.warning("No adapter registered for %s", key)
            return []
        try:
            return await adapter.search(query, variant)
        except Exception:
            logger.exception("%s search raised for %r", key, query)
            return []
