"""Book and audiobook search against the Google Books volumes API."""

from __future__ import annotations

import logging
from typing import Any, Iterator

from ..models import Candidate
from ..normalizers import normalize_genres
from ..taxonomy import DEFAULT_PLATFORMS
from ..utils import strip_leading_article
from .base import CatalogAdapter, as_dict, as_list, dict_items, safe_number

logger = logging.getLogger(__name__)

BOOK_VARIANTS = ("book", "audiobook")
LOCALE_KEYWORD = "japanese"
GENRE_KEYWORD = "novel"
PARTIAL_QUERY_WORDS = 3


class GoogleBooksClient(CatalogAdapter):
    """Search Google Books, relaxing the query until something matches.

    Title search against a general catalogue is imprecise for translated or
    foreign titles, so the query is retried in a fixed order of progressively
    looser forms. The first form that returns at least one volume wins.
    """

    key = "book"
    name = "Google Books"

    @property
    def configured(self) -> bool:
        return bool(self._settings.google_books_api_key)

    async def search(self, query: str, variant: str | None = None) -> list[Candidate]:
        if not self.configured:
            logger.info("Google Books API key missing, returning no book results")
            return []

        items: list[dict[str, Any]] = []
        for step, params in self._relaxation_steps(query):
            data = await self._get_json("/volumes", params=params)
            items = dict_items(as_dict(data).get("items"))
            if items:
                logger.debug("Google Books matched %r at step %s", query, step)
                break
        if not items:
            return []

        return self._build_candidates(
            items, lambda item: self._to_candidate(item, variant)
        )

    def _relaxation_steps(self, query: str) -> Iterator[tuple[str, dict[str, Any]]]:
        """Yield ``(label, params)`` pairs, loosest last."""

        yield "intitle", self._params(f"intitle:{query}", langRestrict="en")
        yield "broad", self._params(query)
        yield "locale", self._params(f"{query} {LOCALE_KEYWORD}")
        yield "genre", self._params(f"{query} {GENRE_KEYWORD}")

        stripped = strip_leading_article(query)
        if stripped and stripped != query:
            yield "article", self._params(stripped)

        words = query.split()
        if len(words) > PARTIAL_QUERY_WORDS:
            yield "partial", self._params(" ".join(words[:PARTIAL_QUERY_WORDS]))

    def _params(self, q: str, **extra: str) -> dict[str, Any]:
        params: dict[str, Any] = {
            "q": q,
            "key": self._settings.google_books_api_key,
            "maxResults": self.limit,
        }
        params.update(extra)
        return params

    def _to_candidate(self, item: dict[str, Any], variant: str | None) -> Candidate:
        info = as_dict(item.get("volumeInfo"))
        categories = [c for c in as_list(info.get("categories")) if isinstance(c, str)]
        media_type = self._media_type(info, categories, variant)
        authors = [a for a in as_list(info.get("authors")) if isinstance(a, str)]
        volume_id = item.get("id")
        external_url = info.get("infoLink")
        if not isinstance(external_url, str) or not external_url:
            external_url = (
                f"https://books.google.com/books?id={volume_id}" if volume_id else ""
            )
        rating = safe_number(info.get("averageRating")) or 3
        return Candidate(
            media_type=media_type,
            title=info.get("title") or "",
            year=info.get("publishedDate"),
            overview=info.get("description") or "",
            image_url=as_dict(info.get("imageLinks")).get("thumbnail"),
            platform=DEFAULT_PLATFORMS[media_type],
            platform_confidence="inferred",
            genres=normalize_genres(categories),
            author=", ".join(authors),
            external_url=external_url,
            score=safe_number(info.get("ratingsCount")) * rating,
        )

    @staticmethod
    def _media_type(
        info: dict[str, Any], categories: list[str], variant: str | None
    ) -> str:
        if variant in BOOK_VARIANTS:
            return variant
        if info.get("printType") == "AUDIOBOOK":
            return "audiobook"
        if any("audio" in category.lower() for category in categories):
            return "audiobook"
        return "book"
