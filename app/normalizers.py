"""Mapping of source-specific platform and genre vocabularies."""

from __future__ import annotations

import logging
from typing import Iterable

from .taxonomy import (
    DEFAULT_PLATFORMS,
    GENRE_MAP,
    PLATFORM_SYNONYMS,
    TMDB_GENRE_IDS,
)

logger = logging.getLogger(__name__)


def resolve_platform(raw_providers: Iterable[str | None], source: str) -> str | None:
    """Return the platform for the first provider known to ``source``.

    The order of ``raw_providers`` is the priority order: the first entry found
    in the source's synonym table wins.
    """

    synonyms = PLATFORM_SYNONYMS.get(source)
    if synonyms is None:
        logger.debug("No platform synonyms registered for source %s", source)
        return None
    for raw in raw_providers:
        if not raw:
            continue
        mapped = synonyms.get(raw)
        if mapped:
            return mapped
    return None


def resolve_platform_with_default(
    raw_providers: Iterable[str | None], source: str, media_type: str
) -> tuple[str | None, str | None]:
    """Resolve a platform, falling back to the media type's default.

    Returns the platform together with its confidence tag.
    """

    platform = resolve_platform(raw_providers, source)
    if platform:
        return platform, "confirmed"
    fallback = DEFAULT_PLATFORMS.get(media_type)
    if fallback:
        return fallback, "inferred"
    return None, None


def normalize_genres(raw_genres: Iterable[str | None]) -> list[str]:
    """Map raw genre names onto the taxonomy, keeping first-seen order."""

    normalized: list[str] = []
    for raw in raw_genres:
        if not isinstance(raw, str):
            continue
        mapped = GENRE_MAP.get(raw.strip())
        if mapped and mapped not in normalized:
            normalized.append(mapped)
    return normalized


def tmdb_genre_names(genre_ids: Iterable[object]) -> list[str]:
    """Translate TMDB numeric genre ids into TMDB genre names."""

    names: list[str] = []
    for genre_id in genre_ids:
        try:
            name = TMDB_GENRE_IDS.get(int(genre_id))  # type: ignore[call-overload]
        except (TypeError, ValueError):
            continue
        if name:
            names.append(name)
    return names
