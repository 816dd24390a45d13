"""Fixed lookup tables mapping source vocabularies onto the tracking taxonomy.

Everything in here is configuration data: adapters read these tables but never
mutate them. Bump ``TAXONOMY_VERSION`` whenever a mapping changes so stored
records can be traced back to the table that produced them.
"""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Literal, Mapping, get_args


TAXONOMY_VERSION = "2024.1"

MediaType = Literal[
    "movie", "tv", "anime", "book", "audiobook", "podcast", "game", "manga"
]
MEDIA_TYPES: tuple[str, ...] = get_args(MediaType)

Platform = Literal[
    "Netflix",
    "Amazon Prime",
    "Disney+",
    "Apple TV+",
    "NOW TV",
    "BBC iPlayer",
    "ITVX",
    "Channel 4",
    "Paramount+",
    "YouTube",
    "Crunchyroll",
    "Apple Podcasts",
    "Steam",
    "PlayStation Store",
    "Xbox",
    "Nintendo",
    "Epic Games",
    "GOG",
    "Audible",
    "Kindle",
    "Manga Plus",
    "VIZ",
]
PLATFORMS: tuple[str, ...] = get_args(Platform)

Genre = Literal[
    "Action",
    "Animation",
    "Comedy",
    "Documentary",
    "Drama",
    "Fantasy",
    "Horror",
    "Romance",
    "Sci-Fi",
    "Thriller",
]
GENRES: tuple[str, ...] = get_args(Genre)

PlatformConfidence = Literal["confirmed", "inferred"]


@dataclass(frozen=True)
class SourceDefinition:
    """Describes one external catalog the engine can query."""

    key: str
    name: str
    media_types: tuple[str, ...]
    requires_key: bool


SOURCES: tuple[SourceDefinition, ...] = (
    SourceDefinition(
        key="screen",
        name="TMDB",
        media_types=("movie", "tv"),
        requires_key=True,
    ),
    SourceDefinition(
        key="book",
        name="Google Books",
        media_types=("book", "audiobook"),
        requires_key=True,
    ),
    SourceDefinition(
        key="game",
        name="RAWG",
        media_types=("game",),
        requires_key=True,
    ),
    SourceDefinition(
        key="anime",
        name="Jikan",
        media_types=("anime",),
        requires_key=False,
    ),
    SourceDefinition(
        key="manga",
        name="Jikan",
        media_types=("manga",),
        requires_key=False,
    ),
    SourceDefinition(
        key="podcast",
        name="iTunes",
        media_types=("podcast",),
        requires_key=False,
    ),
)
SOURCE_KEYS: tuple[str, ...] = tuple(source.key for source in SOURCES)


# Provider synonym tables keyed by the resolver's source tag. Lookups are exact
# string matches on the raw provider name (TMDB, Jikan) or store slug (RAWG).
PLATFORM_SYNONYMS: Mapping[str, Mapping[str, str]] = MappingProxyType(
    {
        "tmdb": MappingProxyType(
            {
                "Netflix": "Netflix",
                "Netflix basic with Ads": "Netflix",
                "Amazon Prime Video": "Amazon Prime",
                "Amazon Prime Video with Ads": "Amazon Prime",
                "Disney Plus": "Disney+",
                "Apple TV Plus": "Apple TV+",
                "Apple TV+": "Apple TV+",
                "NOW": "NOW TV",
                "Now TV": "NOW TV",
                "NOW TV Cinema": "NOW TV",
                "BBC iPlayer": "BBC iPlayer",
                "ITVX": "ITVX",
                "ITV Hub": "ITVX",
                "Channel 4": "Channel 4",
                "All 4": "Channel 4",
                "Paramount Plus": "Paramount+",
                "Paramount+": "Paramount+",
                "YouTube": "YouTube",
                "YouTube Premium": "YouTube",
                "Crunchyroll": "Crunchyroll",
            }
        ),
        "rawg": MappingProxyType(
            {
                "steam": "Steam",
                "playstation-store": "PlayStation Store",
                "xbox-store": "Xbox",
                "xbox360": "Xbox",
                "nintendo": "Nintendo",
                "epic-games": "Epic Games",
                "gog": "GOG",
            }
        ),
        "jikan": MappingProxyType(
            {
                "Crunchyroll": "Crunchyroll",
                # Funimation's catalogue moved to Crunchyroll.
                "Funimation": "Crunchyroll",
                "Netflix": "Netflix",
                "Amazon Prime Video": "Amazon Prime",
                "Disney Plus": "Disney+",
                "Disney+": "Disney+",
                "YouTube": "YouTube",
            }
        ),
    }
)

# Fallback platforms used when a source gives no usable availability signal.
DEFAULT_PLATFORMS: Mapping[str, str] = MappingProxyType(
    {
        "game": "Steam",
        "anime": "Crunchyroll",
        "manga": "Kindle",
        "book": "Kindle",
        "audiobook": "Audible",
        "podcast": "Apple Podcasts",
    }
)

# Manga platform heuristic inputs, matched as substrings of serialization or
# publisher names.
MANGA_TOP_TIER_MAGAZINES: tuple[str, ...] = (
    "Shounen Jump",
    "Weekly Shounen Jump",
    "Jump SQ",
    "Shonen Jump",
)
MANGA_TOP_TIER_PLATFORM = "Manga Plus"
MANGA_MAJOR_PUBLISHERS: tuple[str, ...] = ("Shueisha", "Shogakukan", "Hakusensha")
MANGA_MAJOR_PUBLISHER_PLATFORM = "VIZ"
MANGA_HIGH_SCORE_THRESHOLD = 8.0


GENRE_MAP: Mapping[str, str] = MappingProxyType(
    {
        # Taxonomy members map onto themselves.
        "Action": "Action",
        "Animation": "Animation",
        "Comedy": "Comedy",
        "Documentary": "Documentary",
        "Drama": "Drama",
        "Fantasy": "Fantasy",
        "Horror": "Horror",
        "Romance": "Romance",
        "Sci-Fi": "Sci-Fi",
        "Thriller": "Thriller",
        # Film and TV
        "Adventure": "Action",
        "Action & Adventure": "Action",
        "Crime": "Thriller",
        "Family": "Comedy",
        "History": "Drama",
        "Music": "Drama",
        "Mystery": "Thriller",
        "Science Fiction": "Sci-Fi",
        "Sci-Fi & Fantasy": "Sci-Fi",
        "TV Movie": "Drama",
        "War": "Action",
        "War & Politics": "Drama",
        "Western": "Action",
        "Kids": "Animation",
        "News": "Documentary",
        "Reality": "Documentary",
        "Soap": "Drama",
        "Talk": "Documentary",
        # Games
        "RPG": "Fantasy",
        "Shooter": "Action",
        "Puzzle": "Comedy",
        "Sports": "Action",
        "Racing": "Action",
        "Simulation": "Documentary",
        "Strategy": "Thriller",
        # Anime and manga
        "Shounen": "Action",
        "Shoujo": "Romance",
        "Seinen": "Drama",
        "Josei": "Drama",
        "Slice of Life": "Drama",
        "Supernatural": "Fantasy",
        "Psychological": "Thriller",
        "Suspense": "Thriller",
        "Mecha": "Sci-Fi",
        # Podcasts
        "True Crime": "Thriller",
        "Fiction": "Drama",
        "Science": "Documentary",
        "Society & Culture": "Documentary",
    }
)

# TMDB search results only carry numeric genre ids; these are stable upstream.
TMDB_GENRE_IDS: Mapping[int, str] = MappingProxyType(
    {
        28: "Action",
        12: "Adventure",
        16: "Animation",
        35: "Comedy",
        80: "Crime",
        99: "Documentary",
        18: "Drama",
        10751: "Family",
        14: "Fantasy",
        36: "History",
        27: "Horror",
        10402: "Music",
        9648: "Mystery",
        10749: "Romance",
        878: "Science Fiction",
        10770: "TV Movie",
        53: "Thriller",
        10752: "War",
        37: "Western",
        10759: "Action & Adventure",
        10762: "Kids",
        10763: "News",
        10764: "Reality",
        10765: "Sci-Fi & Fantasy",
        10766: "Soap",
        10767: "Talk",
        10768: "War & Politics",
    }
)


# Notion database select options.
NOTION_MEDIA_TYPES: Mapping[str, str] = MappingProxyType(
    {
        "movie": "Movie",
        "tv": "TV Show",
        "anime": "TV Show",
        "book": "Book",
        "audiobook": "Audiobook",
        "podcast": "Podcast",
        "game": "Video Game",
        "manga": "Comic/Manga",
    }
)
NOTION_PLATFORMS: Mapping[str, str] = MappingProxyType(
    {
        "Netflix": "Netflix",
        "Amazon Prime": "Amazon Prime",
        "Disney+": "Disney+",
        "Apple TV+": "Apple TV+",
        "NOW TV": "NOW TV",
        "BBC iPlayer": "BBC iPlayer",
        "ITVX": "ITVX",
        "Channel 4": "Channel 4",
        "Paramount+": "Paramount+",
        "Apple Podcasts": "Apple Podcasts",
        "YouTube": "YouTube",
        "Steam": "Steam",
        "PlayStation Store": "PlayStation Store",
        "Audible": "Audible",
        "Kindle": "Kindle",
        "Crunchyroll": "Other",
        "Xbox": "Other",
        "Nintendo": "Other",
        "Epic Games": "Other",
        "GOG": "Other",
        "Manga Plus": "Other",
        "VIZ": "Other",
    }
)
NOTION_DEFAULT_STATUS = "Want to Watch/Read/Play"
NOTION_OVERVIEW_LIMIT = 2000
