"""Pydantic models describing search payloads."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

from .taxonomy import MEDIA_TYPES, Genre, MediaType, Platform, PlatformConfidence
from .utils import extract_year, upgrade_to_https

SearchType = Literal[
    "auto", "movie", "tv", "anime", "book", "audiobook", "podcast", "game", "manga"
]


class Candidate(BaseModel):
    """A normalized search hit produced by one catalog adapter.

    Scores are per-source popularity proxies and are only comparable within
    the catalog that produced them.
    """

    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        alias_generator=to_camel,
    )

    media_type: MediaType
    title: str = Field(min_length=1)
    year: str = ""
    overview: str = ""
    image_url: str | None = None
    platform: Platform | None = None
    platform_confidence: PlatformConfidence | None = None
    genres: tuple[Genre, ...] = ()
    author: str | None = None
    external_url: str = ""
    score: float = Field(default=0, ge=0)

    @field_validator("title", mode="before")
    @classmethod
    def _strip_title(cls, value: object) -> object:
        if isinstance(value, str):
            return value.strip()
        return value

    @field_validator("year", mode="before")
    @classmethod
    def _coerce_year(cls, value: object) -> str:
        return extract_year(value)

    @field_validator("overview", mode="before")
    @classmethod
    def _coerce_overview(cls, value: object) -> str:
        if value is None:
            return ""
        return str(value)

    @field_validator("image_url", mode="before")
    @classmethod
    def _secure_image_url(cls, value: object) -> str | None:
        return upgrade_to_https(value)

    @field_validator("genres", mode="before")
    @classmethod
    def _dedupe_genres(cls, value: object) -> object:
        if not isinstance(value, (list, tuple)):
            return value
        unique: list[object] = []
        for genre in value:
            if genre not in unique:
                unique.append(genre)
        return tuple(unique)

    @field_validator("author", mode="before")
    @classmethod
    def _blank_author(cls, value: object) -> object:
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator("score", mode="before")
    @classmethod
    def _default_score(cls, value: object) -> object:
        if value is None:
            return 0
        return value

    @model_validator(mode="before")
    @classmethod
    def _sync_platform_confidence(cls, data: object) -> object:
        if not isinstance(data, dict):
            return data
        key = (
            "platformConfidence"
            if "platformConfidence" in data
            else "platform_confidence"
        )
        if not data.get("platform"):
            return {**data, "platform": None, key: None}
        if data.get(key) is None:
            return {**data, key: "confirmed"}
        return data

    def to_payload(self) -> dict[str, object]:
        """Return the camelCase wire representation."""

        return self.model_dump(mode="json", by_alias=True)


class SearchRequest(BaseModel):
    """Validated body of a search call."""

    query: str = Field(min_length=1)
    type: SearchType

    @field_validator("query", mode="before")
    @classmethod
    def _strip_query(cls, value: object) -> object:
        if isinstance(value, str):
            return value.strip()
        return value


class SearchResponse(BaseModel):
    results: list[Candidate] = Field(default_factory=list)


class BestMatchResponse(BaseModel):
    result: Candidate | None = None


class Identification(BaseModel):
    """What the vision model believes a photograph shows."""

    model_config = ConfigDict(populate_by_name=True)

    title: str | None = None
    alternate_title: str | None = Field(default=None, alias="alternateTitle")
    type: MediaType | None = None
    confidence: Literal["high", "medium", "low", "none"] = "low"

    @field_validator("title", "alternate_title", mode="before")
    @classmethod
    def _blank_title(cls, value: object) -> object:
        if isinstance(value, str):
            return value.strip() or None
        return value

    @field_validator("type", mode="before")
    @classmethod
    def _drop_unknown_type(cls, value: object) -> object:
        if isinstance(value, str):
            lowered = value.strip().lower()
            if lowered in MEDIA_TYPES:
                return lowered
        return None

    @field_validator("confidence", mode="before")
    @classmethod
    def _normalise_confidence(cls, value: object) -> object:
        # Only an explicit "none" rejects an answer that names a title.
        if isinstance(value, str):
            lowered = value.strip().lower()
            if lowered in {"high", "medium", "low", "none"}:
                return lowered
        return "low"

    @property
    def identified(self) -> bool:
        return bool(self.title) and self.confidence != "none"

    def to_payload(self) -> dict[str, object]:
        """Return the wire representation of a successful identification."""

        return {
            "identified": True,
            "title": self.title,
            "alternateTitle": self.alternate_title,
            "type": self.type,
            "confidence": self.confidence,
        }
