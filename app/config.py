"""Application configuration models."""

from __future__ import annotations

from functools import lru_cache
from typing import Annotated, Iterable, Literal

from pydantic import Field, HttpUrl, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

from .taxonomy import SOURCE_KEYS


DEFAULT_AUTO_SOURCES: tuple[str, ...] = ("screen", "book", "game", "anime", "podcast")


class Settings(BaseSettings):
    """Settings loaded from environment variables or a .env file."""

    app_name: str = Field(default="Media Capture", alias="APP_NAME")
    server_host: str = Field(default="0.0.0.0", alias="HOST")
    server_port: int = Field(default=3000, alias="PORT")

    tmdb_api_key: str | None = Field(default=None, alias="TMDB_API_KEY")
    google_books_api_key: str | None = Field(
        default=None, alias="GOOGLE_BOOKS_API_KEY"
    )
    rawg_api_key: str | None = Field(default=None, alias="RAWG_API_KEY")
    notion_token: str | None = Field(default=None, alias="NOTION_TOKEN")
    notion_database_id: str | None = Field(default=None, alias="NOTION_DATABASE_ID")
    anthropic_api_key: str | None = Field(default=None, alias="ANTHROPIC_API_KEY")
    anthropic_model: str = Field(
        default="claude-sonnet-4-20250514", alias="ANTHROPIC_MODEL"
    )
    notion_version: str = Field(default="2022-06-28", alias="NOTION_VERSION")

    tmdb_api_url: HttpUrl = Field(
        default="https://api.themoviedb.org/3", alias="TMDB_API_URL"
    )
    google_books_api_url: HttpUrl = Field(
        default="https://www.googleapis.com/books/v1", alias="GOOGLE_BOOKS_API_URL"
    )
    rawg_api_url: HttpUrl = Field(
        default="https://api.rawg.io/api", alias="RAWG_API_URL"
    )
    jikan_api_url: HttpUrl = Field(
        default="https://api.jikan.moe/v4", alias="JIKAN_API_URL"
    )
    itunes_api_url: HttpUrl = Field(
        default="https://itunes.apple.com", alias="ITUNES_API_URL"
    )
    notion_api_url: HttpUrl = Field(
        default="https://api.notion.com/v1", alias="NOTION_API_URL"
    )
    anthropic_api_url: HttpUrl = Field(
        default="https://api.anthropic.com/v1", alias="ANTHROPIC_API_URL"
    )

    tmdb_watch_region: str = Field(
        default="GB", alias="TMDB_WATCH_REGION", min_length=2, max_length=2
    )
    itunes_country: str = Field(
        default="gb", alias="ITUNES_COUNTRY", min_length=2, max_length=2
    )

    source_result_limit: int = Field(
        default=5, alias="SOURCE_RESULT_LIMIT", ge=1, le=20
    )
    result_limit: int = Field(default=10, alias="RESULT_LIMIT", ge=1, le=50)
    auto_sources: Annotated[tuple[str, ...], NoDecode] = Field(
        default=DEFAULT_AUTO_SOURCES, alias="AUTO_SOURCES"
    )
    search_deadline_seconds: float | None = Field(
        default=None, alias="SEARCH_DEADLINE_SECONDS", gt=0
    )
    http_timeout_seconds: float = Field(
        default=15.0, alias="HTTP_TIMEOUT_SECONDS", gt=0, le=120
    )

    environment: Literal["development", "production"] = Field(
        default="development", alias="ENVIRONMENT"
    )

    @field_validator("auto_sources", mode="before")
    @classmethod
    def _parse_auto_sources(cls, value: object) -> tuple[str, ...]:
        """Normalise auto-mode source selections from environment values."""

        if value is None:
            return DEFAULT_AUTO_SOURCES
        if isinstance(value, str):
            raw_values = [part.strip() for part in value.split(",")]
        elif isinstance(value, Iterable):
            raw_values = [str(part).strip() for part in value]
        else:
            raise TypeError("AUTO_SOURCES must be a string or iterable of strings")

        cleaned: list[str] = []
        for entry in raw_values:
            key = entry.lower()
            if not key:
                continue
            if key not in SOURCE_KEYS:
                raise ValueError("Unknown auto sources configured")
            if key not in cleaned:
                cleaned.append(key)
        if not cleaned:
            return DEFAULT_AUTO_SOURCES
        return tuple(cleaned)

    @field_validator("tmdb_watch_region", mode="after")
    @classmethod
    def _upper_region(cls, value: str) -> str:
        return value.upper()

    @field_validator("itunes_country", mode="after")
    @classmethod
    def _lower_country(cls, value: str) -> str:
        return value.lower()

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")


@lru_cache
def get_settings() -> Settings:
    """Return a cached settings instance."""

    return Settings()  # type: ignore[call-arg]


settings = get_settings()
