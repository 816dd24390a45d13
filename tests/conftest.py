"""Pytest configuration and test helpers."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Any, Callable

import httpx
import pytest


# Ensure the application package is importable when running tests without an
# editable install. This mirrors the expected runtime layout where ``app`` sits
# at the project root.
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from app.config import Settings  # noqa: E402


@pytest.fixture
def anyio_backend() -> str:
    """Force AnyIO tests to run on asyncio without requiring trio."""

    return "asyncio"


def build_settings(**overrides: Any) -> Settings:
    """Return a settings object with every catalog key filled in."""

    base: dict[str, Any] = {
        "TMDB_API_KEY": "tmdb-key",
        "GOOGLE_BOOKS_API_KEY": "books-key",
        "RAWG_API_KEY": "rawg-key",
    }
    base.update(overrides)
    return Settings(_env_file=None, **base)  # type: ignore[arg-type]


def mock_client(
    handler: Callable[[httpx.Request], httpx.Response],
    base_url: str = "https://api.example.com",
) -> httpx.AsyncClient:
    """Return an AsyncClient whose requests are answered by ``handler``."""

    return httpx.AsyncClient(transport=httpx.MockTransport(handler), base_url=base_url)
