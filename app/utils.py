"""Utility helpers for the media capture service."""

from __future__ import annotations

import json
import re
from typing import Any


JSON_BLOCK_RE = re.compile(r"```(?:json)?\s*(\{.*?\})\s*```", re.DOTALL)
BARE_JSON_RE = re.compile(r"\{.*\}", re.DOTALL)
YEAR_RE = re.compile(r"^\d{4}")
LEADING_ARTICLE_RE = re.compile(r"^(the|a|an)\s+", re.IGNORECASE)
DATA_URL_RE = re.compile(r"^data:([^;]+);base64,(.+)$", re.DOTALL)


def extract_json_object(content: str) -> dict[str, Any]:
    """Extract and parse the first JSON object from the model response."""

    match = JSON_BLOCK_RE.search(content)
    if match:
        payload = match.group(1)
    else:
        match = BARE_JSON_RE.search(content)
        if not match:
            raise ValueError("No JSON object found in response")
        payload = match.group(0)

    try:
        return json.loads(payload)
    except json.JSONDecodeError as exc:
        raise ValueError("Invalid JSON payload produced by the model") from exc


def extract_year(value: Any) -> str:
    """Return the leading four-digit year of a date-ish value, or ``""``."""

    if isinstance(value, int) and not isinstance(value, bool):
        value = str(value)
    if not isinstance(value, str):
        return ""
    match = YEAR_RE.match(value.strip())
    return match.group(0) if match else ""


def upgrade_to_https(url: Any) -> str | None:
    """Return ``url`` with an ``http://`` scheme rewritten to ``https://``."""

    if not isinstance(url, str):
        return None
    url = url.strip()
    if not url:
        return None
    if url.startswith("http://"):
        return "https://" + url[len("http://") :]
    return url


def strip_leading_article(query: str) -> str:
    """Drop a leading English article (The, A, An) from ``query``."""

    return LEADING_ARTICLE_RE.sub("", query, count=1)


def split_data_url(image: str) -> tuple[str, str]:
    """Split an image payload into ``(mime_type, base64_data)``.

    Plain base64 strings are assumed to be JPEG.
    """

    match = DATA_URL_RE.match(image)
    if match:
        return match.group(1), match.group(2)
    return "image/jpeg", image
