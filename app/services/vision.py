"""Identify media in a photograph using Anthropic's vision-capable models."""

from __future__ import annotations

import logging
from typing import Any

import httpx
from pydantic import ValidationError

from ..config import Settings
from ..models import Identification
from ..utils import extract_json_object, split_data_url
from .base import ServiceNotConfiguredError, UpstreamError

logger = logging.getLogger(__name__)

ANTHROPIC_VERSION = "2023-06-01"

IDENTIFY_PROMPT = """Identify what media this image shows. This could be:
- A movie or TV show (scene, poster, trailer screenshot, DVD cover)
- An anime (scene, poster, artwork)
- A video game (gameplay, cover art, menu screen)
- A book (cover, page, e-reader screen)
- An audiobook (cover art, app screenshot)
- A podcast (artwork, app screenshot)
- A manga/comic (cover, page)

Respond with ONLY a JSON object in this exact format, no other text:
{
  "title": "The exact title of the media",
  "alternateTitle": "Japanese/romaji title if applicable, otherwise null",
  "type": "movie|tv|anime|game|book|audiobook|podcast|manga",
  "confidence": "high|medium|low"
}

If you cannot identify the media, respond with:
{
  "title": null,
  "alternateTitle": null,
  "type": null,
  "confidence": "none"
}

Title guidelines:
- For Japanese media (anime, manga, Japanese books/games): give the English title and put the romaji/Japanese title in alternateTitle
- For anime: use the most commonly known title (e.g. "Demon Slayer" with "Kimetsu no Yaiba")
- For manga: use the English title if widely known, otherwise use romaji
- For Japanese books: use the English translated title if it exists
- For TV shows: identify the show name, not the episode title
- For Western media: use the official English title"""


class VisionClient:
    """Client responsible for asking the vision model what an image shows."""

    def __init__(self, settings: Settings, http_client: httpx.AsyncClient):
        self._settings = settings
        self._client = http_client

    @property
    def configured(self) -> bool:
        return bool(self._settings.anthropic_api_key)

    async def identify(self, image: str) -> Identification:
        """Return the model's identification of ``image``.

        ``image`` is either raw base64 or a ``data:`` URL. An unreadable model
        answer yields an unidentified result rather than an error.
        """

        if not self.configured:
            raise ServiceNotConfiguredError("Anthropic API key not configured")

        mime_type, data = split_data_url(image)
        payload = {
            "model": self._settings.anthropic_model,
            "max_tokens": 500,
            "messages": [
                {
                    "role": "user",
                    "content": [
                        {
                            "type": "image",
                            "source": {
                                "type": "base64",
                                "media_type": mime_type,
                                "data": data,
                            },
                        },
                        {"type": "text", "text": IDENTIFY_PROMPT},
                    ],
                }
            ],
        }
        headers = {
            "x-api-key": self._settings.anthropic_api_key or "",
            "anthropic-version": ANTHROPIC_VERSION,
        }
        try:
            response = await self._client.post("/messages", json=payload, headers=headers)
        except httpx.HTTPError as exc:
            raise UpstreamError(f"Image analysis request failed: {exc}") from exc
        if response.status_code >= 400:
            raise UpstreamError(self._error_message(response))

        try:
            body = response.json()
        except ValueError as exc:
            raise UpstreamError("Image analysis returned non-JSON response") from exc

        text = self._first_text(body)
        try:
            parsed = extract_json_object(text)
        except ValueError:
            logger.warning("Vision model answer had no JSON object: %s", text[:200])
            return Identification()
        try:
            return Identification.model_validate(parsed)
        except ValidationError as exc:
            logger.warning("Vision model answer did not validate: %s", exc.errors())
            return Identification()

    @staticmethod
    def _first_text(body: Any) -> str:
        if not isinstance(body, dict):
            return ""
        for block in body.get("content") or []:
            if isinstance(block, dict) and isinstance(block.get("text"), str):
                return block["text"]
        return ""

    @staticmethod
    def _error_message(response: httpx.Response) -> str:
        try:
            body = response.json()
        except ValueError:
            return "Failed to analyse image"
        error = body.get("error") if isinstance(body, dict) else None
        if isinstance(error, dict) and error.get("message"):
            return str(error["message"])
        return "Failed to analyse image"
