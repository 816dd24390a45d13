"""Write captured media into the Notion tracking database."""

from __future__ import annotations

import logging
from datetime import date
from typing import Any

import httpx

from ..config import Settings
from ..models import Candidate
from ..taxonomy import (
    NOTION_DEFAULT_STATUS,
    NOTION_MEDIA_TYPES,
    NOTION_OVERVIEW_LIMIT,
    NOTION_PLATFORMS,
)
from .base import ServiceNotConfiguredError, UpstreamError

logger = logging.getLogger(__name__)


class NotionClient:
    """Sink that turns a candidate into a page in the tracking database."""

    def __init__(self, settings: Settings, http_client: httpx.AsyncClient):
        self._settings = settings
        self._client = http_client

    @property
    def configured(self) -> bool:
        return bool(self._settings.notion_token and self._settings.notion_database_id)

    async def add(self, candidate: Candidate) -> dict[str, Any]:
        """Create a page for ``candidate`` and return Notion's page payload."""

        if not self.configured:
            raise ServiceNotConfiguredError("Notion credentials not configured")

        payload = {
            "parent": {"database_id": self._settings.notion_database_id},
            "properties": self.build_properties(candidate),
        }
        headers = {
            "Authorization": f"Bearer {self._settings.notion_token}",
            "Notion-Version": self._settings.notion_version,
        }
        try:
            response = await self._client.post("/pages", json=payload, headers=headers)
        except httpx.HTTPError as exc:
            raise UpstreamError(f"Notion request failed: {exc}") from exc
        try:
            data = response.json()
        except ValueError:
            data = {}
        if response.status_code >= 400:
            logger.error("Notion API error (%s): %s", response.status_code, data)
            message = data.get("message") if isinstance(data, dict) else None
            raise UpstreamError(message or "Failed to add to Notion")
        if not isinstance(data, dict):
            raise UpstreamError("Unexpected Notion response")
        return data

    @staticmethod
    def build_properties(
        candidate: Candidate, *, added_on: date | None = None
    ) -> dict[str, Any]:
        """Map a candidate onto the database's property schema."""

        properties: dict[str, Any] = {
            "Title": {"title": [{"text": {"content": candidate.title}}]},
            "Media Type": {
                "select": {"name": NOTION_MEDIA_TYPES.get(candidate.media_type, "Other")}
            },
            "Status": {"status": {"name": NOTION_DEFAULT_STATUS}},
            "Date Added": {"date": {"start": (added_on or date.today()).isoformat()}},
        }
        if candidate.overview:
            overview = candidate.overview[:NOTION_OVERVIEW_LIMIT]
            properties["Notes"] = {"rich_text": [{"text": {"content": overview}}]}
        if candidate.external_url:
            properties["URL"] = {"url": candidate.external_url}
        if candidate.image_url:
            properties["Cover Image"] = {"url": candidate.image_url}
        if candidate.platform and candidate.platform in NOTION_PLATFORMS:
            properties["Platform/Service"] = {
                "select": {"name": NOTION_PLATFORMS[candidate.platform]}
            }
        if candidate.genres:
            properties["Genre"] = {
                "multi_select": [{"name": genre} for genre in candidate.genres]
            }
        return properties
