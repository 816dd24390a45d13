"""Shared plumbing for catalog adapters."""

from __future__ import annotations

import logging
import math
from typing import Any, Callable, ClassVar, Iterable

import httpx
from pydantic import ValidationError

from ..config import Settings
from ..models import Candidate

logger = logging.getLogger(__name__)


class ServiceNotConfiguredError(RuntimeError):
    """Raised when a collaborator needed for an operation has no credentials."""


class UpstreamError(RuntimeError):
    """Raised when an upstream API required by an operation fails."""


class CatalogAdapter:
    """Base class for adapters wrapping a single external media catalog.

    ``search`` never raises: transport errors, error statuses and malformed
    payloads are logged and turned into an empty result list so one catalog
    can never take down an aggregated search.
    """

    key: ClassVar[str] = ""
    name: ClassVar[str] = ""

    def __init__(self, settings: Settings, http_client: httpx.AsyncClient):
        self._settings = settings
        self._client = http_client

    @property
    def limit(self) -> int:
        return self._settings.source_result_limit

    @property
    def configured(self) -> bool:
        """Whether the adapter has the credentials it needs."""

        return True

    async def search(self, query: str, variant: str | None = None) -> list[Candidate]:
        raise NotImplementedError

    async def _get_json(
        self, path: str, *, params: dict[str, Any] | None = None
    ) -> Any | None:
        """GET ``path`` and return the decoded body, or ``None`` on any failure."""

        try:
            response = await self._client.get(path, params=params)
        except httpx.HTTPError as exc:
            logger.warning("%s request to %s failed: %s", self.name, path, exc)
            return None
        if response.status_code >= 400:
            logger.warning(
                "%s request to %s returned %s: %s",
                self.name,
                path,
                response.status_code,
                response.text[:200],
            )
            return None
        try:
            return response.json()
        except ValueError:
            logger.warning("Unexpected non-JSON %s response from %s", self.name, path)
            return None

    def _build_candidates(
        self,
        items: Iterable[Any],
        builder: Callable[[Any], Candidate | None],
    ) -> list[Candidate]:
        """Map raw items through ``builder``, skipping any that cannot validate."""

        candidates: list[Candidate] = []
        for item in items:
            if len(candidates) >= self.limit:
                break
            try:
                candidate = builder(item)
            except ValidationError as exc:
                logger.debug(
                    "Skipping malformed %s item: %s", self.name, exc.errors()
                )
                continue
            if candidate is not None:
                candidates.append(candidate)
        return candidates


def as_dict(value: Any) -> dict[str, Any]:
    """Return ``value`` if it is a mapping, otherwise an empty dict."""

    return value if isinstance(value, dict) else {}


def as_list(value: Any) -> list[Any]:
    """Return ``value`` if it is a list, otherwise an empty list."""

    return value if isinstance(value, list) else []


def dict_items(value: Any) -> list[dict[str, Any]]:
    """Return the dict entries of ``value`` when it is a list."""

    return [item for item in as_list(value) if isinstance(item, dict)]


def names_of(entries: Any, key: str = "name") -> list[str]:
    """Collect the ``key`` strings from a list of dicts."""

    names: list[str] = []
    for entry in as_list(entries):
        value = as_dict(entry).get(key)
        if isinstance(value, str) and value:
            names.append(value)
    return names


def safe_number(value: Any, default: float = 0.0) -> float:
    """Coerce ``value`` to a non-negative float."""

    if isinstance(value, bool):
        return default
    try:
        number = float(value)
    except (TypeError, ValueError):
        return default
    if math.isnan(number) or number < 0:
        return default
    return number
