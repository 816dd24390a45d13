"""Media capture: search many catalogs at once and log what you find."""

from __future__ import annotations

from app.main import app, create_app
from app.models import Candidate
from app.services.aggregator import SearchService

__all__ = ["Candidate", "SearchService", "app", "create_app"]
