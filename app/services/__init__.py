"""Catalog adapters and collaborators used by the search service."""
