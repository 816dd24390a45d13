"""Repository-level integrity checks."""

from __future__ import annotations

import re
from pathlib import Path

from app.config import Settings

REPO_ROOT = Path(__file__).resolve().parents[1]
CONFLICT_PATTERN = re.compile(r"^(<<<<<<<|=======|>>>>>>>)", re.MULTILINE)
IGNORED_PARTS = {".git", "__pycache__", ".mypy_cache", ".pytest_cache", ".venv"}
CREDENTIAL_SUFFIXES = ("_API_KEY", "_TOKEN", "_DATABASE_ID")


def test_repository_has_no_merge_conflict_markers() -> None:
    offending_files: list[Path] = []

    for path in REPO_ROOT.rglob("*"):
        if not path.is_file() or any(part in IGNORED_PARTS for part in path.parts):
            continue
        contents = path.read_text(encoding="utf-8", errors="ignore")
        if CONFLICT_PATTERN.search(contents):
            offending_files.append(path.relative_to(REPO_ROOT))

    assert not offending_files, "Conflict markers found in: " + ", ".join(
        str(path) for path in offending_files
    )


def test_env_example_lists_every_credential() -> None:
    """Every credential the settings read should appear in ``.env.example``."""

    documented = {
        line.lstrip("# ").split("=", 1)[0]
        for line in (REPO_ROOT / ".env.example").read_text(encoding="utf-8").splitlines()
        if "=" in line
    }
    credentials = {
        field.alias
        for field in Settings.model_fields.values()
        if field.alias and field.alias.endswith(CREDENTIAL_SUFFIXES)
    }

    assert credentials
    assert credentials <= documented
