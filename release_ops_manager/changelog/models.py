"""Data models for changelog generation."""

from enum import Enum
from pathlib import Path

from pydantic import BaseModel, Field


class ChangelogSection(str, Enum):
    """Sections of a Keep a Changelog entry, in declaration order."""

    ADDED = "Added"
    CHANGED = "Changed"
    DEPRECATED = "Deprecated"
    FIXED = "Fixed"
    REMOVED = "Removed"
    CHORE = "Chore"


RENDERED_SECTIONS: tuple[ChangelogSection, ...] = tuple(ChangelogSection)
"""Sections in the order they are rendered. Chore entries are never collected."""


class ChangelogStatus(str, Enum):
    """Outcome of a changelog update."""

    UPDATED = "updated"
    NO_CHANGES = "no_changes"
    DRY_RUN = "dry_run"


class ChangelogResult(BaseModel):
    """Result of updating a project's changelog."""

    status: ChangelogStatus
    project: str
    version: str
    changelog_path: Path | None = None
    lines: list[str] = Field(default_factory=list)
