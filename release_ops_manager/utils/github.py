"""Contains utility functions for GitHub interactions."""

import re
from typing import Any

from release_ops_manager.utils.constants import DEFAULT_REPOSITORY_URL_TEMPLATE


def strip_owner_from_repository(repo: str) -> str:
    """Return the repository name from either 'name' or 'owner/name'."""
    repo = repo.strip().strip("/")
    if not repo:
        raise ValueError("Repository name must not be empty.")
    parts = repo.split("/")
    if len(parts) > 2 or not all(parts):
        raise ValueError("Repository must be in the format 'name' or 'owner/name' with no extra parts.")
    return parts[-1]


def default_repository_url(org: str, name: str) -> str:
    """Build the web URL of a repository in the organization."""
    return DEFAULT_REPOSITORY_URL_TEMPLATE.format(org=org, name=name)


def repository_url_from_manifest(repository: Any) -> str | None:
    """Turn the `repository` field of a package.json into a browsable https URL.

    Accepts both the string form and the ``{"type": "git", "url": ...}`` form.
    Returns None for anything that does not point at GitHub.

    Examples:
        "git+https://github.com/org/repo.git" -> "https://github.com/org/repo"
        "github:org/repo" -> "https://github.com/org/repo"
    """
    if isinstance(repository, dict):
        repository = repository.get("url")
    if not isinstance(repository, str) or not repository.strip():
        return None

    url = repository.strip()
    shorthand = re.fullmatch(r"(?:github:)?([\w.-]+)/([\w.-]+)", url)
    if shorthand:
        return f"https://github.com/{shorthand.group(1)}/{shorthand.group(2)}"

    match = re.search(r"github\.com[/:]([\w.-]+)/([\w.-]+?)(?:\.git)?/?$", url)
    if match is None:
        return None
    return f"https://github.com/{match.group(1)}/{match.group(2)}"
