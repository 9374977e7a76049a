"""Interface the project discovery code needs from a GitHub client."""

from abc import ABC, abstractmethod
from typing import Any


class GitHubClientBase(ABC):
    """Read-only view of an organization's repositories."""

    @abstractmethod
    async def list_organization_repositories(self, org_name: str, per_page: int = 100, **kwargs: Any) -> list[Any]:
        """List every repository of an organization."""
        pass

    @abstractmethod
    async def get_file_content(self, file_path: str, ref: str | None = None, repo_name: str | None = None) -> str:
        """Return the decoded content of a file; raise FileNotFoundError if it does not exist."""
        pass
