"""githubkit-backed access to the repositories of the organization being released."""

import base64
from functools import wraps
from typing import Any, Awaitable, Callable, Self, TypeVar

import structlog
from githubkit.exception import RequestFailed
from githubkit.versions.latest.models import MinimalRepository

from release_ops_manager.configuration.models import GitHubAuthenticationType
from release_ops_manager.utils.retry import retry_on_rate_limit

from .abc import GitHubClientBase
from .client import GitHubClient, GitHubCredentials, connect

logger = structlog.get_logger(__name__)

AsyncCallable = TypeVar("AsyncCallable", bound=Callable[..., Awaitable[Any]])

MAX_PAGE_SIZE = 100


def not_found_as_file_error(func: AsyncCallable) -> AsyncCallable:
    """Report a GitHub 404 as FileNotFoundError so callers can treat it as an absent file."""

    @wraps(func)
    async def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return await func(*args, **kwargs)
        except RequestFailed as e:
            if e.response.status_code != 404:
                raise
            url = getattr(e.response, "url", None)
            logger.debug("GitHub resource not found", operation=func.__name__, url=url)
            raise FileNotFoundError(f"GitHub 404 error in {func.__name__} | url: {url}") from e

    return wrapper  # type: ignore


class GitHubKitAdapter(GitHubClientBase):
    """Reads organization repositories and their files through githubkit."""

    def __init__(self, client: GitHubClient, owner: str, repo_name: str | None = None) -> None:
        """Wrap an authenticated client.

        Args:
            client: Authenticated githubkit client
            owner: Organization owning the repositories
            repo_name: Repository used by calls that do not name one
        """
        self.client = client
        self.owner = owner
        self.repo_name = repo_name

    @classmethod
    async def create(cls, org: str, github_auth_type: GitHubAuthenticationType, credentials: GitHubCredentials) -> Self:
        """Connect to GitHub and return an adapter scoped to the organization."""
        logger.info("Connecting to GitHub", github_api_url=credentials.api_url, org=org, auth_type=github_auth_type.value)
        client = await connect(org, github_auth_type, credentials)
        return cls(client, org)

    async def list_organization_repositories(self, org_name: str, per_page: int = MAX_PAGE_SIZE, **kwargs: Any) -> list[MinimalRepository]:
        """Return every repository of the organization, following pagination.

        Extra keyword arguments go to the list endpoint, e.g. ``type="public"``.
        A page shorter than ``per_page`` is the last one.
        """

        @retry_on_rate_limit()
        async def fetch_page(page: int) -> list[MinimalRepository]:
            response = await self.client.rest.repos.async_list_for_org(org=org_name, per_page=per_page, page=page, **kwargs)
            return response.parsed_data

        logger.info("Listing organization repositories", org=org_name, filters=kwargs)
        repositories: list[MinimalRepository] = []
        page = 1
        while True:
            batch = await fetch_page(page)
            repositories.extend(batch)
            logger.debug("Fetched repository page", org=org_name, page=page, count=len(batch))
            if len(batch) < per_page:
                break
            page += 1

        logger.info("Listed organization repositories", org=org_name, total=len(repositories))
        return repositories

    @not_found_as_file_error
    @retry_on_rate_limit()
    async def get_file_content(self, file_path: str, ref: str | None = None, repo_name: str | None = None) -> str:
        """Return the decoded content of a file, from the default branch unless a ref is given."""
        repo = repo_name or self.repo_name
        if repo is None:
            raise ValueError("A repository name is required to fetch file content.")
        params: dict[str, Any] = {"owner": self.owner, "repo": repo, "path": file_path}
        if ref is not None:
            params["ref"] = ref
        response = await self.client.rest.repos.async_get_content(**params)
        content = getattr(response.parsed_data, "content", None)
        if content is None:
            raise ValueError(f"{file_path} in {self.owner}/{repo} is not a file")
        return base64.b64decode(content).decode("utf-8")
