"""Connects githubkit to the organization whose projects are being released."""

from pathlib import Path
from typing import TypeAlias

import structlog
from githubkit import GitHub
from githubkit.auth import AppAuthStrategy, AppInstallationAuthStrategy, TokenAuthStrategy
from pydantic import BaseModel

from release_ops_manager.configuration.exceptions import GitHubAuthenticationConfigurationUndefinedError
from release_ops_manager.configuration.models import GitHubAuthenticationType
from release_ops_manager.github.exceptions import GitHubConnectionError

logger = structlog.get_logger(__name__)

GitHubClient: TypeAlias = GitHub[AppInstallationAuthStrategy] | GitHub[TokenAuthStrategy]


class GitHubCredentials(BaseModel):
    """API endpoint plus either a personal access token or a GitHub App identity."""

    api_url: str = "https://api.github.com"
    pat_token: str | None = None
    app_id: int | None = None
    app_private_key_path: Path | None = None
    app_installation_id: int | None = None

    @property
    def has_complete_app(self) -> bool:
        """Whether every setting needed to act as the GitHub App is present."""
        return bool(self.app_id and self.app_private_key_path and self.app_installation_id)


async def connect_with_token(credentials: GitHubCredentials) -> GitHub[TokenAuthStrategy]:
    """Client authenticated with a personal access token."""
    if not credentials.pat_token:
        raise GitHubAuthenticationConfigurationUndefinedError("PAT authentication selected but GITHUB_PAT_TOKEN is not set.")
    return GitHub(auth=TokenAuthStrategy(credentials.pat_token), base_url=credentials.api_url, http_cache=False)


async def connect_as_org_installation(org: str, credentials: GitHubCredentials) -> GitHub[AppInstallationAuthStrategy]:
    """Client authenticated as the GitHub App's installation on the organization.

    The installation is looked up from the organization itself. A configured
    installation ID that points elsewhere is reported but not used.
    """
    if not credentials.has_complete_app or credentials.app_private_key_path is None:
        raise GitHubAuthenticationConfigurationUndefinedError(
            "GitHub App authentication selected but GITHUB_APP_ID, GITHUB_APP_PRIVATE_KEY_PATH and GITHUB_APP_INSTALLATION_ID are not all set."
        )

    try:
        private_key = credentials.app_private_key_path.read_text(encoding="utf-8")
        app_client = GitHub(
            auth=AppAuthStrategy(app_id=credentials.app_id, private_key=private_key),
            base_url=credentials.api_url,
            http_cache=False,
        )
        response = await app_client.rest.apps.async_get_org_installation(org=org)
    except Exception as e:
        raise GitHubConnectionError(f"Failed to get GitHub App installation for organization {org}: {e}") from e

    installation_id = response.parsed_data.id
    if installation_id != credentials.app_installation_id:
        logger.warning(
            "Configured installation ID differs from the organization's installation",
            org=org,
            configured=credentials.app_installation_id,
            actual=installation_id,
        )
    return app_client.with_auth(app_client.auth.as_installation(installation_id))


async def connect(org: str, github_auth_type: GitHubAuthenticationType, credentials: GitHubCredentials) -> GitHubClient:
    """Return a client for the organization using the selected kind of credentials.

    Works against GitHub Enterprise Server when ``credentials.api_url`` points at it.
    """
    if github_auth_type == GitHubAuthenticationType.APP:
        return await connect_as_org_installation(org, credentials)
    if github_auth_type == GitHubAuthenticationType.PAT:
        return await connect_with_token(credentials)
    raise GitHubAuthenticationConfigurationUndefinedError(f"Unsupported GitHub authentication type: {github_auth_type}")
