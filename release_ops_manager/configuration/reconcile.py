"""Reconcile configuration given on the command line with the environment."""

from pathlib import Path

from release_ops_manager.configuration.exceptions import (
    GitHubAuthenticationConfigurationUndefinedError,
    ReleaseVersionConfigurationError,
)
from release_ops_manager.configuration.models import GitHubAuthenticationType
from release_ops_manager.projects.versions import ReleaseType, increment_version, is_version


async def validate_github_authentication_configuration(
    github_pat_token: str | None,
    github_app_id: int | None,
    github_app_private_key_path: Path | None,
    github_app_installation_id: int | None,
) -> GitHubAuthenticationType:
    """Validates the GitHub authentication configuration.

    Args:
        github_pat_token (str | None): The GitHub PAT token.
        github_app_id (int | None): The GitHub App ID.
        github_app_private_key_path (Path | None): The path to the GitHub App private key.
        github_app_installation_id (int | None): The GitHub App installation ID.

    Raises:
        GitHubAuthenticationConfigurationUndefinedError: If both or neither of the PAT and App configurations are defined,
            or if the App configuration is incomplete.

    Returns:
        GitHubAuthenticationType: The type of GitHub authentication used.
    """
    app_settings = {
        "GitHub App ID": (github_app_id, "github_app_id", "GITHUB_APP_ID"),
        "GitHub App private key path": (github_app_private_key_path, "github_app_private_key_path", "GITHUB_APP_PRIVATE_KEY_PATH"),
        "GitHub App installation ID": (github_app_installation_id, "github_app_installation_id", "GITHUB_APP_INSTALLATION_ID"),
    }
    any_app_setting = any(value for value, _, _ in app_settings.values())

    if github_pat_token and any_app_setting:
        raise GitHubAuthenticationConfigurationUndefinedError("Both PAT and GitHub App configurations are defined. Please use one or the other.")

    if github_pat_token:
        return GitHubAuthenticationType.PAT

    if not any_app_setting:
        raise GitHubAuthenticationConfigurationUndefinedError(
            "No GitHub authentication configuration provided. Please provide either a PAT or a GitHub App configuration."
        )

    missing = [
        f"{name} (command line option {cli_name}, environment variable {env_name})"
        for name, (value, cli_name, env_name) in app_settings.items()
        if not value
    ]
    if missing:
        raise GitHubAuthenticationConfigurationUndefinedError("Incomplete GitHub App configuration - missing settings include " + ", ".join(missing))
    return GitHubAuthenticationType.APP


def reconcile_release_version(current_version: str, release_version: str | None, release_type: ReleaseType | None) -> str:
    """Pick the version being released from an explicit version or a release type.

    Args:
        current_version: Version currently declared in the project's package.json
        release_version: Explicit version requested by the user, may include prerelease ids
        release_type: Kind of increment to apply to the current version

    Raises:
        ReleaseVersionConfigurationError: If neither or both options are given, or the version is not semver.

    Returns:
        The release version without a ``v`` prefix.
    """
    if release_version and release_type:
        raise ReleaseVersionConfigurationError("Provide either a release version or a release type, not both.")
    if release_version:
        if not is_version(release_version):
            raise ReleaseVersionConfigurationError(f"Release version {release_version!r} is not a valid semantic version.")
        return release_version.lstrip("v")
    if release_type:
        if not is_version(current_version):
            raise ReleaseVersionConfigurationError(f"Current version {current_version!r} is not a valid semantic version and cannot be incremented.")
        return increment_version(current_version, release_type)
    raise ReleaseVersionConfigurationError("A release version or a release type is required.")
