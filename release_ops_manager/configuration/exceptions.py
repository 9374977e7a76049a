"""Contains exceptions raised when reconciling application configuration."""

from release_ops_manager.exceptions import ReleaseOpsError


class GitHubAuthenticationConfigurationUndefinedError(ReleaseOpsError):
    """Raised when the GitHub authentication configuration is undefined or ambiguous."""

    pass


class ReleaseVersionConfigurationError(ReleaseOpsError):
    """Raised when neither or both of an explicit release version and a release type are given."""

    pass
