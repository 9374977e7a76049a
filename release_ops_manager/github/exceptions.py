"""Contains exceptions raised while talking to GitHub."""

from release_ops_manager.exceptions import ReleaseOpsError


class GitHubConnectionError(ReleaseOpsError):
    """Raised when an authenticated connection to the organization cannot be established."""

    pass
