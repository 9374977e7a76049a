"""Custom exceptions for the changelog module."""

from release_ops_manager.exceptions import ReleaseOpsError


class CommitLogError(ReleaseOpsError):
    """Raised when the commit log for a version range cannot be read."""

    def __init__(self, project_name: str, start_ref: str, end_ref: str, reason: str) -> None:
        """Initializes the exception with the project and the range that failed."""
        super().__init__(f"Failed to read commit log for {project_name} ({start_ref}...{end_ref}): {reason}")
        self.project_name = project_name
        self.start_ref = start_ref
        self.end_ref = end_ref
