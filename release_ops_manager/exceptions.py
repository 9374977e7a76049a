"""Base exception shared by every release-ops-manager error."""


class ReleaseOpsError(Exception):
    """Base class for errors raised while preparing a release."""

    pass
