"""Models shared by the configuration layer and the GitHub client."""

from enum import Enum


class GitHubAuthenticationType(str, Enum):
    """Enum for GitHub authentication types."""

    PAT = "pat"
    APP = "app"
