"""Application settings read from the environment and an optional .env file."""

from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

from release_ops_manager.github.client import GitHubCredentials
from release_ops_manager.utils.constants import CHANGELOG_FILE_NAME, DEFAULT_GITHUB_ORG


class Settings(BaseSettings):
    """Environment variables understood by release-ops-manager."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    DEBUG: bool = False

    # Organization and changelog
    GITHUB_ORG: str = DEFAULT_GITHUB_ORG
    CHANGELOG_FILE_NAME: str = CHANGELOG_FILE_NAME

    # GitHub API, used only to discover the organization's projects
    GITHUB_API_URL: str = "https://api.github.com"
    GITHUB_PAT_TOKEN: str | None = None
    GITHUB_APP_ID: int | None = None
    GITHUB_APP_PRIVATE_KEY_PATH: Path | None = None
    GITHUB_APP_INSTALLATION_ID: int | None = None

    def github_credentials(self) -> GitHubCredentials:
        """Bundle the GitHub settings for the client factory."""
        return GitHubCredentials(
            api_url=self.GITHUB_API_URL,
            pat_token=self.GITHUB_PAT_TOKEN,
            app_id=self.GITHUB_APP_ID,
            app_private_key_path=self.GITHUB_APP_PRIVATE_KEY_PATH,
            app_installation_id=self.GITHUB_APP_INSTALLATION_ID,
        )


def get_settings() -> Settings:
    """Read the settings from the environment and the .env file."""
    return Settings()
