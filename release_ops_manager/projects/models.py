"""Pydantic models for the projects managed by a release run."""

from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, model_validator

from release_ops_manager.projects.versions import is_version
from release_ops_manager.utils.constants import DEFAULT_GITHUB_ORG
from release_ops_manager.utils.github import default_repository_url


class Commit(BaseModel):
    """One line of `git log --oneline` output."""

    model_config = ConfigDict(frozen=True)

    hash: str | None = None
    branch_info: str | None = None
    message: str
    pr_number: str | None = None


class DependencyEdge(BaseModel):
    """A dependency declared in a project's manifest that is itself an organization project."""

    name: str
    repo_name: str = ""
    previous_release_version: str = ""
    new_version: str = ""

    @property
    def is_changed(self) -> bool:
        """The installed version differs from the one shipped with the previous release."""
        return self.previous_release_version != self.new_version

    @property
    def is_newly_added(self) -> bool:
        """The previous release did not depend on a released version of this package."""
        return not is_version(self.previous_release_version)


class Project(BaseModel):
    """A repository under management."""

    name: str
    npm_name: str = ""
    repository_url: str = ""
    dir: Path | None = None
    version: str = ""
    dependencies: list[DependencyEdge] = Field(default_factory=list)
    dev_dependencies: list[DependencyEdge] = Field(default_factory=list)
    last_tag: str = ""
    # A non-empty list means the project needs a release.
    changes: list[Commit] = Field(default_factory=list)

    @model_validator(mode="after")
    def _apply_defaults(self) -> "Project":
        if not self.npm_name:
            self.npm_name = self.name
        if not self.repository_url:
            self.repository_url = default_repository_url(DEFAULT_GITHUB_ORG, self.name)
        return self

    @property
    def all_dependencies(self) -> list[DependencyEdge]:
        """Dependencies followed by devDependencies, in declaration order."""
        return [*self.dependencies, *self.dev_dependencies]
