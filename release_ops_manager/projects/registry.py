"""Registry of the organization projects taking part in a release run.

A registry is created once per run, populated (from local working copies and
optionally from the GitHub organization), and then handed to the changelog
generator, which only reads from it.
"""

import json
from pathlib import Path
from typing import Any

import structlog

from release_ops_manager.projects.exceptions import ManifestError, ProjectNotLoadedError, UnknownProjectError
from release_ops_manager.projects.models import DependencyEdge, Project
from release_ops_manager.projects.versions import is_version, previous_release_tag, strip_range_prefix, with_tag_prefix
from release_ops_manager.utils.constants import DEFAULT_GITHUB_ORG, HEAD_REF, PACKAGE_MANIFEST
from release_ops_manager.utils.exceptions import CommandError
from release_ops_manager.utils.github import default_repository_url, repository_url_from_manifest
from release_ops_manager.utils.shell import CommandRunner

logger = structlog.get_logger(__name__)

DEPENDENCY_KINDS = ("dependencies", "devDependencies")


def read_manifest(directory: Path) -> dict[str, Any]:
    """Read and parse the package.json at the root of a working copy."""
    manifest_path = directory / PACKAGE_MANIFEST
    if not manifest_path.exists():
        raise ManifestError(f"No {PACKAGE_MANIFEST} found in {directory}")
    try:
        manifest = json.loads(manifest_path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise ManifestError(f"Failed to parse {manifest_path}: {e}") from e
    if not isinstance(manifest, dict):
        raise ManifestError(f"{manifest_path} does not contain a JSON object")
    return manifest


class ProjectRegistry:
    """Holds every known project, keyed by its unique repository name."""

    def __init__(self, runner: CommandRunner, org: str = DEFAULT_GITHUB_ORG) -> None:
        """Initialize an empty registry.

        Args:
            runner: Command runner used for the git queries made while loading projects
            org: GitHub organization used to build default repository URLs
        """
        self.runner = runner
        self.org = org
        self._projects: dict[str, Project] = {}

    @property
    def projects(self) -> list[Project]:
        """All registered projects in registration order."""
        return list(self._projects.values())

    def register(self, project: Project) -> Project:
        """Add a project to the registry. Names must be unique."""
        if project.name in self._projects:
            raise ValueError(f"Project {project.name} is already registered")
        self._projects[project.name] = project
        logger.debug("Registered project", project=project.name, npm_name=project.npm_name)
        return project

    def get_project(self, name: str) -> Project | None:
        """Look up a project by name."""
        return self._projects.get(name)

    def require_project(self, name: str) -> Project:
        """Look up a project by name, raising UnknownProjectError if it is not registered."""
        project = self.get_project(name)
        if project is None:
            raise UnknownProjectError(name)
        return project

    def find_by_npm_name(self, npm_name: str) -> Project | None:
        """Look up the project publishing the given npm package."""
        for project in self._projects.values():
            if project.npm_name == npm_name:
                return project
        return None

    def load_project(self, directory: Path, name: str | None = None) -> Project:
        """Attach a local working copy to a project, registering the project if needed.

        Reads the version from package.json and resolves the last release tag.
        When no name is given, the project publishing the manifest's package is
        used if it is already registered, otherwise the directory name.
        """
        directory = directory.resolve()
        manifest = read_manifest(directory)
        npm_name = manifest.get("name") or ""

        project = None
        if name is not None:
            project = self.get_project(name)
        elif npm_name:
            project = self.find_by_npm_name(npm_name)
        if project is None:
            project_name = name or directory.name
            project = self.get_project(project_name)
        if project is None:
            project = self.register(
                Project(
                    name=project_name,
                    npm_name=npm_name,
                    repository_url=repository_url_from_manifest(manifest.get("repository")) or default_repository_url(self.org, project_name),
                )
            )

        project.dir = directory
        project.version = manifest.get("version") or ""
        project.last_tag = self._resolve_last_tag(project)
        logger.info("Loaded project", project=project.name, version=project.version, last_tag=project.last_tag, dir=str(directory))
        return project

    def first_commit(self, project: Project) -> str:
        """Return the hash of the root commit of the project's history."""
        output = self.runner.run_capturing_output(["git", "rev-list", "--max-parents=0", HEAD_REF], cwd=self._require_dir(project))
        return output.splitlines()[0].strip() if output else ""

    def _resolve_last_tag(self, project: Project) -> str:
        output = self.runner.run_capturing_output(["git", "tag", "--merged", HEAD_REF], cwd=self._require_dir(project))
        last_tag = previous_release_tag(project.version, output.splitlines())
        if last_tag is None:
            logger.info("No release tags found, using the first commit", project=project.name)
            last_tag = self.first_commit(project)
        return last_tag

    def _require_dir(self, project: Project) -> Path:
        if project.dir is None:
            raise ProjectNotLoadedError(project.name)
        return project.dir

    def _manifest_at_ref(self, project: Project, ref: str) -> dict[str, Any] | None:
        try:
            output = self.runner.run_capturing_output(["git", "show", f"{ref}:{PACKAGE_MANIFEST}"], cwd=self._require_dir(project))
        except CommandError as e:
            logger.info("No manifest at previous release", project=project.name, ref=ref, error=str(e))
            return None
        try:
            manifest = json.loads(output)
        except json.JSONDecodeError:
            logger.warning("Manifest at previous release is not valid JSON", project=project.name, ref=ref)
            return None
        return manifest if isinstance(manifest, dict) else None

    def _installed_version(self, project: Project, package_name: str) -> str | None:
        installed_manifest = self._require_dir(project) / "node_modules" / package_name / PACKAGE_MANIFEST
        if not installed_manifest.exists():
            return None
        try:
            return json.loads(installed_manifest.read_text(encoding="utf-8")).get("version")
        except json.JSONDecodeError:
            logger.warning("Installed manifest is not valid JSON", path=str(installed_manifest))
            return None

    def resolve_dependencies(self, project: Project) -> list[DependencyEdge]:
        """Build the project's dependency edges on other registered projects.

        The previous release version comes from the manifest committed at the
        last release tag (or the first commit when there was no release). The
        new version is the installed one from node_modules when present, else
        the version currently declared in package.json.

        Returns:
            Every resolved edge, dependencies first then devDependencies
        """
        manifest = read_manifest(self._require_dir(project))
        release_ref = with_tag_prefix(project.last_tag) if is_version(project.last_tag) else project.last_tag
        previous_manifest = self._manifest_at_ref(project, release_ref) if release_ref else None

        logger.info("Resolving dependencies", project=project.name, release_ref=release_ref)
        for kind, edges in (("dependencies", project.dependencies), ("devDependencies", project.dev_dependencies)):
            edges.clear()
            for package_name, declared in (manifest.get(kind) or {}).items():
                dependency_project = self.find_by_npm_name(package_name)
                if dependency_project is None:
                    continue

                previous = ""
                if previous_manifest is not None:
                    for previous_kind in DEPENDENCY_KINDS:
                        previous_declared = (previous_manifest.get(previous_kind) or {}).get(package_name)
                        if previous_declared:
                            previous = strip_range_prefix(previous_declared)
                            break

                new_version = self._installed_version(project, package_name) or strip_range_prefix(str(declared))
                edge = DependencyEdge(
                    name=package_name,
                    repo_name=dependency_project.name,
                    previous_release_version=previous,
                    new_version=new_version,
                )
                edges.append(edge)
                if edge.is_changed:
                    logger.info(
                        "Dependency version changed since last release",
                        project=project.name,
                        dependency=package_name,
                        kind=kind,
                        previous_release_version=previous,
                        new_version=new_version,
                    )

        return project.all_dependencies
