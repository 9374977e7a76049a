"""Builds the changelog entry for a release from a project's and its dependencies' history.

The generator only reads the registry and the commit log. It writes exactly
one file, the project's CHANGELOG.md, and only once the whole entry has been
computed.
"""

from datetime import date
from typing import Callable

import structlog

from release_ops_manager.changelog.classifier import classify_commit_message
from release_ops_manager.changelog.commits import CommitLogReader
from release_ops_manager.changelog.markdown import ChangelogWriter
from release_ops_manager.changelog.models import RENDERED_SECTIONS, ChangelogResult, ChangelogSection, ChangelogStatus
from release_ops_manager.projects.exceptions import InvalidDependencyVersionError, ProjectNotLoadedError
from release_ops_manager.projects.models import Commit, DependencyEdge, Project
from release_ops_manager.projects.registry import ProjectRegistry
from release_ops_manager.projects.versions import is_greater, is_version
from release_ops_manager.utils.constants import CHANGELOG_FILE_NAME, HEAD_REF, RELEASE_HEADER_SPACING

logger = structlog.get_logger(__name__)

NESTED_ENTRY_INDENT = "     "


def format_reflink(project: Project, commit: Commit, include_project_name: bool = False) -> str:
    """Render a markdown link to the pull request, or to the commit when there is no PR."""
    name_prefix = f"{project.name}#" if include_project_name else ""
    if commit.pr_number:
        label = f"{project.name}#{commit.pr_number}" if include_project_name else f"#{commit.pr_number}"
        return f"[{label}]({project.repository_url}/pull/{commit.pr_number})"
    return f"[{name_prefix}{commit.hash}]({project.repository_url}/commit/{commit.hash})"


def changelog_anchor(version: str, release_date: str | None) -> str:
    """Anchor of a release heading in a rendered changelog (``1.2.3`` on 2024-05-01 -> ``123---2024-05-01``)."""
    return f"{version.replace('.', '')}---{release_date or ''}"


class ChangelogGenerator:
    """Computes and writes changelog entries for projects in a registry."""

    def __init__(
        self,
        registry: ProjectRegistry,
        commit_reader: CommitLogReader,
        writer: ChangelogWriter | None = None,
        changelog_file_name: str = CHANGELOG_FILE_NAME,
        today: Callable[[], date] = date.today,
    ) -> None:
        """Initialize the generator.

        Args:
            registry: Populated registry of the projects taking part in the release
            commit_reader: Source of commit history for any registered project
            writer: Writer used to merge the entry into the changelog file
            changelog_file_name: Name of the changelog file in the project's working copy
            today: Returns the date stamped on the release heading
        """
        self.registry = registry
        self.commit_reader = commit_reader
        self.writer = writer or ChangelogWriter()
        self.changelog_file_name = changelog_file_name
        self.today = today
        self._commit_cache: dict[tuple[str, str, str], list[Commit]] = {}

    def _commits(self, project_name: str, start: str, end: str) -> list[Commit]:
        """Commits of a range, read from git at most once per computed release."""
        key = (project_name, start, end)
        if key not in self._commit_cache:
            self._commit_cache[key] = self.commit_reader.get_commits(project_name, start, end)
        return self._commit_cache[key]

    def _check_dependency_version(self, project: Project, dependency: DependencyEdge) -> None:
        if not is_version(dependency.new_version):
            raise InvalidDependencyVersionError(project.name, dependency.name, dependency.new_version)

    def compute_changes(self, project: Project) -> list[Commit]:
        """Collect the project's own commits and the commits of every upgraded or downgraded dependency.

        Newly added dependencies contribute no commits: their previous version
        is not a release that a commit range could start from.
        """
        self._commit_cache.clear()
        project.changes.clear()
        project.changes.extend(self._commits(project.name, project.last_tag, HEAD_REF))
        for dependency in project.all_dependencies:
            if dependency.is_changed and not dependency.is_newly_added:
                self._check_dependency_version(project, dependency)
                project.changes.extend(self._commits(dependency.repo_name, dependency.previous_release_version, dependency.new_version))
        return project.changes

    def has_changes(self, project: Project) -> bool:
        """Whether anything happened since the last release that is worth releasing."""
        return bool(project.changes) or any(dependency.is_changed for dependency in project.all_dependencies)

    def _dependency_lines(self, project: Project, dependency: DependencyEdge) -> tuple[ChangelogSection, list[str]]:
        dependency_project = self.registry.require_project(dependency.repo_name)
        if dependency.is_newly_added:
            return ChangelogSection.ADDED, [f" - added [{dependency.name}@{dependency.new_version}]({dependency_project.repository_url})"]

        self._check_dependency_version(project, dependency)

        release_date = self.commit_reader.get_version_date(dependency.repo_name, dependency.new_version)
        changelog_link = (
            f"{dependency_project.repository_url}/blob/master/CHANGELOG.md#{changelog_anchor(dependency.new_version, release_date)}"
        )

        if is_greater(dependency.new_version, dependency.previous_release_version):
            lines = [
                f" - upgrade to [{dependency.name}@{dependency.new_version}]({changelog_link}). "
                f"Notable changes since {dependency.previous_release_version}:"
            ]
            for commit in self._commits(dependency.repo_name, dependency.previous_release_version, dependency.new_version):
                lines.append(f"{NESTED_ENTRY_INDENT}- {commit.message} ({format_reflink(dependency_project, commit, include_project_name=True)})")
            return ChangelogSection.CHANGED, lines

        return ChangelogSection.CHANGED, [
            f" - downgrade from {dependency.previous_release_version} to [{dependency.name}@{dependency.new_version}]({changelog_link})."
        ]

    def assemble(self, project: Project, release_version: str) -> list[str]:
        """Render the changelog entry for a release as a list of lines.

        The entry starts with blank separator lines and the release heading,
        followed by one ``### <Section>`` block per non-empty section.
        """
        release_date = self.today().strftime("%Y-%m-%d")
        lines = [""] * RELEASE_HEADER_SPACING
        lines.append(f"## [{release_version}]({project.repository_url}/compare/{project.last_tag}...v{release_version}) - {release_date}")

        sections: dict[ChangelogSection, list[str]] = {section: [] for section in RENDERED_SECTIONS}

        for commit in self._commits(project.name, project.last_tag, HEAD_REF):
            section = classify_commit_message(commit.message) or ChangelogSection.CHANGED
            if section == ChangelogSection.CHORE:
                continue
            sections[section].append(f" - {commit.message} ({format_reflink(project, commit)})")

        for dependency in project.all_dependencies:
            if not dependency.is_changed:
                continue
            section, dependency_lines = self._dependency_lines(project, dependency)
            sections[section].extend(dependency_lines)

        for section in RENDERED_SECTIONS:
            if sections[section]:
                lines.append(f"### {section.value}")
                lines.extend(sections[section])

        return lines

    def update_change_log(self, project_name: str, release_version: str, dry_run: bool = False) -> ChangelogResult:
        """Compute the changes since the last release and merge a new entry into CHANGELOG.md.

        Args:
            project_name: Name of a registered, loaded project
            release_version: Version being released, without a ``v`` prefix
            dry_run: Render the entry without touching the file

        Returns:
            Result describing whether the changelog was updated

        Raises:
            UnknownProjectError: If the project or one of its dependencies is not registered
            ProjectNotLoadedError: If the project has no working copy
            CommitLogError: If a commit log cannot be read
            InvalidDependencyVersionError: If a changed dependency did not resolve to a released version
        """
        logger.info("Updating changelog", project=project_name, release_version=release_version)
        project = self.registry.require_project(project_name)
        if project.dir is None:
            raise ProjectNotLoadedError(project_name)

        logger.info("Last release", project=project_name, last_tag=project.last_tag)
        self.compute_changes(project)

        if not self.has_changes(project):
            logger.info("Nothing has changed since last release", project=project_name)
            return ChangelogResult(status=ChangelogStatus.NO_CHANGES, project=project_name, version=release_version)

        lines = self.assemble(project, release_version)
        logger.debug("Rendered changelog entry", project=project_name, entry="\n".join(lines))

        changelog_path = project.dir / self.changelog_file_name
        if dry_run:
            logger.info("Dry run mode - not writing changelog", path=str(changelog_path))
            return ChangelogResult(
                status=ChangelogStatus.DRY_RUN, project=project_name, version=release_version, changelog_path=changelog_path, lines=lines
            )

        self.writer.merge_into(changelog_path, lines)
        return ChangelogResult(status=ChangelogStatus.UPDATED, project=project_name, version=release_version, changelog_path=changelog_path, lines=lines)
