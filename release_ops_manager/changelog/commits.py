"""Reads commit history for a version range from a project's git working copy."""

import re
from typing import Protocol

import structlog

from release_ops_manager.changelog.exceptions import CommitLogError
from release_ops_manager.projects.exceptions import ProjectNotLoadedError
from release_ops_manager.projects.models import Commit, Project
from release_ops_manager.projects.registry import ProjectRegistry
from release_ops_manager.projects.versions import is_version, with_tag_prefix
from release_ops_manager.utils.constants import CHANGELOG_NOISE_PREFIX, HEAD_REF, LOG_LINE_PATTERN
from release_ops_manager.utils.exceptions import CommandError
from release_ops_manager.utils.shell import CommandRunner

logger = structlog.get_logger(__name__)


class CommitLogReader(Protocol):
    """Protocol for anything that can list the commits between two refs of a project."""

    def get_commits(self, project_name: str, start_version: str, end_version: str) -> list[Commit]:
        """Return the commits in ``start_version...end_version``, newest first."""
        ...

    def get_version_date(self, project_name: str, version: str) -> str | None:
        """Return the YYYY-MM-DD date of the commit tagged ``v<version>``, if any."""
        ...


def normalize_start_ref(start_version: str) -> str:
    """Prefix a bare version with ``v``; leave hashes and tags untouched."""
    if is_version(start_version) and not start_version.startswith("v"):
        return f"v{start_version}"
    return start_version


def normalize_end_ref(end_version: str) -> str:
    """Prefix the end of a range with ``v`` unless it already has it or is HEAD."""
    if end_version.startswith("v") or end_version == HEAD_REF:
        return end_version
    return f"v{end_version}"


def parse_log_line(line: str) -> Commit:
    """Split one ``git log --oneline`` line into a Commit.

    A trailing ``(#123)`` becomes the PR number and is removed from the
    message. Lines the pattern cannot split are kept whole as the message.
    """
    match = LOG_LINE_PATTERN.search(line)
    if match is None:
        return Commit(message=line)
    commit_hash, branch_info, message, pr_number = match.groups()
    return Commit(
        hash=commit_hash,
        branch_info=branch_info or None,
        message=line if message is None else message,
        pr_number=pr_number,
    )


def is_noise_commit(commit: Commit) -> bool:
    """Version bump commits and the tooling's own changelog commits are not changes."""
    if is_version(commit.message):
        return True
    return commit.message.lower().startswith(CHANGELOG_NOISE_PREFIX)


def parse_log_output(output: str) -> list[Commit]:
    """Turn the output of ``git log --oneline`` into commits, dropping blank lines and noise."""
    commits = [parse_log_line(line) for line in output.splitlines() if line.strip()]
    return [commit for commit in commits if not is_noise_commit(commit)]


class GitCommitLogReader:
    """Commit log reader that queries git in each project's working copy."""

    def __init__(self, registry: ProjectRegistry, runner: CommandRunner) -> None:
        """Initialize with the registry used to find working copies and the runner used to call git."""
        self.registry = registry
        self.runner = runner

    def _working_copy(self, project_name: str) -> Project:
        project = self.registry.require_project(project_name)
        if project.dir is None:
            raise ProjectNotLoadedError(project_name)
        return project

    def get_commits(self, project_name: str, start_version: str, end_version: str) -> list[Commit]:
        """Return the first-parent commits in ``start_version...end_version``.

        Raises:
            UnknownProjectError: If the project is not registered
            ProjectNotLoadedError: If the project has no working copy
            CommitLogError: If git cannot resolve the range
        """
        project = self._working_copy(project_name)
        start_ref = normalize_start_ref(start_version)
        end_ref = normalize_end_ref(end_version)

        try:
            output = self.runner.run_capturing_output(
                ["git", "log", f"{start_ref}...{end_ref}", "--oneline", "--first-parent"],
                cwd=project.dir,
            )
        except CommandError as e:
            raise CommitLogError(project_name, start_ref, end_ref, str(e)) from e

        commits = parse_log_output(output)
        logger.debug("Read commit log", project=project_name, start_ref=start_ref, end_ref=end_ref, commits=len(commits))
        return commits

    def get_version_date(self, project_name: str, version: str) -> str | None:
        """Find the date of the release tag for a version in the tag-decorated log."""
        project = self._working_copy(project_name)
        tag = with_tag_prefix(version)
        try:
            output = self.runner.run_capturing_output(
                ["git", "log", "--tags", "--simplify-by-decoration", "--pretty=format:%ci %d"],
                cwd=project.dir,
            )
        except CommandError as e:
            raise CommitLogError(project_name, tag, "tags", str(e)) from e

        pattern = re.compile(rf"(\d+-\d+-\d+).*?tag:[ \t]*{re.escape(tag)}(?=[,)\s]|$)", re.IGNORECASE | re.MULTILINE)
        match = pattern.search(output)
        if match is None:
            logger.warning("Release date not found for tag", project=project_name, tag=tag)
            return None
        return match.group(1)
