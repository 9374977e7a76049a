"""Unit tests for reading and parsing git commit logs."""

from pathlib import Path
from typing import Callable
from unittest.mock import MagicMock

import pytest

from release_ops_manager.changelog.commits import (
    GitCommitLogReader,
    is_noise_commit,
    normalize_end_ref,
    normalize_start_ref,
    parse_log_line,
    parse_log_output,
)
from release_ops_manager.changelog.exceptions import CommitLogError
from release_ops_manager.projects.exceptions import ProjectNotLoadedError, UnknownProjectError
from release_ops_manager.projects.models import Commit, Project
from release_ops_manager.projects.registry import ProjectRegistry
from release_ops_manager.utils.exceptions import CommandError

TAG_LOG_ARGS = ("git", "log", "--tags", "--simplify-by-decoration", "--pretty=format:%ci %d")

TAG_LOG_OUTPUT = "\n".join(
    [
        "2024-05-02 09:15:00 -0400  (HEAD -> master, origin/master)",
        "2024-04-30 10:00:00 -0400  (tag: v1.1.0)",
        "2024-03-01 08:30:00 -0400  (tag: v1.10.0, origin/release)",
        "2023-12-24 12:00:00 +0100  (tag: v1.0.0)",
    ]
)


def make_reader(tmp_path: Path, runner: MagicMock) -> GitCommitLogReader:
    """Build a reader for a registry holding one loaded project and one without a working copy."""
    registry = ProjectRegistry(runner)
    registry.register(Project(name="test", dir=tmp_path))
    registry.register(Project(name="remote-only"))
    return GitCommitLogReader(registry, runner)


@pytest.mark.parametrize(
    "value,expected",
    [
        pytest.param("1.0.0", "v1.0.0", id="bare version"),
        pytest.param("v1.0.0", "v1.0.0", id="tag"),
        pytest.param("abc1234", "abc1234", id="commit hash"),
    ],
)
def test_normalize_start_ref(value: str, expected: str) -> None:
    """Test that only bare versions receive a v prefix at the start of a range."""
    assert normalize_start_ref(value) == expected


@pytest.mark.parametrize(
    "value,expected",
    [
        pytest.param("HEAD", "HEAD", id="head"),
        pytest.param("1.1.0", "v1.1.0", id="bare version"),
        pytest.param("v1.1.0", "v1.1.0", id="tag"),
    ],
)
def test_normalize_end_ref(value: str, expected: str) -> None:
    """Test that the end of a range is a tag unless it is HEAD."""
    assert normalize_end_ref(value) == expected


def test_parse_log_line_with_decoration_and_pr() -> None:
    """Test that the hash, decoration and PR number are split out of the subject."""
    commit = parse_log_line("abc1234 (HEAD -> master, tag: v1.0.0) fixed a bug (#12)")
    assert commit == Commit(hash="abc1234", branch_info="HEAD -> master, tag: v1.0.0", message="fixed a bug", pr_number="12")


def test_parse_log_line_plain() -> None:
    """Test that a plain line yields only a hash and a message."""
    commit = parse_log_line("abc1234 added a feature")
    assert commit == Commit(hash="abc1234", message="added a feature")


def test_parse_log_line_keeps_inner_parentheses() -> None:
    """Test that parentheses which are not a trailing PR reference stay in the message."""
    commit = parse_log_line("abc1234 fixed crash in parse() for empty files")
    assert commit.message == "fixed crash in parse() for empty files"
    assert commit.pr_number is None


@pytest.mark.parametrize(
    "message,expected",
    [
        pytest.param("1.2.3", True, id="version bump"),
        pytest.param("v2.0.0-beta.1", True, id="prerelease bump"),
        pytest.param("Update changelog for v1.0.0", True, id="changelog commit"),
        pytest.param("updated the changelog template", False, id="ordinary commit"),
    ],
)
def test_is_noise_commit(message: str, expected: bool) -> None:
    """Test which commit subjects are treated as release tooling noise."""
    assert is_noise_commit(Commit(hash="abc1234", message=message)) is expected


def test_parse_log_output_drops_blank_lines_and_noise() -> None:
    """Test that blank lines, version bumps and changelog commits are removed."""
    output = "\n".join(
        [
            "aaa1111 1.0.1",
            "",
            "bbb2222 Update changelog for v1.0.1",
            "ccc3333 fixed a bug (#4)",
            "   ",
            "ddd4444 added a feature",
        ]
    )
    commits = parse_log_output(output)
    assert [commit.hash for commit in commits] == ["ccc3333", "ddd4444"]


def test_get_commits_runs_first_parent_log(tmp_path: Path, make_runner: Callable[..., MagicMock]) -> None:
    """Test that the log is read for the normalized range in the project's working copy."""
    args = ("git", "log", "v1.0.0...HEAD", "--oneline", "--first-parent")
    runner = make_runner({args: "ccc3333 fixed a bug (#4)\nddd4444 added a feature"})
    reader = make_reader(tmp_path, runner)

    commits = reader.get_commits("test", "1.0.0", "HEAD")

    assert [commit.message for commit in commits] == ["fixed a bug", "added a feature"]
    runner.run_capturing_output.assert_called_once_with(list(args), cwd=tmp_path)


def test_get_commits_from_commit_hash(tmp_path: Path, make_runner: Callable[..., MagicMock]) -> None:
    """Test that a range starting at a commit hash is passed through unchanged."""
    args = ("git", "log", "abc1234...v1.1.0", "--oneline", "--first-parent")
    runner = make_runner({args: ""})
    reader = make_reader(tmp_path, runner)

    assert reader.get_commits("test", "abc1234", "1.1.0") == []


def test_get_commits_failure_raises_commit_log_error(tmp_path: Path, make_runner: Callable[..., MagicMock]) -> None:
    """Test that a git failure is reported as CommitLogError with the failing range."""
    args = ("git", "log", "v9.9.9...HEAD", "--oneline", "--first-parent")
    runner = make_runner({args: CommandError(list(args), 128, "fatal: ambiguous argument 'v9.9.9...HEAD'")})
    reader = make_reader(tmp_path, runner)

    with pytest.raises(CommitLogError, match="v9.9.9...HEAD") as exc_info:
        reader.get_commits("test", "9.9.9", "HEAD")

    assert exc_info.value.project_name == "test"
    assert isinstance(exc_info.value.__cause__, CommandError)


def test_get_commits_unknown_project(tmp_path: Path, make_runner: Callable[..., MagicMock]) -> None:
    """Test that querying an unregistered project raises UnknownProjectError."""
    reader = make_reader(tmp_path, make_runner({}))

    with pytest.raises(UnknownProjectError):
        reader.get_commits("missing", "1.0.0", "HEAD")


def test_get_commits_project_without_working_copy(tmp_path: Path, make_runner: Callable[..., MagicMock]) -> None:
    """Test that querying a project without a directory raises ProjectNotLoadedError."""
    reader = make_reader(tmp_path, make_runner({}))

    with pytest.raises(ProjectNotLoadedError):
        reader.get_commits("remote-only", "1.0.0", "HEAD")


@pytest.mark.parametrize(
    "version,expected",
    [
        pytest.param("1.1.0", "2024-04-30", id="exact tag"),
        pytest.param("v1.10.0", "2024-03-01", id="tag followed by other refs"),
        pytest.param("1.0.0", "2023-12-24", id="oldest tag"),
        pytest.param("1.0", None, id="tag prefix only"),
        pytest.param("2.0.0", None, id="missing tag"),
    ],
)
def test_get_version_date(tmp_path: Path, make_runner: Callable[..., MagicMock], version: str, expected: str | None) -> None:
    """Test that the date of exactly the requested tag is found."""
    reader = make_reader(tmp_path, make_runner({TAG_LOG_ARGS: TAG_LOG_OUTPUT}))
    assert reader.get_version_date("test", version) == expected
