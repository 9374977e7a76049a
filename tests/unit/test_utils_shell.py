"""Unit tests for the subprocess-backed command runner."""

import subprocess
from pathlib import Path
from unittest.mock import MagicMock

import pytest
from pytest import MonkeyPatch

from release_ops_manager.utils import shell
from release_ops_manager.utils.exceptions import CommandError
from release_ops_manager.utils.shell import SubprocessCommandRunner


@pytest.fixture
def run_mock(monkeypatch: MonkeyPatch) -> MagicMock:
    """Replace subprocess.run in the shell module."""
    mock = MagicMock(return_value=subprocess.CompletedProcess(args=[], returncode=0, stdout="  v1.0.0\nv1.1.0\n", stderr=""))
    monkeypatch.setattr(shell.subprocess, "run", mock)
    return mock


def test_run_capturing_output_strips_stdout(run_mock: MagicMock, tmp_path: Path) -> None:
    """Test that captured output is returned without surrounding whitespace."""
    output = SubprocessCommandRunner().run_capturing_output(["git", "tag", "--merged", "HEAD"], cwd=tmp_path)

    assert output == "v1.0.0\nv1.1.0"
    run_mock.assert_called_once_with(["git", "tag", "--merged", "HEAD"], cwd=tmp_path, capture_output=True, text=True, check=True)


@pytest.mark.parametrize(
    "stream_output,expected_capture",
    [
        pytest.param(False, True, id="captured"),
        pytest.param(True, False, id="streamed"),
    ],
)
def test_run_streams_only_when_requested(run_mock: MagicMock, stream_output: bool, expected_capture: bool) -> None:
    """Test that run captures output unless the runner streams it."""
    SubprocessCommandRunner(stream_output=stream_output).run(["git", "fetch"])

    assert run_mock.call_args.kwargs["capture_output"] is expected_capture


def test_non_zero_exit_raises_command_error(run_mock: MagicMock) -> None:
    """Test that a failing command raises CommandError carrying its status and stderr."""
    run_mock.side_effect = subprocess.CalledProcessError(128, ["git", "show"], output="", stderr="fatal: bad revision\n")

    with pytest.raises(CommandError) as exc_info:
        SubprocessCommandRunner().run_capturing_output(["git", "show", "v9.9.9:package.json"])

    assert exc_info.value.returncode == 128
    assert exc_info.value.command == ["git", "show", "v9.9.9:package.json"]
    assert str(exc_info.value) == "Command exited with status 128: git show v9.9.9:package.json | stderr: fatal: bad revision"


def test_missing_executable_raises_command_error(run_mock: MagicMock) -> None:
    """Test that a command that cannot be started raises CommandError without a status."""
    run_mock.side_effect = FileNotFoundError(2, "No such file or directory", "git")

    with pytest.raises(CommandError, match="Command could not be started: git status") as exc_info:
        SubprocessCommandRunner().run(["git", "status"])

    assert exc_info.value.returncode is None


def test_run_checked_reports_failure(run_mock: MagicMock) -> None:
    """Test that run_checked returns a boolean instead of raising."""
    assert SubprocessCommandRunner().run_checked(["git", "rev-parse", "HEAD"]) is True

    run_mock.side_effect = subprocess.CalledProcessError(1, ["git"], stderr="")
    assert SubprocessCommandRunner().run_checked(["git", "rev-parse", "HEAD"]) is False
