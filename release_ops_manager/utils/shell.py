"""Runs external commands such as git on behalf of the release tooling.

The changelog core never calls ``subprocess`` itself. It receives a
``CommandRunner`` so tests can substitute a fake that returns canned output.
"""

import subprocess
from pathlib import Path
from typing import Protocol

import structlog

from release_ops_manager.utils.exceptions import CommandError

logger = structlog.get_logger(__name__)


class CommandRunner(Protocol):
    """Protocol for running external commands in a working directory."""

    def run(self, args: list[str], cwd: Path | None = None) -> None:
        """Run a command, discarding its output. Raises CommandError on failure."""
        ...

    def run_capturing_output(self, args: list[str], cwd: Path | None = None) -> str:
        """Run a command and return its stripped stdout. Raises CommandError on failure."""
        ...

    def run_checked(self, args: list[str], cwd: Path | None = None) -> bool:
        """Run a command and report whether it succeeded instead of raising."""
        ...


class SubprocessCommandRunner:
    """Command runner backed by ``subprocess.run``."""

    def __init__(self, stream_output: bool = False) -> None:
        """Initialize the runner.

        Args:
            stream_output: When True, output of ``run`` goes straight to the terminal
                instead of being captured and discarded.
        """
        self.stream_output = stream_output

    def _execute(self, args: list[str], cwd: Path | None, capture: bool) -> subprocess.CompletedProcess[str]:
        logger.debug("Executing command", command=" ".join(args), cwd=str(cwd) if cwd else None)
        try:
            return subprocess.run(
                args,
                cwd=cwd,
                capture_output=capture,
                text=True,
                check=True,
            )
        except FileNotFoundError as e:
            raise CommandError(args, None, str(e)) from e
        except subprocess.CalledProcessError as e:
            raise CommandError(args, e.returncode, e.stderr) from e

    def run(self, args: list[str], cwd: Path | None = None) -> None:
        """Run a command, discarding its output unless streaming is enabled."""
        self._execute(args, cwd, capture=not self.stream_output)

    def run_capturing_output(self, args: list[str], cwd: Path | None = None) -> str:
        """Run a command and return its stripped stdout."""
        result = self._execute(args, cwd, capture=True)
        return result.stdout.strip()

    def run_checked(self, args: list[str], cwd: Path | None = None) -> bool:
        """Run a command and return True if it exited successfully."""
        try:
            self._execute(args, cwd, capture=True)
        except CommandError as e:
            logger.debug("Command did not succeed", command=" ".join(args), error=str(e))
            return False
        return True
