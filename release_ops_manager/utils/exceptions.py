"""Contains exceptions raised by the shell utilities."""

from release_ops_manager.exceptions import ReleaseOpsError


class CommandError(ReleaseOpsError):
    """Raised when an external command cannot be run or exits with a non-zero status."""

    def __init__(self, command: list[str], returncode: int | None, stderr: str | None = None) -> None:
        """Initializes the exception with the failed command and its result."""
        rendered = " ".join(command)
        if returncode is None:
            message = f"Command could not be started: {rendered}"
        else:
            message = f"Command exited with status {returncode}: {rendered}"
        if stderr:
            message += f" | stderr: {stderr.strip()}"
        super().__init__(message)
        self.command = command
        self.returncode = returncode
        self.stderr = stderr
