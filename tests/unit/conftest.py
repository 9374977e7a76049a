"""Fixtures for unit tests."""

from pathlib import Path
from typing import Callable, Generator
from unittest.mock import MagicMock

import pytest
import structlog

from release_ops_manager.utils.exceptions import CommandError
from release_ops_manager.utils.shell import SubprocessCommandRunner

GitResponses = dict[tuple[str, ...], str | Exception]


@pytest.fixture(autouse=True)
def configure_structlog_for_caplog() -> Generator[None, None, None]:
    """Configure structlog for use with caplog."""
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )
    yield
    structlog.reset_defaults()


@pytest.fixture
def make_runner() -> Callable[[GitResponses], MagicMock]:
    """Build a mock command runner that answers known commands with canned output.

    Commands missing from the responses fail the way git does for an unknown
    revision, so tests notice unexpected calls.
    """

    def _make_runner(responses: GitResponses) -> MagicMock:
        runner = MagicMock(spec=SubprocessCommandRunner)

        def run_capturing_output(args: list[str], cwd: Path | None = None) -> str:
            response = responses.get(tuple(args))
            if response is None:
                raise CommandError(args, 128, f"fatal: unexpected command {' '.join(args)}")
            if isinstance(response, Exception):
                raise response
            return response

        runner.run_capturing_output.side_effect = run_capturing_output
        return runner

    return _make_runner
