"""Utility modules for shared functionality."""

from .constants import (
    CHANGELOG_FILE_NAME,
    CHANGELOG_HEADER,
    CHANGELOG_MARKER,
    LOG_LINE_PATTERN,
)
from .retry import retry_on_rate_limit
from .shell import CommandRunner, SubprocessCommandRunner

__all__ = [
    "CHANGELOG_FILE_NAME",
    "CHANGELOG_HEADER",
    "CHANGELOG_MARKER",
    "LOG_LINE_PATTERN",
    "CommandRunner",
    "SubprocessCommandRunner",
    "retry_on_rate_limit",
]
