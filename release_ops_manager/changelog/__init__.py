"""Changelog generation module."""

from .classifier import classify_commit_message
from .commits import CommitLogReader, GitCommitLogReader
from .generator import ChangelogGenerator
from .markdown import ChangelogWriter
from .models import ChangelogResult, ChangelogSection, ChangelogStatus

__all__ = [
    "ChangelogSection",
    "ChangelogStatus",
    "ChangelogResult",
    "CommitLogReader",
    "GitCommitLogReader",
    "ChangelogWriter",
    "ChangelogGenerator",
    "classify_commit_message",
]
