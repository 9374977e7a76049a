"""Shared constants used across the application."""

import re

# Changelog Constants
# -------------------

CHANGELOG_FILE_NAME = "CHANGELOG.md"
"""Name of the changelog file at the root of every project working copy."""

CHANGELOG_MARKER = "this project adheres to [Semantic Versioning](https://semver.org/spec/v2.0.0.html)."
"""Trailing clause of the Keep a Changelog attribution. New entries are inserted right after it."""

CHANGELOG_HEADER = (
    "# Changelog\n"
    "All notable changes to this project will be documented in this file.\n"
    "\n"
    "The format is based on [Keep a Changelog](https://keepachangelog.com/en/1.0.0/),\n"
    "and this project adheres to [Semantic Versioning](https://semver.org/spec/v2.0.0.html)."
)
"""Standard header written to new, empty or repaired changelog files."""

DEFAULT_EOL = "\r\n"
"""End-of-line sequence used when a changelog contains no line break yet."""

RELEASE_HEADER_SPACING = 4
"""Number of blank lines emitted before every release heading."""

# Regex Patterns
LOG_LINE_PATTERN = re.compile(r"\s*([a-z0-9]+)\s*(?:\((.*?)\))?\s*(.*?)\s*(?:\(#(\d+)\))?$")
"""Pattern to split a `git log --oneline` line into hash, decoration, subject and PR number."""

EOL_PATTERN = re.compile(r"\r?\n")
"""Pattern to detect the end-of-line sequence used by a file."""

CHANGELOG_NOISE_PREFIX = "update changelog for "
"""Commits whose subject starts with this (case-insensitive) were made by the release tooling itself."""

# Git Settings
HEAD_REF = "HEAD"
"""Sentinel end reference meaning the tip of the current branch."""

# GitHub Organization Settings
# ----------------------------

DEFAULT_GITHUB_ORG = "rokucommunity"
"""Organization whose repositories are managed when none is configured."""

DEFAULT_REPOSITORY_URL_TEMPLATE = "https://github.com/{org}/{name}"
"""Repository URL used for projects that do not declare one."""

PACKAGE_MANIFEST = "package.json"
"""Name of the npm manifest read from every project."""
