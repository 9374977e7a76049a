"""Markdown manipulation for CHANGELOG.md files."""

from pathlib import Path

import structlog

from release_ops_manager.utils.constants import CHANGELOG_HEADER, CHANGELOG_MARKER, DEFAULT_EOL, EOL_PATTERN

logger = structlog.get_logger(__name__)


def detect_eol(content: str) -> str:
    """Return the first line break sequence used in the content, CRLF if there is none."""
    match = EOL_PATTERN.search(content)
    return match.group(0) if match else DEFAULT_EOL


class ChangelogWriter:
    """Inserts new release entries into a Keep a Changelog file."""

    def __init__(self, header: str = CHANGELOG_HEADER, marker: str = CHANGELOG_MARKER) -> None:
        """Initialize with the standard header and the marker that new entries follow."""
        self.header = header
        self.marker = marker

    def insert_entry(self, existing_content: str, new_lines: list[str]) -> str:
        """Insert the new lines directly after the marker, restoring the header if needed."""
        content = existing_content
        if content == "":
            logger.info("Changelog is empty, adding header")
            content = self.header

        eol = detect_eol(content)
        if self.marker not in content:
            logger.warning("Could not find marker in changelog, adding header to top")
            content = self.header + eol + content

        insert_at = content.find(self.marker) + len(self.marker)
        return content[:insert_at] + eol.join(new_lines) + content[insert_at:]

    def merge_into(self, changelog_path: Path, new_lines: list[str]) -> None:
        """Merge the new lines into the changelog file, creating it if it does not exist.

        The file is rewritten in one go and its existing line endings are kept.
        """
        if changelog_path.exists():
            with open(changelog_path, encoding="utf-8", newline="") as f:
                existing_content = f.read()
        else:
            logger.info("No changelog file found, creating one", path=str(changelog_path))
            existing_content = ""

        updated = self.insert_entry(existing_content, new_lines)

        changelog_path.parent.mkdir(parents=True, exist_ok=True)
        with open(changelog_path, "w", encoding="utf-8", newline="") as f:
            f.write(updated)
        logger.info("Updated changelog", path=str(changelog_path), lines=len(new_lines))
