"""Maps commit subjects to changelog sections by keyword prefix."""

from release_ops_manager.changelog.models import ChangelogSection

KEYWORDS_BY_SECTION: list[tuple[ChangelogSection, tuple[str, ...]]] = [
    (ChangelogSection.ADDED, ("add", "adds", "added", "new", "create", "creates", "created")),
    (ChangelogSection.CHANGED, ("change", "changes", "changed", "update", "updates", "updated")),
    (ChangelogSection.DEPRECATED, ("deprecate", "deprecates", "deprecated")),
    (ChangelogSection.FIXED, ("fix", "fixes", "fixed", "resolve", "resolves", "resolved")),
    (ChangelogSection.REMOVED, ("remove", "removes", "removed", "delete", "deletes", "deleted")),
    (ChangelogSection.CHORE, ("chore", "(chore)")),
]


def classify_commit_message(message: str) -> ChangelogSection | None:
    """Return the section for a commit subject, or None if no keyword matches.

    Matching is a case-insensitive prefix match, not a whole-word match:
    "addendum to docs" is filed under Added. Sections and keywords are tried
    in declaration order and the first match wins.
    """
    lower_message = message.lower()
    for section, keywords in KEYWORDS_BY_SECTION:
        for keyword in keywords:
            if lower_message.startswith(keyword):
                return section
    return None
