"""Semantic version helpers used to compare dependency versions and pick release tags.

Version strings follow npm conventions: a leading ``v`` or ``=`` is tolerated
when validating, and manifest ranges such as ``^1.2.3`` are reduced to the
bare version before comparison.
"""

from enum import Enum
from typing import Iterable

import semver
import structlog

from release_ops_manager.projects.exceptions import InvalidVersionError

logger = structlog.get_logger(__name__)


class ReleaseType(str, Enum):
    """Kinds of version increment supported for a new release."""

    MAJOR = "major"
    MINOR = "minor"
    PATCH = "patch"
    PRERELEASE = "prerelease"


def _clean(value: str) -> str:
    value = value.strip()
    if value[:1] in ("v", "="):
        value = value[1:]
    return value


def is_version(value: str | None) -> bool:
    """Return True if the value is a valid semantic version (``v`` prefix allowed)."""
    if not value:
        return False
    return semver.Version.is_valid(_clean(value))


def parse_version(value: str) -> semver.Version:
    """Parse a version string, raising InvalidVersionError if it is not semver."""
    if not is_version(value):
        raise InvalidVersionError(value)
    return semver.Version.parse(_clean(value))


def compare_versions(left: str, right: str) -> int:
    """Compare two versions by semver precedence, returning -1, 0 or 1."""
    return parse_version(left).compare(parse_version(right))


def is_greater(left: str, right: str) -> bool:
    """Return True if ``left`` has higher precedence than ``right``."""
    return compare_versions(left, right) > 0


def is_prerelease(value: str) -> bool:
    """Return True if the version carries a prerelease component."""
    return parse_version(value).prerelease is not None


def strip_range_prefix(version_range: str) -> str:
    """Remove a leading caret or tilde from a manifest version range."""
    return version_range.strip().lstrip("^~")


def with_tag_prefix(value: str) -> str:
    """Return the git tag name for a version (``1.2.3`` -> ``v1.2.3``)."""
    return value if value.startswith("v") else f"v{value}"


def increment_version(current: str, release_type: ReleaseType | str) -> str:
    """Compute the next version the way ``npm version <type>`` does.

    Examples:
        1.2.3 + patch -> 1.2.4
        1.2.3-beta.1 + patch -> 1.2.3
        1.2.3 + prerelease -> 1.2.4-0
        1.2.3-alpha.0 + prerelease -> 1.2.3-alpha.1
    """
    release_type = ReleaseType(release_type)
    version = parse_version(current)

    if release_type == ReleaseType.PRERELEASE:
        if version.prerelease is None:
            next_version = version.bump_patch().replace(prerelease="0")
        else:
            next_version = version.bump_prerelease()
    elif release_type == ReleaseType.MAJOR:
        if version.prerelease is not None and version.minor == 0 and version.patch == 0:
            next_version = version.finalize_version()
        else:
            next_version = version.bump_major()
    elif release_type == ReleaseType.MINOR:
        if version.prerelease is not None and version.patch == 0:
            next_version = version.finalize_version()
        else:
            next_version = version.bump_minor()
    else:
        if version.prerelease is not None:
            next_version = version.finalize_version()
        else:
            next_version = version.bump_patch()

    logger.debug("Incremented version", current=current, release_type=release_type.value, next_version=str(next_version))
    return str(next_version)


def previous_release_tag(current_version: str, tags: Iterable[str]) -> str | None:
    """Find the most recent release tag at or below the current manifest version.

    Prerelease tags and tags that are not versions are ignored. The current
    version is ranked among the remaining tags and the entry after it is
    returned with a ``v`` prefix. A tag equal to the current version sorts
    directly after it, so a version that is already tagged is its own last
    release. Returns None if there is no such tag.
    """
    if not is_version(current_version):
        return None

    candidates = [_clean(current_version)]
    for tag in tags:
        tag = tag.strip()
        if tag.startswith("v"):
            tag = tag[1:]
        if is_version(tag) and not is_prerelease(tag):
            candidates.append(_clean(tag))

    ranked = sorted(candidates, key=semver.Version.parse, reverse=True)
    index = ranked.index(_clean(current_version))
    if index + 1 >= len(ranked):
        return None
    return with_tag_prefix(ranked[index + 1])
