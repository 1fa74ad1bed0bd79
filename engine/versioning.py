"""Semantic version parsing and ordering for repository tags."""
from __future__ import annotations

import functools
from typing import Iterable, List, Optional

import semver


@functools.total_ordering
class SemanticVersion:
    """A repository tag interpreted as a semantic version.

    Tags may carry a leading ``v`` (``v1.2.3``). Tags that don't follow
    ``major.minor.patch[-prerelease][+build]`` are kept but marked invalid;
    they can't be compared and are filtered out before sorting.
    """

    def __init__(self, tag: str) -> None:
        self.tag = tag
        self.prefix = ""
        body = tag.strip()
        if body[:1] in ("v", "V"):
            self.prefix, body = body[0], body[1:]

        self._version: Optional[semver.Version] = None
        if semver.Version.is_valid(body):
            self._version = semver.Version.parse(body)

    def is_valid(self) -> bool:
        return self._version is not None

    @property
    def major(self) -> Optional[int]:
        return self._version.major if self._version else None

    @property
    def minor(self) -> Optional[int]:
        return self._version.minor if self._version else None

    @property
    def patch(self) -> Optional[int]:
        return self._version.patch if self._version else None

    @property
    def prerelease(self) -> Optional[str]:
        return self._version.prerelease if self._version else None

    @property
    def build(self) -> Optional[str]:
        return self._version.build if self._version else None

    def compare(self, other: SemanticVersion) -> int:
        """Compare precedence with another version.

        Build metadata is ignored; a prerelease sorts before its release.

        Returns:
            -1, 0 or 1 as this version is lower, equal or higher

        Raises:
            ValueError: If either version is invalid
        """
        if self._version is None or other._version is None:
            raise ValueError(f"Cannot compare invalid versions: {self.tag!r}, {other.tag!r}")
        return self._version.compare(other._version)

    def render(self) -> str:
        """Canonical string form, keeping the tag's ``v`` prefix."""
        if self._version is None:
            return self.tag
        return f"{self.prefix}{self._version}"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SemanticVersion):
            return NotImplemented
        if not (self.is_valid() and other.is_valid()):
            return self.tag == other.tag
        return self.compare(other) == 0

    def __lt__(self, other: SemanticVersion) -> bool:
        if not isinstance(other, SemanticVersion):
            return NotImplemented
        return self.compare(other) < 0

    def __hash__(self) -> int:
        if self._version is None:
            return hash(self.tag)
        return hash((self.major, self.minor, self.patch, self.prerelease))

    def __repr__(self) -> str:
        return f"SemanticVersion({self.tag!r})"

    def __str__(self) -> str:
        return self.render()


def sort_tags(tags: Iterable[str]) -> List[str]:
    """Sort tags ascending by version precedence, dropping invalid ones.

    Args:
        tags: Raw tag names

    Returns:
        The valid tags, lowest version first
    """
    versions = [SemanticVersion(tag) for tag in tags]
    valid = [version for version in versions if version.is_valid()]
    valid.sort(key=functools.cmp_to_key(SemanticVersion.compare))
    return [version.tag for version in valid]


def latest_tag(tags: Iterable[str]) -> Optional[str]:
    """Get the highest valid tag, or None if no tag is a semantic version."""
    ordered = sort_tags(tags)
    return ordered[-1] if ordered else None
