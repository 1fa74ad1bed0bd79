"""Tests for semantic version parsing and ordering."""
from __future__ import annotations

import itertools

import pytest

from engine.versioning import SemanticVersion, latest_tag, sort_tags

VALID_TAGS = [
    "v1.0.0-alpha",
    "v1.0.0-alpha.1",
    "v1.0.0-alpha.beta",
    "v1.0.0-beta",
    "v1.0.0-beta.2",
    "v1.0.0-beta.11",
    "v1.0.0-rc.1",
    "v1.0.0",
    "1.0.1",
    "v1.10.0",
    "v2.3.9",
    "v2.4.0",
]


def test_parse_with_prefix() -> None:
    """Test parsing a tag with a leading v."""
    version = SemanticVersion("v2.4.1-rc.1+build.7")
    assert version.is_valid()
    assert (version.major, version.minor, version.patch) == (2, 4, 1)
    assert version.prerelease == "rc.1"
    assert version.build == "build.7"
    assert version.render() == "v2.4.1-rc.1+build.7"


def test_parse_without_prefix() -> None:
    """Test parsing a bare version."""
    version = SemanticVersion("0.3.12")
    assert version.is_valid()
    assert version.render() == "0.3.12"


@pytest.mark.parametrize(
    "tag",
    ["", "v", "not-a-version", "1.0", "v1", "1.0.0.0", "01.2.3", "release-1.0.0", "v1.2.x"],
)
def test_invalid_tags(tag: str) -> None:
    """Test that tags outside the grammar are invalid."""
    version = SemanticVersion(tag)
    assert not version.is_valid()
    assert version.major is None
    assert version.render() == tag


def test_compare_invalid_raises() -> None:
    """Test that invalid versions are never compared."""
    with pytest.raises(ValueError, match="Cannot compare invalid versions"):
        SemanticVersion("v1.0.0").compare(SemanticVersion("latest"))


def test_precedence_order() -> None:
    """Test the standard precedence chain, prereleases before the release."""
    versions = [SemanticVersion(tag) for tag in VALID_TAGS]
    for lower, higher in zip(versions, versions[1:]):
        assert lower.compare(higher) == -1
        assert higher.compare(lower) == 1
        assert lower < higher


def test_compare_properties() -> None:
    """Test that compare is reflexive, antisymmetric and transitive."""
    versions = [SemanticVersion(tag) for tag in VALID_TAGS]
    for a in versions:
        assert a.compare(a) == 0

    for a, b in itertools.product(versions, repeat=2):
        assert a.compare(b) == -b.compare(a)

    for a, b, c in itertools.product(versions, repeat=3):
        if a.compare(b) <= 0 and b.compare(c) <= 0:
            assert a.compare(c) <= 0


def test_build_metadata_ignored() -> None:
    """Test that build metadata doesn't affect precedence."""
    assert SemanticVersion("v1.2.3+a").compare(SemanticVersion("1.2.3+b")) == 0
    assert SemanticVersion("v1.2.3") == SemanticVersion("1.2.3")


def test_sort_tags_drops_invalid() -> None:
    """Test that sorting filters out invalid tags."""
    tags = ["v1.0.0", "v2.4.0", "not-a-version", "v2.3.9"]
    assert sort_tags(tags) == ["v1.0.0", "v2.3.9", "v2.4.0"]


def test_latest_tag() -> None:
    """Test picking the highest tag."""
    assert latest_tag(["v1.0.0", "v2.4.0", "not-a-version", "v2.3.9"]) == "v2.4.0"
    assert latest_tag(["v1.9.0", "v1.10.0"]) == "v1.10.0"
    assert latest_tag(["v3.0.0-rc.1", "v2.9.9"]) == "v3.0.0-rc.1"


def test_latest_tag_without_valid_tags() -> None:
    """Test that no valid tag yields None rather than an error."""
    assert latest_tag([]) is None
    assert latest_tag(["nightly", "stable"]) is None
