"""Tests for composer manifest and lock contents."""
from __future__ import annotations

import json

import pytest

from engine.manifest import ComposerConfig, LockedPackage


@pytest.fixture
def config() -> ComposerConfig:
    """Create a manifest with runtime and dev requirements and a lock."""
    manifest = {
        "name": "company/app",
        "require": {"php": ">=8.1", "company/libx": "1.0.0"},
        "require-dev": {"phpunit/phpunit": "^10.0"},
    }
    lock = {
        "packages": [
            {"name": "company/libx", "version": "1.0.0", "time": "2015-07-20T10:00:00+00:00"},
        ],
        "packages-dev": [
            {"name": "phpunit/phpunit", "version": "10.5.2", "time": "2023-12-01T08:00:00+00:00"},
        ],
    }
    return ComposerConfig(manifest, lock)


def test_dependencies_merge_dev(config: ComposerConfig) -> None:
    """Test that reads merge require and require-dev."""
    assert config.dependencies == {
        "php": ">=8.1",
        "company/libx": "1.0.0",
        "phpunit/phpunit": "^10.0",
    }
    assert config.has_dependency("phpunit/phpunit")
    assert not config.has_dependency("company/liby")
    assert config.get_dependency_version("company/libx") == "1.0.0"
    assert config.get_dependency_version("company/liby") is None


def test_lock_dependencies(config: ComposerConfig) -> None:
    """Test reading resolved versions from the lock."""
    assert config.lock_dependencies["company/libx"] == LockedPackage(
        version="1.0.0", time="2015-07-20T10:00:00+00:00"
    )
    assert config.get_lock_version("phpunit/phpunit") == "10.5.2"
    assert config.get_lock_date("phpunit/phpunit") == "2023-12-01T08:00:00+00:00"
    assert config.get_lock_version("company/liby") is None
    assert config.get_lock_date("company/liby") is None


@pytest.mark.parametrize("lock", [None, [], "composer", {"packages": {"name": "x"}}])
def test_lock_dependencies_malformed_lock(lock: object) -> None:
    """Test that a lock that isn't a composer lock object yields no packages."""
    config = ComposerConfig({"require": {"a/b": "^2.0"}}, lock)  # type: ignore[arg-type]

    assert config.lock_dependencies == {}
    assert config.get_lock_version("a/b") is None


def test_lock_dependencies_skips_incomplete_entries() -> None:
    """Test that package entries without a name or version are skipped."""
    config = ComposerConfig(
        {},
        {
            "packages": [
                {"name": "x"},
                {"name": "y", "version": None},
                None,
                {"name": "a/b", "version": "1.0.3", "time": 20230101},
            ]
        },
    )

    assert config.lock_dependencies == {"a/b": LockedPackage(version="1.0.3")}


def test_set_require_version(config: ComposerConfig) -> None:
    """Test that only require is written."""
    config.set_require_version("company/libx", "2.0.0")
    config.set_require_version("phpunit/phpunit", "^11.0")

    assert config.config["require"]["company/libx"] == "2.0.0"
    assert config.config["require"]["phpunit/phpunit"] == "^11.0"
    assert config.config["require-dev"] == {"phpunit/phpunit": "^10.0"}


def test_set_require_version_without_require() -> None:
    """Test adding a require section, including composer's empty-array form."""
    config = ComposerConfig({"name": "company/app", "require": []})
    config.set_require_version("a/b", "^3.0")
    assert config.config["require"] == {"a/b": "^3.0"}


def test_to_json_format(config: ComposerConfig) -> None:
    """Test the rendered manifest is indented, unescaped and newline terminated."""
    rendered = config.to_json()
    assert rendered.endswith("}\n")
    assert '    "require": {' in rendered
    assert '"company/libx"' in rendered
    assert "\\/" not in rendered
    assert json.loads(rendered) == config.config


def test_from_json() -> None:
    """Test building from raw file contents."""
    config = ComposerConfig.from_json(
        '{"require": {"a/b": "1.0"}}',
        '{"packages": [{"name": "a/b", "version": "1.0.3"}]}',
    )
    assert config.get_dependency_version("a/b") == "1.0"
    assert config.get_lock_version("a/b") == "1.0.3"
    assert config.get_lock_date("a/b") is None


def test_from_json_rejects_non_objects() -> None:
    """Test that scalar JSON documents are rejected."""
    with pytest.raises(ValueError):
        ComposerConfig.from_json('"just a string"')
    with pytest.raises(ValueError):
        ComposerConfig.from_json("{}", "[1, 2]")
