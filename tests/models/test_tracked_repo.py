"""Tests for the TrackedRepo model."""
from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from engine.config import RepoManSettings
from models.tracked_repo import TrackedRepo


def test_tracked_repo_valid_creation() -> None:
    """Test creating a TrackedRepo with valid data."""
    repo = TrackedRepo(url="https://github.com/example/repo")
    assert str(repo.url) == "https://github.com/example/repo"
    assert repo.token is None  # default value
    assert repo.host == "github.com"


def test_tracked_repo_token_hidden_from_repr() -> None:
    """Test that the token is not part of the repr."""
    repo = TrackedRepo(url="https://github.com/example/repo", token="abcdef")
    assert repo.token == "abcdef"
    assert "abcdef" not in repr(repo)


def test_tracked_repo_invalid_url() -> None:
    """Test that invalid URLs are rejected."""
    with pytest.raises(ValidationError):
        TrackedRepo(url="not-a-url")


def test_tracked_repo_to_repository(tmp_path: Path) -> None:
    """Test building the Repository for a registry entry."""
    settings = RepoManSettings(repo_dir=tmp_path)
    repo = TrackedRepo(url="https://github.com/example/repo.git", token="abcdef")

    repository = repo.to_repository(tmp_path, settings)

    assert repository.url == "https://github.com/example/repo.git"
    assert repository.token == "abcdef"
    assert repository.path == tmp_path / "repo"
    assert repository.settings is settings
