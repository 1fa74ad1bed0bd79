"""Exceptions raised by the repository and dependency update engine."""
from __future__ import annotations

from pathlib import Path


class RepoManError(Exception):
    """Base class for engine errors."""


class CheckoutDirectoryNotFoundError(RepoManError):
    """Exception raised when a repository checkout directory does not exist."""

    def __init__(self, path: str | Path):
        """Initialize with the missing directory.

        Args:
            path: The directory that was expected to exist
        """
        self.path = Path(path)
        super().__init__(f"Checkout directory not found: {self.path}")


class ManifestNotFoundError(RepoManError):
    """Exception raised when the dependency manifest is missing from a checkout."""

    def __init__(self, file_name: str):
        self.file_name = file_name
        super().__init__(f"'{file_name}' not found")


class InvalidManifestContentsError(RepoManError):
    """Exception raised when the dependency manifest is not a JSON object."""

    def __init__(self, file_name: str, contents: str):
        """Initialize with the manifest name and its raw contents.

        Args:
            file_name: Name of the manifest file
            contents: The raw file contents, kept for diagnostics
        """
        self.file_name = file_name
        self.contents = contents
        super().__init__(f"'{file_name}' is invalid: {contents}")


class NoValidTagError(RepoManError):
    """Exception raised when a repository has no semantic-version tag to branch from."""

    def __init__(self, url: str):
        self.url = url
        super().__init__(f"No valid semantic version tag found in {url}")


class CheckoutBusyError(RepoManError):
    """Exception raised when another update is still running in a checkout."""

    def __init__(self, path: str | Path):
        self.path = Path(path)
        super().__init__(f"Checkout is busy with another update: {self.path}")
