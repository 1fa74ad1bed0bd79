"""Engine package for synchronizing repositories and updating their dependencies."""
from __future__ import annotations

from engine.dependency_set import ComposerDependencySet
from engine.errors import (
    CheckoutBusyError,
    CheckoutDirectoryNotFoundError,
    InvalidManifestContentsError,
    ManifestNotFoundError,
    NoValidTagError,
    RepoManError,
)
from engine.repository import Repository
from engine.updater import DependencyUpdater
from engine.versioning import SemanticVersion

__all__ = [
    "CheckoutBusyError",
    "CheckoutDirectoryNotFoundError",
    "ComposerDependencySet",
    "DependencyUpdater",
    "InvalidManifestContentsError",
    "ManifestNotFoundError",
    "NoValidTagError",
    "RepoManError",
    "Repository",
    "SemanticVersion",
]
