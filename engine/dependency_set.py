"""Composer dependency manifest updates inside a repository checkout."""
from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING, Mapping, Optional, Sequence

from engine.config import RepoManSettings, get_settings
from engine.errors import (
    CheckoutDirectoryNotFoundError,
    InvalidManifestContentsError,
    ManifestNotFoundError,
)
from engine.manifest import ComposerConfig
from engine.process import DirectoryNotFound, ProcessRunner

if TYPE_CHECKING:
    from engine.repository import Repository

logger = logging.getLogger(__name__)

# Skip project scripts and prefer dist archives over VCS clones.
INSTALL_FLAGS = ("--prefer-dist", "--no-scripts")


class ComposerDependencySet:
    """The composer dependencies of one repository checkout.

    composer.json is edited directly; composer.lock is always regenerated by
    composer rather than edited.
    """

    def __init__(
        self,
        repository: Repository,
        runner: Optional[ProcessRunner] = None,
        settings: Optional[RepoManSettings] = None,
    ) -> None:
        """Initialize the dependency set.

        Args:
            repository: Repository whose checkout holds the manifest
            runner: Runner for composer, defaults to the repository's runner
            settings: Engine settings, defaults to the environment settings
        """
        self.repository = repository
        self.runner = runner or repository.runner
        self.settings = settings or get_settings()

    @property
    def manifest_file(self) -> str:
        return self.settings.manifest_file

    @property
    def lock_file(self) -> str:
        return self.settings.lock_file

    def _composer(self, args: Sequence[str]) -> None:
        result = self.runner.run([self.settings.composer_executable, *args])
        if isinstance(result, DirectoryNotFound):
            raise CheckoutDirectoryNotFoundError(result.path)

    def _require_manifest(self) -> None:
        if not self.repository.has_file(self.manifest_file):
            raise ManifestNotFoundError(self.manifest_file)

    def _load(self) -> ComposerConfig:
        self._require_manifest()
        try:
            contents = self.repository.get_file(self.manifest_file) or ""
        except UnicodeDecodeError as e:
            raw = bytes(e.object).decode("utf-8", errors="replace")
            raise InvalidManifestContentsError(self.manifest_file, raw) from e
        try:
            config = json.loads(contents)
        except json.JSONDecodeError as e:
            raise InvalidManifestContentsError(self.manifest_file, contents) from e
        if not isinstance(config, dict):
            raise InvalidManifestContentsError(self.manifest_file, contents)
        return ComposerConfig(config)

    def get_config(self) -> ComposerConfig:
        """Read the manifest and, if present, the lock file.

        Raises:
            ManifestNotFoundError: If the manifest is missing
            InvalidManifestContentsError: If the manifest isn't a JSON object
        """
        config = self._load()
        try:
            lock = self.repository.get_file(self.lock_file)
            lock_data = json.loads(lock) if lock else {}
        except (UnicodeDecodeError, json.JSONDecodeError):
            lock_data = None

        if isinstance(lock_data, dict):
            config.lock = lock_data
        else:
            logger.warning(
                f"Ignoring unreadable {self.lock_file}",
                extra={"repo": self.repository.url},
            )
        return config

    def set_github_token(self, token: str) -> None:
        """Store a GitHub OAuth token in composer's global configuration.

        The setting is global, so composer runs in the repository's base
        directory and the checkout doesn't need to exist yet.

        Raises:
            CheckoutDirectoryNotFoundError: If the base directory is missing
        """
        result = ProcessRunner(self.repository.base_dir).run(
            [self.settings.composer_executable, "config", "-g", "github-oauth.github.com", token],
            sensitive=True,
        )
        if isinstance(result, DirectoryNotFound):
            raise CheckoutDirectoryNotFoundError(result.path)

    def set_required_versions(self, versions: Mapping[str, str]) -> None:
        """Require the given package versions and regenerate the lock file.

        Args:
            versions: Mapping of package name to version constraint

        Raises:
            ManifestNotFoundError: If the manifest is missing
            InvalidManifestContentsError: If the manifest isn't a JSON object
        """
        config = self._load()
        for library, version in versions.items():
            config.set_require_version(library, version)

        self.repository.set_file(self.manifest_file, config.to_json())
        self.repository.remove_file(self.lock_file)

        logger.info(
            f"Installing dependencies for {self.repository.url}",
            extra={"versions": dict(versions)},
        )
        self._composer(["install", *INSTALL_FLAGS])

        self.repository.add(self.manifest_file)
        self.repository.add(self.lock_file)

    def update_current(self) -> None:
        """Update the lock file within the current version constraints.

        Raises:
            ManifestNotFoundError: If the manifest is missing
        """
        self._require_manifest()
        self._composer(["update", *INSTALL_FLAGS])
        self.repository.add(self.lock_file)
