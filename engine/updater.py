"""Command that moves a repository onto an update branch with new dependency versions."""
from __future__ import annotations

import logging
from typing import Mapping, Optional

from engine.dependency_set import ComposerDependencySet
from engine.errors import NoValidTagError
from engine.repository import Repository

logger = logging.getLogger(__name__)

BRANCH_PREFIX = "feature/update-"


def update_branch_name(tag: str) -> str:
    """Get the update branch name for a release tag."""
    return f"{BRANCH_PREFIX}{tag}"


class DependencyUpdater:
    """Updates the dependencies of one repository on a feature branch.

    The branch is named after the latest release tag and created from it,
    so running the command again for the same release reuses the branch.
    Changes are staged but never committed or pushed.
    """

    def __init__(
        self,
        repository: Repository,
        dependency_set: Optional[ComposerDependencySet] = None,
    ) -> None:
        """Initialize the command.

        Args:
            repository: Repository to update
            dependency_set: Dependency set to modify, defaults to the
                repository's own
        """
        self.repository = repository
        self.dependency_set = dependency_set or repository.get_dependency_set()

    def execute(self, versions: Mapping[str, str]) -> str:
        """Run the update.

        Args:
            versions: Mapping of package name to the version to require. When
                empty, composer update refreshes the lock file within the
                current constraints instead. That still changes and stages
                the lock, so an empty mapping is not a no-op.

        Returns:
            Name of the branch holding the staged changes

        Raises:
            CheckoutDirectoryNotFoundError: If the checkout can't be created
                or synchronized
            NoValidTagError: If no tag is a semantic version
            ManifestNotFoundError: If the manifest is missing
            InvalidManifestContentsError: If the manifest isn't a JSON object
        """
        self.repository.update()

        tag = self.repository.get_latest_tag()
        if not tag:
            raise NoValidTagError(self.repository.url)

        branch = update_branch_name(tag)
        if self.repository.is_local_branch(branch):
            logger.info(f"Reusing branch {branch}", extra={"repo": self.repository.url})
        else:
            self.repository.branch(branch, tag)
        self.repository.checkout(branch)

        if versions:
            self.dependency_set.set_required_versions(versions)
        else:
            self.dependency_set.update_current()

        logger.info(
            f"Staged dependency updates on {branch}",
            extra={"repo": self.repository.url, "versions": dict(versions)},
        )
        return branch
