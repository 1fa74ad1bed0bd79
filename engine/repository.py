"""Git repository checkout driven through the git command line."""
from __future__ import annotations

import base64
import logging
import re
from pathlib import Path
from typing import List, Optional, Sequence
from urllib.parse import urlsplit

from engine.auth import build_authenticated_url, credential_env
from engine.config import RepoManSettings, get_settings
from engine.dependency_set import ComposerDependencySet
from engine.errors import CheckoutDirectoryNotFoundError
from engine.process import DirectoryNotFound, ProcessRunner
from engine.versioning import latest_tag

logger = logging.getLogger(__name__)

_REMOTE_PREFIX = re.compile(r"^remotes/origin/")


def checkout_name(url: str) -> str:
    """Get the directory name git clone uses for a remote URL."""
    path = urlsplit(url).path or url
    name = path.rstrip("/").split("/")[-1].split(":")[-1]
    if name.endswith(".git"):
        name = name[: -len(".git")]
    return name


def _normalize_branches(lines: Sequence[str], strip_remote: bool = False) -> List[str]:
    branches: List[str] = []
    for line in lines:
        name = line.strip().lstrip("*+").strip()
        if strip_remote:
            name = _REMOTE_PREFIX.sub("", name)
        if not name or name.startswith(("HEAD", "(HEAD")):
            continue
        if name not in branches:
            branches.append(name)
    return branches


class Repository:
    """A remote git repository and its local checkout.

    The checkout lives in ``base_dir / name``, where ``name`` is the last
    segment of the remote URL. Every operation that runs git in the checkout
    raises CheckoutDirectoryNotFoundError while the checkout doesn't exist;
    call update() to create it.
    """

    def __init__(
        self,
        url: str,
        base_dir: str | Path,
        token: Optional[str] = None,
        settings: Optional[RepoManSettings] = None,
    ) -> None:
        """Initialize the repository.

        Args:
            url: Remote repository URL
            base_dir: Directory the checkout is cloned into
            token: Optional access token for the remote
            settings: Engine settings, defaults to the environment settings
        """
        self.url = url
        self.base_dir = Path(base_dir)
        self.name = checkout_name(url)
        self.token = token
        self.settings = settings or get_settings()
        self.runner = ProcessRunner(self.path)

    @property
    def id(self) -> str:
        """Stable identifier derived from the remote URL."""
        return base64.urlsafe_b64encode(self.url.encode()).decode()

    @property
    def path(self) -> Path:
        return self.base_dir / self.name

    def exists(self) -> bool:
        return self.path.is_dir()

    def __repr__(self) -> str:
        return f"Repository({self.url!r}, {str(self.base_dir)!r})"

    def _git(self, *args: str, remote: bool = False) -> List[str]:
        env = credential_env(self.url, self.token) if remote else None
        result = self.runner.run([self.settings.git_executable, *args], env=env)
        if isinstance(result, DirectoryNotFound):
            raise CheckoutDirectoryNotFoundError(result.path)
        return result.lines

    def update(self) -> bool:
        """Bring the checkout up to date with the remote.

        Clones the repository if there is no checkout yet, then updates the
        remote-tracking refs, fetches tags and pulls. The token is only
        embedded in the clone URL; origin is reset to the plain URL right
        after and later commands authenticate through their environment.

        Returns:
            True once the checkout has been synchronized

        Raises:
            CheckoutDirectoryNotFoundError: If the base directory is missing,
                or the checkout still doesn't exist after cloning
        """
        if not self.exists():
            logger.info(f"Cloning {self.url} into {self.path}")
            clone = ProcessRunner(self.base_dir).run(
                [
                    self.settings.git_executable,
                    "clone",
                    build_authenticated_url(self.url, self.token),
                    self.name,
                ]
            )
            if isinstance(clone, DirectoryNotFound):
                raise CheckoutDirectoryNotFoundError(clone.path)

        self._git("remote", "set-url", "origin", self.url)
        self._git("remote", "update", remote=True)
        self._git("fetch", "--tags", "origin", remote=True)
        self._git("pull", "origin", remote=True)
        return True

    def list_local_branches(self) -> List[str]:
        """List local branch names, or an empty list if there is no checkout."""
        try:
            return _normalize_branches(self._git("branch"))
        except CheckoutDirectoryNotFoundError:
            return []

    def list_all_branches(self) -> List[str]:
        """List local and remote branch names with the remote prefix removed."""
        try:
            return _normalize_branches(self._git("branch", "-a"), strip_remote=True)
        except CheckoutDirectoryNotFoundError:
            return []

    def is_local_branch(self, name: str) -> bool:
        return name in self.list_local_branches()

    def current_branch(self) -> Optional[str]:
        lines = self._git("rev-parse", "--abbrev-ref", "HEAD")
        return lines[0].strip() if lines else None

    def list_tags(self) -> List[str]:
        """List tag names in the order git reports them."""
        return [line.strip() for line in self._git("tag", "-l") if line.strip()]

    def get_latest_tag(self) -> Optional[str]:
        """Get the tag with the highest semantic version.

        Tags that aren't semantic versions are ignored.

        Returns:
            The tag name, or None if no tag is a valid semantic version
        """
        return latest_tag(self.list_tags())

    def checkout(self, name: str) -> None:
        """Switch the working tree to a branch, tag or commit."""
        self._git("checkout", name)

    def branch(self, name: str, from_ref: Optional[str] = None) -> None:
        """Create a branch.

        Args:
            name: Name of the new branch
            from_ref: Commit, tag or branch to start from (default: HEAD)
        """
        args = ["branch", name]
        if from_ref:
            args.append(from_ref)
        self._git(*args)
        logger.info(f"Created branch {name} from {from_ref or 'HEAD'}", extra={"repo": self.url})

    def tag(self, name: str, message: str) -> None:
        """Create an annotated tag at HEAD."""
        self._git("tag", "-a", name, "-m", message)

    def has_file(self, name: str) -> bool:
        return (self.path / name).is_file()

    def get_file(self, name: str) -> Optional[str]:
        """Read a file from the checkout, or None if it doesn't exist."""
        if not self.has_file(name):
            return None
        return (self.path / name).read_text(encoding="utf-8")

    def set_file(self, name: str, contents: str) -> None:
        """Create or overwrite a file in the checkout."""
        if not self.exists():
            raise CheckoutDirectoryNotFoundError(self.path)
        target = self.path / name
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(contents, encoding="utf-8")

    def remove_file(self, name: str) -> None:
        """Delete a file from the checkout; does nothing if it's absent."""
        (self.path / name).unlink(missing_ok=True)

    def add(self, name: str) -> None:
        """Stage a file for the next commit."""
        self._git("add", name)
        logger.info(f"Staged {name}", extra={"repo": self.url})

    def commit(self, message: str) -> None:
        self._git("commit", "-m", message)

    def push(self) -> None:
        """Push the current branch to origin, setting it as upstream."""
        self._git("push", "--set-upstream", "origin", "HEAD", remote=True)

    def status(self, silent: bool = True) -> List[str]:
        """Get working tree status lines (short format when silent)."""
        if silent:
            return self._git("status", "-s")
        return self._git("status")

    def log(self, limit: Optional[int] = None) -> List[str]:
        """Get one line per commit, newest first."""
        args = ["log", "--oneline"]
        if limit:
            args.extend(["-n", str(limit)])
        return self._git(*args)

    def get_dependency_set(self) -> ComposerDependencySet:
        """Get the composer dependency set of this checkout."""
        return ComposerDependencySet(self, settings=self.settings)
