"""Runs dependency updates for many repositories concurrently."""
from __future__ import annotations

import logging
import threading
from pathlib import Path
from typing import Dict, List, Mapping, Optional

import anyio
from pydantic import BaseModel, Field

from engine.config import RepoManSettings, get_settings
from engine.errors import CheckoutBusyError
from engine.repository import Repository
from engine.updater import DependencyUpdater
from models.tracked_repo import TrackedRepo

logger = logging.getLogger(__name__)


class UpdateOutcome(BaseModel):
    """Result of updating one repository."""

    url: str = Field(description="Repository URL")
    success: bool = Field(description="Whether the update branch was staged")
    branch: Optional[str] = Field(default=None, description="Update branch name")
    error: Optional[str] = Field(default=None, description="Error message if the update failed")


# Held by a worker thread for as long as it runs in a checkout. A worker that
# was abandoned after a timeout keeps it until its commands have finished.
_checkout_locks: Dict[Path, threading.Lock] = {}
_checkout_locks_guard = threading.Lock()


def _checkout_lock(path: Path) -> threading.Lock:
    with _checkout_locks_guard:
        return _checkout_locks.setdefault(path.resolve(), threading.Lock())


def _run_update(repository: Repository, versions: Mapping[str, str]) -> str:
    return DependencyUpdater(repository).execute(versions)


def _run_exclusive(repository: Repository, versions: Mapping[str, str]) -> str:
    """Run an update while holding the checkout's thread lock.

    Raises:
        CheckoutBusyError: If an earlier, abandoned update is still running
            in the checkout
    """
    lock = _checkout_lock(repository.path)
    if not lock.acquire(blocking=False):
        raise CheckoutBusyError(repository.path)
    try:
        return _run_update(repository, versions)
    finally:
        lock.release()


async def _update_single_repo(
    repository: Repository,
    versions: Mapping[str, str],
    settings: RepoManSettings,
    lock: anyio.Lock,
    limiter: anyio.CapacityLimiter,
) -> UpdateOutcome:
    """Update one repository in a worker thread.

    Args:
        repository: Repository to update
        versions: Package versions to require
        settings: Engine settings
        lock: Lock shared by every run against the same checkout
        limiter: Limits how many updates run at once

    Returns:
        UpdateOutcome for the repository
    """
    async with lock:
        try:
            with anyio.fail_after(settings.run_timeout):
                branch = await anyio.to_thread.run_sync(
                    _run_exclusive,
                    repository,
                    versions,
                    abandon_on_cancel=True,
                    limiter=limiter,
                )
        except TimeoutError:
            logger.error(f"Update of {repository.url} timed out after {settings.run_timeout}s")
            return UpdateOutcome(
                url=repository.url,
                success=False,
                error=f"Timed out after {settings.run_timeout}s",
            )
        except CheckoutBusyError as e:
            logger.warning(f"Skipping update of {repository.url}: {e}")
            return UpdateOutcome(url=repository.url, success=False, error=str(e))
        except Exception as e:
            logger.exception(f"Update of {repository.url} failed")
            return UpdateOutcome(url=repository.url, success=False, error=str(e))

    return UpdateOutcome(url=repository.url, success=True, branch=branch)


async def update_repositories(
    targets: List[TrackedRepo],
    versions: Mapping[str, str],
    settings: Optional[RepoManSettings] = None,
) -> List[UpdateOutcome]:
    """Update the dependencies of several repositories concurrently.

    Runs against the same checkout are serialized; different checkouts are
    updated in parallel, at most ``settings.max_concurrency`` at a time.

    A run that times out is reported as failed, but its worker thread keeps
    the checkout until its commands finish; later runs against that
    checkout fail with CheckoutBusyError instead of overlapping with it.

    Args:
        targets: Repositories to update
        versions: Package versions to require in every repository
        settings: Engine settings, defaults to the environment settings

    Returns:
        One UpdateOutcome per target, in the order given
    """
    settings = settings or get_settings()
    settings.repo_dir.mkdir(parents=True, exist_ok=True)

    logger.info(f"Updating {len(targets)} repositories in {settings.repo_dir}")

    limiter = anyio.CapacityLimiter(settings.max_concurrency)
    locks: Dict[Path, anyio.Lock] = {}
    outcomes: List[Optional[UpdateOutcome]] = [None] * len(targets)

    async def run(index: int, repository: Repository) -> None:
        outcomes[index] = await _update_single_repo(
            repository, versions, settings, locks[repository.path], limiter
        )

    async with anyio.create_task_group() as tg:
        for index, target in enumerate(targets):
            repository = target.to_repository(settings.repo_dir, settings)
            locks.setdefault(repository.path, anyio.Lock())
            tg.start_soon(run, index, repository, name=f"update-{repository.url}")

    return [outcome for outcome in outcomes if outcome is not None]
