#!/usr/bin/env python
"""Example of updating a dependency across several repositories."""
from __future__ import annotations

import asyncio
import logging
import os

from engine.batch import update_repositories
from engine.config import RepoManSettings
from models.tracked_repo import TrackedRepo

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)


async def main() -> None:
    """Run the dependency update example."""
    token = os.getenv("GITHUB_TOKEN")
    repos = [
        TrackedRepo(url="https://github.com/example/billing-service", token=token),
        TrackedRepo(url="https://github.com/example/accounts-service", token=token),
    ]

    settings = RepoManSettings(run_timeout=600)
    outcomes = await update_repositories(repos, {"monolog/monolog": "^3.5"}, settings)

    for outcome in outcomes:
        if outcome.success:
            print(f"  - {outcome.url}: staged on {outcome.branch}")
        else:
            print(f"  - {outcome.url}: failed ({outcome.error})")


if __name__ == "__main__":
    asyncio.run(main())
