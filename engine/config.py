"""Engine settings loaded from the environment."""
from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class RepoManSettings(BaseSettings):
    """Settings for repository checkouts and the tools run against them."""

    model_config = SettingsConfigDict(env_prefix="RM_")

    repo_dir: Path = Path("/tmp/repositories")
    git_executable: str = "git"
    composer_executable: str = "composer"
    manifest_file: str = "composer.json"
    lock_file: str = "composer.lock"
    max_concurrency: int = Field(default=4, ge=1)
    run_timeout: Optional[float] = Field(default=None, gt=0)


@lru_cache
def get_settings() -> RepoManSettings:
    """Get the process-wide settings, read once from the environment."""
    return RepoManSettings()
