"""Tracked repository model supplied by the repository registry."""
from __future__ import annotations

from dataclasses import field
from pathlib import Path
from typing import Optional

from pydantic import HttpUrl
from pydantic.dataclasses import dataclass

from engine.config import RepoManSettings
from engine.repository import Repository


@dataclass
class TrackedRepo:
    """Repository whose dependencies are kept up to date.

    Attributes:
        url: Git repository URL
        token: Optional access token for the repository host
    """

    url: HttpUrl
    token: Optional[str] = field(default=None, repr=False)

    @property
    def host(self) -> str:
        return self.url.host or ""

    def to_repository(
        self, base_dir: str | Path, settings: Optional[RepoManSettings] = None
    ) -> Repository:
        """Create the Repository for this entry, checked out under base_dir."""
        return Repository(str(self.url), base_dir, token=self.token, settings=settings)
