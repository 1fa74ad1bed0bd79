"""Models for repositories tracked by the registry."""
from __future__ import annotations

from models.tracked_repo import TrackedRepo

__all__ = ["TrackedRepo"]
