"""Composer manifest and lock file contents."""
from __future__ import annotations

import json
from typing import Any, Dict, Mapping, Optional

from pydantic import BaseModel


class LockedPackage(BaseModel):
    """Resolved version of a package as recorded in the lock file."""

    version: str
    time: Optional[str] = None


class ComposerConfig:
    """A composer.json document and, optionally, its composer.lock.

    Reads merge ``require`` with ``require-dev``; writes only ever touch
    ``require``.
    """

    def __init__(
        self,
        config: Dict[str, Any],
        lock: Optional[Mapping[str, Any]] = None,
    ) -> None:
        self.config = config
        self.lock = lock if isinstance(lock, Mapping) else {}

    @classmethod
    def from_json(cls, manifest: str, lock: Optional[str] = None) -> ComposerConfig:
        """Build from raw file contents.

        Raises:
            ValueError: If the manifest or lock isn't a JSON object
        """
        config = json.loads(manifest)
        if not isinstance(config, dict):
            raise ValueError("Manifest is not a JSON object")

        lock_data = json.loads(lock) if lock else {}
        if not isinstance(lock_data, dict):
            raise ValueError("Lock file is not a JSON object")

        return cls(config, lock_data)

    @property
    def dependencies(self) -> Dict[str, str]:
        """Flat mapping of every required package to its version constraint."""
        dependencies = dict(self.config.get("require") or {})
        dependencies.update(self.config.get("require-dev") or {})
        return dependencies

    @property
    def lock_dependencies(self) -> Dict[str, LockedPackage]:
        """Mapping of every locked package to its resolved version and time.

        Entries without a name or version are skipped.
        """
        locked: Dict[str, LockedPackage] = {}
        if not isinstance(self.lock, Mapping):
            return locked

        for section in ("packages", "packages-dev"):
            packages = self.lock.get(section)
            if not isinstance(packages, list):
                continue
            for package in packages:
                if not isinstance(package, dict):
                    continue
                name = package.get("name")
                version = package.get("version")
                if not isinstance(name, str) or not isinstance(version, str):
                    continue
                time = package.get("time")
                locked[name] = LockedPackage(
                    version=version,
                    time=time if isinstance(time, str) else None,
                )
        return locked

    def has_dependency(self, name: str) -> bool:
        return name in self.dependencies

    def get_dependency_version(self, name: str) -> Optional[str]:
        return self.dependencies.get(name)

    def get_lock_version(self, name: str) -> Optional[str]:
        package = self.lock_dependencies.get(name)
        return package.version if package else None

    def get_lock_date(self, name: str) -> Optional[str]:
        package = self.lock_dependencies.get(name)
        return package.time if package else None

    def set_require_version(self, name: str, version: str) -> None:
        """Set (or add) the version constraint of a package in ``require``."""
        require = self.config.get("require")
        if not isinstance(require, dict):
            require = {}
            self.config["require"] = require
        require[name] = version

    def to_json(self) -> str:
        """Render the manifest the way composer itself formats it."""
        return json.dumps(self.config, indent=4, ensure_ascii=False) + "\n"
