"""Runs external commands inside an explicit working directory."""
from __future__ import annotations

import logging
import os
import subprocess
from pathlib import Path
from typing import List, Mapping, Optional, Sequence, Union

from pydantic import BaseModel, Field

from engine.auth import redact_args, redact_text

logger = logging.getLogger(__name__)


class CommandResult(BaseModel):
    """Result of a command that was run."""

    returncode: int = Field(description="Process exit status")
    lines: List[str] = Field(default_factory=list, description="Captured stdout lines")
    stderr: str = Field(default="", description="Captured stderr")

    @property
    def success(self) -> bool:
        return self.returncode == 0


class DirectoryNotFound(BaseModel):
    """Result returned instead of running a command when its directory is missing."""

    path: Path = Field(description="The working directory that does not exist")


RunResult = Union[CommandResult, DirectoryNotFound]


class ProcessRunner:
    """Runs commands with a fixed working directory.

    The working directory is passed to every subprocess call, so the
    process-wide current directory is never touched and runners bound to
    different directories can be used from different threads.
    """

    def __init__(self, cwd: str | Path) -> None:
        """Initialize the runner.

        Args:
            cwd: Directory every command is run in
        """
        self.cwd = Path(cwd)

    def run(
        self,
        args: Sequence[str],
        sensitive: bool = False,
        env: Optional[Mapping[str, str]] = None,
    ) -> RunResult:
        """Run a command and capture its output.

        Args:
            args: Executable followed by its arguments
            sensitive: Don't log the arguments (they carry a secret that is
                not in URL form)
            env: Extra environment variables for the command. Values are
                never logged.

        Returns:
            CommandResult with the captured output, or DirectoryNotFound if
            the working directory does not exist. A non-zero exit status is
            reported in the result, not raised.
        """
        if not self.cwd.is_dir():
            return DirectoryNotFound(path=self.cwd)

        shown = args[0] if sensitive else " ".join(redact_args(args))
        logger.debug(f"Running {shown}", extra={"cwd": str(self.cwd)})

        proc = subprocess.run(
            list(args),
            cwd=self.cwd,
            capture_output=True,
            text=True,
            check=False,
            env={**os.environ, **env} if env else None,
        )

        if proc.returncode != 0:
            logger.warning(
                f"Command exited with status {proc.returncode}: {shown}",
                extra={"cwd": str(self.cwd), "error": redact_text(proc.stderr or "")},
            )

        return CommandResult(
            returncode=proc.returncode,
            lines=(proc.stdout or "").splitlines(),
            stderr=proc.stderr or "",
        )
