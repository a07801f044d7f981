"""
Command execution for repo-status-check.

The checker never calls subprocess directly. It goes through a
CommandExecutor, so elevation and test doubles can be swapped in
without touching the checking logic.
"""

from __future__ import annotations

import logging
import subprocess
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Sequence

from .errors import CommandError

LOG = logging.getLogger(__name__)


@dataclass
class CommandResult:
    """
    Outcome of one external command.

    ``output`` holds the stdout lines and is what the checker bases its
    decisions on; ``stderr`` is only kept for diagnostics.
    """

    returncode: int
    output: List[str] = field(default_factory=list)
    args: List[str] = field(default_factory=list)
    stderr: str = ""

    @property
    def failed(self) -> bool:
        return self.returncode != 0

    def describe(self) -> str:
        """Render the result the way it is written to the log."""

        text = f"return code is {self.returncode}; output is:\n\n" + "\n".join(self.output)
        if self.stderr.strip():
            text += "\n\nstderr:\n" + self.stderr.rstrip()
        return text


class CommandExecutor(ABC):
    """
    Abstract interface for running external commands.
    """

    @abstractmethod
    def execute(self, command: str, args: Sequence[str]) -> CommandResult:
        """
        Run ``command`` with ``args`` and return its result.

        Implementations must not raise for a non-zero exit status; they
        raise CommandError only when the command could not be started.
        """


class SubprocessExecutor(CommandExecutor):
    """
    Runs commands with subprocess inside a fixed working directory.
    """

    def __init__(self, cwd: Optional[Path] = None):
        self.cwd = cwd

    def execute(self, command: str, args: Sequence[str]) -> CommandResult:
        cmd = [command, *args]
        LOG.debug("Running command: %s (cwd=%s)", " ".join(cmd), self.cwd)
        try:
            completed = subprocess.run(
                cmd,
                cwd=str(self.cwd) if self.cwd is not None else None,
                check=False,
                text=True,
                encoding="utf-8",
                errors="replace",
                capture_output=True,
            )
        except OSError as exc:  # noqa: BLE001
            raise CommandError(f"failed to execute {command}: {exc}") from exc

        return CommandResult(
            returncode=completed.returncode,
            output=completed.stdout.splitlines(),
            args=cmd,
            stderr=completed.stderr,
        )


class ElevatedExecutor(CommandExecutor):
    """
    Runs every command as another user through ``sudo -u <user> -H``.

    The target sudoers entry must allow the exact command without a
    password, otherwise sudo fails because no tty is available.
    """

    def __init__(self, inner: CommandExecutor, user: str, sudo: str = "sudo"):
        self.inner = inner
        self.user = user
        self.sudo = sudo

    def execute(self, command: str, args: Sequence[str]) -> CommandResult:
        return self.inner.execute(self.sudo, ["-u", self.user, "-H", command, *args])
