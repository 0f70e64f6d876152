"""
Command runner base — the contract between provisioning steps and tools.

Steps never spawn processes themselves. They hand an argument vector
and a working directory to a CommandRunner and get a CommandResult
back. This keeps package-manager and schema-tool invocations
injectable, so tests can swap in a runner that only records calls.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path

from pydantic import BaseModel

# Conventional shell exit codes used when no process could report one
EXIT_NOT_FOUND = 127
EXIT_TIMEOUT = 124


class CommandResult(BaseModel):
    """Outcome of one external command."""

    args: list[str]
    cwd: str | None = None
    returncode: int = 0
    output: str = ""    # only populated for quiet (captured) runs

    @property
    def ok(self) -> bool:
        return self.returncode == 0

    @property
    def command_line(self) -> str:
        return " ".join(self.args)


class CommandRunner(ABC):
    """Abstract base class for command runners.

    Runners report failures through the CommandResult's return code.
    They NEVER raise for a failing or missing program.
    """

    @abstractmethod
    def run(
        self,
        args: list[str],
        cwd: Path | str | None = None,
        quiet: bool = False,
    ) -> CommandResult:
        """Run ``args`` in ``cwd`` and wait for it to finish.

        Args:
            args: Program and arguments (no shell interpretation).
            cwd: Working directory; None means the current directory.
            quiet: Capture output instead of streaming it to the terminal.
        """

    @abstractmethod
    def which(self, program: str) -> str | None:
        """Resolve ``program`` on PATH, or None if it is not installed."""

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__}>"
