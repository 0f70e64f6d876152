"""
Recording runner — test double for every external command.

Records each invocation instead of spawning a process. Exit codes can
be configured per command prefix, and the set of programs that
``which`` reports as installed is configurable too.
"""

from __future__ import annotations

from pathlib import Path

from devsetup.adapters.base import EXIT_NOT_FOUND, CommandResult, CommandRunner


class RecordingRunner(CommandRunner):
    """Universal fake runner for tests.

    By default every command succeeds and ``node``/``npm``/``npx``
    are "installed".
    """

    def __init__(
        self,
        available: tuple[str, ...] | list[str] = ("node", "npm", "npx"),
        default_output: str = "",
    ):
        self._available = set(available)
        self._default_output = default_output
        self._responses: list[tuple[tuple[str, ...], int, str]] = []
        self._call_log: list[CommandResult] = []

    @property
    def call_log(self) -> list[CommandResult]:
        """Every command this runner has received, in order."""
        return self._call_log

    @property
    def call_count(self) -> int:
        return len(self._call_log)

    @property
    def commands(self) -> list[str]:
        """Recorded command lines, for terse assertions."""
        return [c.command_line for c in self._call_log]

    def set_available(self, *programs: str) -> None:
        """Replace the set of installed programs."""
        self._available = set(programs)

    def set_response(self, prefix: str | list[str], returncode: int, output: str = "") -> None:
        """Make every command starting with ``prefix`` exit with ``returncode``.

        Later registrations win over earlier ones.
        """
        parts = tuple(prefix.split() if isinstance(prefix, str) else prefix)
        self._responses.insert(0, (parts, returncode, output))

    def set_failure(self, prefix: str | list[str], returncode: int = 1) -> None:
        """Configure commands starting with ``prefix`` to fail."""
        self.set_response(prefix, returncode)

    def which(self, program: str) -> str | None:
        if program in self._available:
            return f"/usr/bin/{program}"
        return None

    def run(
        self,
        args: list[str],
        cwd: Path | str | None = None,
        quiet: bool = False,
    ) -> CommandResult:
        returncode, output = 0, self._default_output
        if args and args[0] not in self._available:
            returncode, output = EXIT_NOT_FOUND, ""
        for parts, code, text in self._responses:
            if tuple(args[: len(parts)]) == parts:
                returncode, output = code, text
                break

        result = CommandResult(
            args=list(args),
            cwd=str(cwd) if cwd is not None else None,
            returncode=returncode,
            output=output if quiet else "",
        )
        self._call_log.append(result)
        return result

    def reset(self) -> None:
        """Clear call log and custom responses."""
        self._call_log.clear()
        self._responses.clear()
