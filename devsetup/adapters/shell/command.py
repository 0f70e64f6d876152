"""
Subprocess runner — execute external programs for real.

Interactive runs stream the tool's own output (npm progress, prisma
messages) straight to the terminal. Quiet runs capture it, which is
what availability probes and version checks use.
"""

from __future__ import annotations

import logging
import shutil
import subprocess
import time
from pathlib import Path

from devsetup.adapters.base import (
    EXIT_NOT_FOUND,
    EXIT_TIMEOUT,
    CommandResult,
    CommandRunner,
)

logger = logging.getLogger(__name__)


class SubprocessRunner(CommandRunner):
    """Run commands with :func:`subprocess.run`, never through a shell.

    Args:
        timeout: Seconds before a command is killed (default: 600).
    """

    def __init__(self, timeout: int = 600):
        self._timeout = timeout

    @property
    def timeout(self) -> int:
        return self._timeout

    def which(self, program: str) -> str | None:
        return shutil.which(program)

    def run(
        self,
        args: list[str],
        cwd: Path | str | None = None,
        quiet: bool = False,
    ) -> CommandResult:
        cwd_str = str(cwd) if cwd is not None else None
        logger.debug("Executing: %s (cwd=%s)", " ".join(args), cwd_str or ".")
        if cwd_str is not None and not Path(cwd_str).is_dir():
            logger.warning("Working directory does not exist: %s (for %s)", cwd_str, args[0])
            return CommandResult(
                args=args,
                cwd=cwd_str,
                returncode=EXIT_NOT_FOUND,
                output=f"Working directory does not exist: {cwd_str}",
            )

        start = time.monotonic()

        try:
            result = subprocess.run(
                args,
                cwd=cwd_str,
                capture_output=quiet,
                text=True,
                encoding="utf-8",
                errors="replace",
                timeout=self._timeout,
            )
        except FileNotFoundError:
            logger.debug("Program not found: %s (cwd=%s)", args[0], cwd_str or ".")
            return CommandResult(args=args, cwd=cwd_str, returncode=EXIT_NOT_FOUND)
        except subprocess.TimeoutExpired:
            logger.warning("Command timed out after %ss: %s", self._timeout, " ".join(args))
            return CommandResult(args=args, cwd=cwd_str, returncode=EXIT_TIMEOUT)
        except OSError as e:
            # e.g. permission denied on the executable
            logger.warning("Command could not start: %s (%s)", " ".join(args), e)
            return CommandResult(args=args, cwd=cwd_str, returncode=EXIT_NOT_FOUND, output=str(e))

        elapsed_ms = int((time.monotonic() - start) * 1000)
        logger.debug("Exit %d after %dms: %s", result.returncode, elapsed_ms, " ".join(args))

        output = ""
        if quiet:
            output = (result.stdout or "").strip() or (result.stderr or "").strip()
        return CommandResult(
            args=args,
            cwd=cwd_str,
            returncode=result.returncode,
            output=output,
        )
