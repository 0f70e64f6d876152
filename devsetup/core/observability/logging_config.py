"""
Logging configuration — set up once by the CLI before any step runs.

Every module does ``logger = logging.getLogger(__name__)``; the
provisioning steps log their skip/act decisions at INFO and the exact
commands they run at DEBUG.

Levels are resolved in precedence order:
    --debug / --verbose / --quiet  >  DEVSETUP_LOG_LEVEL  >  WARNING

DEVSETUP_LOG_FILE adds a file handler (full detail), with its own
level taken from DEVSETUP_LOG_FILE_LEVEL when set.
"""

from __future__ import annotations

import logging
import os
import sys
from collections.abc import Mapping

ENV_LOG_LEVEL = "DEVSETUP_LOG_LEVEL"
ENV_LOG_FILE = "DEVSETUP_LOG_FILE"
ENV_LOG_FILE_LEVEL = "DEVSETUP_LOG_FILE_LEVEL"

# Console formats by verbosity. WARNING and above stays bare so that
# warnings read like part of the setup report.
_CONSOLE_FORMATS: dict[int, tuple[str, str | None]] = {
    logging.DEBUG: ("%(asctime)s %(levelname)-5s %(name)s:%(lineno)d — %(message)s", "%H:%M:%S"),
    logging.INFO: ("%(asctime)s [%(name)s] %(message)s", "%H:%M:%S"),
}
_CONSOLE_DEFAULT: tuple[str, str | None] = ("%(message)s", None)

_FILE_FORMAT = ("%(asctime)s %(levelname)-5s %(name)s:%(lineno)d — %(message)s", "%Y-%m-%d %H:%M:%S")


def resolve_level(
    debug: bool = False,
    verbose: bool = False,
    quiet: bool = False,
    environ: Mapping[str, str] | None = None,
) -> str:
    """Pick the console level name from CLI flags, then the environment."""
    if debug:
        return "DEBUG"
    if verbose:
        return "INFO"
    if quiet:
        return "ERROR"
    env = os.environ if environ is None else environ
    return env.get(ENV_LOG_LEVEL, "WARNING")


def setup_logging(
    level: str = "WARNING",
    log_file: str | None = None,
    log_file_level: str | None = None,
) -> None:
    """Configure the root logger for the whole process.

    Args:
        level: Console level name (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        log_file: Optional path to a log file.
        log_file_level: Optional separate level for the log file.
            Defaults to ``level``.
    """
    numeric_level = _parse_level(level)

    if numeric_level <= logging.DEBUG:
        fmt, datefmt = _CONSOLE_FORMATS[logging.DEBUG]
    elif numeric_level <= logging.INFO:
        fmt, datefmt = _CONSOLE_FORMATS[logging.INFO]
    else:
        fmt, datefmt = _CONSOLE_DEFAULT

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(numeric_level)
    console.setFormatter(logging.Formatter(fmt, datefmt=datefmt))

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(console)

    effective_level = numeric_level
    if log_file:
        file_level = _parse_level(log_file_level) if log_file_level else numeric_level
        effective_level = min(effective_level, file_level)

        fh = logging.FileHandler(log_file, encoding="utf-8")
        fh.setLevel(file_level)
        fh.setFormatter(logging.Formatter(*_FILE_FORMAT))
        root.addHandler(fh)

    root.setLevel(effective_level)

    # Logging must never take the setup run down with it
    logging.raiseExceptions = False


def _parse_level(level: str | None) -> int:
    """Convert a level name to its numeric constant (WARNING if unknown)."""
    if not level:
        return logging.WARNING
    numeric = getattr(logging, level.upper(), None)
    if not isinstance(numeric, int):
        return logging.WARNING
    return numeric
