"""Adapters — how external commands get run.

Public re-exports for convenient access.
"""

from devsetup.adapters.base import CommandResult, CommandRunner
from devsetup.adapters.mock import RecordingRunner
from devsetup.adapters.shell.command import SubprocessRunner

__all__ = [
    "CommandResult",
    "CommandRunner",
    "RecordingRunner",
    "SubprocessRunner",
]
