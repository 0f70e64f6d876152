"""
Prerequisite check — the one step whose failure is fatal.

Without node and npm nothing else can run, so a missing tool stops
the whole setup before any provisioning happens.
"""

from __future__ import annotations

import logging

from devsetup.adapters.base import CommandRunner
from devsetup.adapters.languages.node import tool_version
from devsetup.core.models.outcome import StepOutcome
from devsetup.core.models.setup import RunOptions

logger = logging.getLogger(__name__)


class PrerequisiteError(Exception):
    """Raised when a required tool is not installed."""

    def __init__(self, missing: list[str]):
        self.missing = missing
        names = ", ".join(missing)
        verb = "is" if len(missing) == 1 else "are"
        super().__init__(f"{names} {verb} not installed. Please install and re-run setup.")


class PrerequisiteCheck:
    """Verifies that every required tool resolves on PATH."""

    def __init__(self, options: RunOptions, runner: CommandRunner):
        self._options = options
        self._runner = runner

    def check(self, name: str = "prerequisites") -> StepOutcome:
        """Check required tools.

        Returns:
            A success outcome whose metadata lists each tool's version.

        Raises:
            PrerequisiteError: If any required tool is missing.
        """
        tools = self._options.config.required_tools
        missing = [tool for tool in tools if self._runner.which(tool) is None]
        if missing:
            logger.error("Missing required tools: %s", ", ".join(missing))
            raise PrerequisiteError(missing)

        versions = {tool: tool_version(self._runner, tool) for tool in tools}
        for tool, ver in versions.items():
            logger.info("%s %s is installed", tool, ver or "(unknown version)")

        summary = ", ".join(f"{tool} {ver or '?'}" for tool, ver in versions.items())
        return StepOutcome.success(name, summary, metadata={"versions": versions})
