"""
Setup use case — load config, build run options, run the sequencer.

The full vertical slice from CLI flags to the setup report.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from devsetup.adapters.base import CommandRunner
from devsetup.adapters.shell.command import SubprocessRunner
from devsetup.core.config.loader import ConfigError, find_config_file, load_config
from devsetup.core.engine.sequencer import Sequencer, SetupReport
from devsetup.core.models.setup import RunOptions

logger = logging.getLogger(__name__)


@dataclass
class SetupResult:
    """Result of a setup run."""

    report: SetupReport | None = None
    options: RunOptions | None = None
    error: str | None = None

    @property
    def exit_code(self) -> int:
        if self.error:
            return 1
        assert self.report is not None
        return self.report.exit_code

    def to_dict(self) -> dict:
        if self.error:
            return {"error": self.error, "exit_code": self.exit_code}
        result: dict = {}
        if self.options:
            result["project_root"] = str(self.options.project_root)
        if self.report:
            result.update(self.report.to_dict())
        return result


def run_setup(
    project_root: Path | None = None,
    config_path: Path | None = None,
    force: bool = False,
    runner: CommandRunner | None = None,
) -> SetupResult:
    """Provision the development environment under ``project_root``.

    Args:
        project_root: Directory holding server/ and client/ (default: cwd).
        config_path: Explicit devsetup.yml. None = look in project_root.
        force: Re-run install and migrate steps unconditionally.
        runner: Command runner override (tests inject a fake).

    Returns:
        SetupResult with the report, or an error if config is invalid.
    """
    root = (project_root or Path.cwd()).resolve()
    if not root.is_dir():
        return SetupResult(error=f"Project root not found: {root}")

    try:
        config = load_config(config_path or find_config_file(root))
    except ConfigError as e:
        return SetupResult(error=str(e))

    options = RunOptions(force=force, project_root=root, config=config)
    if runner is None:
        runner = SubprocessRunner(timeout=config.command_timeout)

    logger.info("Setting up %s (force=%s)", root, force)
    report = Sequencer(options, runner).run()
    return SetupResult(report=report, options=options)
