"""
Sequencer — runs every provisioning step in a fixed order.

Flow:
    prerequisites → root deps → server deps → client deps
        → server .env → client .env → directories → schema

Only the prerequisite check is fatal: if it fails, nothing else runs
and the report carries the error. Every other step returns a
StepOutcome, and a failed step never stops the steps after it.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from dataclasses import dataclass, field

from devsetup.adapters.base import CommandRunner
from devsetup.core.models.outcome import StepOutcome, now_iso
from devsetup.core.models.setup import RunOptions
from devsetup.core.services.dependencies import DependencyInstaller
from devsetup.core.services.directories import DirectoryEnsurer
from devsetup.core.services.env_files import EnvironmentFileWriter, env_templates
from devsetup.core.services.prerequisites import PrerequisiteCheck, PrerequisiteError
from devsetup.core.services.schema_tool import SchemaToolRunner

logger = logging.getLogger(__name__)

STEP_ORDER = (
    "prerequisites",
    "root-dependencies",
    "server-dependencies",
    "client-dependencies",
    "server-env",
    "client-env",
    "directories",
    "schema",
)


@dataclass
class SetupReport:
    """Ordered outcomes of one run."""

    outcomes: list[StepOutcome] = field(default_factory=list)
    fatal_error: str | None = None
    force: bool = False

    @property
    def total(self) -> int:
        return len(self.outcomes)

    @property
    def succeeded(self) -> int:
        return sum(1 for o in self.outcomes if o.ok)

    @property
    def failed(self) -> int:
        return sum(1 for o in self.outcomes if o.failed)

    @property
    def skipped(self) -> int:
        return sum(1 for o in self.outcomes if o.skipped)

    @property
    def status(self) -> str:
        if self.fatal_error:
            return "aborted"
        if self.failed == 0:
            return "ok"
        if self.succeeded + self.skipped > 0:
            return "partial"
        return "failed"

    @property
    def exit_code(self) -> int:
        """0 unless the fatal prerequisite check failed."""
        return 1 if self.fatal_error else 0

    def get(self, name: str) -> StepOutcome | None:
        for outcome in self.outcomes:
            if outcome.name == name:
                return outcome
        return None

    def to_dict(self) -> dict:
        return {
            "status": self.status,
            "exit_code": self.exit_code,
            "force": self.force,
            "fatal_error": self.fatal_error,
            "total": self.total,
            "succeeded": self.succeeded,
            "failed": self.failed,
            "skipped": self.skipped,
            "steps": [o.model_dump(mode="json") for o in self.outcomes],
        }


class Sequencer:
    """Wires every step to the same RunOptions and CommandRunner."""

    def __init__(self, options: RunOptions, runner: CommandRunner):
        self._options = options
        self._runner = runner
        self.prerequisites = PrerequisiteCheck(options, runner)
        self.installer = DependencyInstaller(options, runner)
        self.env_writer = EnvironmentFileWriter(options)
        self.directories = DirectoryEnsurer(options)
        self.schema = SchemaToolRunner(options, runner)

    @property
    def options(self) -> RunOptions:
        return self._options

    def steps(self) -> list[tuple[str, Callable[[str], StepOutcome]]]:
        """The non-fatal steps, in execution order."""
        config = self._options.config
        server_env, client_env = env_templates(config.server_dir, config.client_dir)
        return [
            ("root-dependencies", lambda n: self.installer.install_root_helpers(name=n)),
            ("server-dependencies", lambda n: self.installer.install(config.server_dir, name=n)),
            ("client-dependencies", lambda n: self.installer.install(config.client_dir, name=n)),
            ("server-env", lambda n: self.env_writer.ensure(server_env, name=n)),
            ("client-env", lambda n: self.env_writer.ensure(client_env, name=n)),
            ("directories", lambda n: self.directories.ensure_all(config.directories, name=n)),
            ("schema", lambda n: self.schema.run(name=n)),
        ]

    def run(self) -> SetupReport:
        """Run the whole setup and return its report. Never raises for step failures."""
        report = SetupReport(force=self._options.force)

        try:
            report.outcomes.append(self._timed("prerequisites", lambda n: self.prerequisites.check(name=n)))
        except PrerequisiteError as e:
            report.fatal_error = str(e)
            return report

        for name, step in self.steps():
            outcome = self._guarded(name, step)
            report.outcomes.append(outcome)
            marker = "✓" if outcome.ok else "✗" if outcome.failed else "⊘"
            logger.info("%s %s → %s", marker, name, outcome.status)

        return report

    def _timed(self, name: str, step: Callable[[str], StepOutcome]) -> StepOutcome:
        started_at = now_iso()
        start = time.monotonic()
        outcome = step(name)
        outcome.duration_ms = int((time.monotonic() - start) * 1000)
        outcome.started_at = started_at
        outcome.ended_at = now_iso()
        return outcome

    def _guarded(self, name: str, step: Callable[[str], StepOutcome]) -> StepOutcome:
        """Run a non-fatal step; an unexpected error becomes a failed outcome."""
        try:
            return self._timed(name, step)
        except Exception as e:
            logger.debug("Step %s raised", name, exc_info=True)
            logger.error("Step %s raised unexpectedly: %s", name, e)
            return StepOutcome.failure(name, f"Unexpected error: {e}")
