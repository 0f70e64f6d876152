"""
Dependency installer — npm installs that only happen when needed.

A project is installed when its ``node_modules`` is missing, or always
under ``--force``. The install mode follows the lockfile: ``npm ci``
when ``package-lock.json`` exists, ``npm install`` otherwise.

A failed install is non-fatal. Server and client installs are
independent, and neither blocks env files or directories.
"""

from __future__ import annotations

import logging
from pathlib import Path

from devsetup.adapters.base import CommandRunner
from devsetup.adapters.languages import node
from devsetup.core.models.outcome import StepOutcome
from devsetup.core.models.setup import (
    InstallDecision,
    InstallMode,
    ProvisioningTarget,
    RunOptions,
)
from devsetup.core.services.existence import exists

logger = logging.getLogger(__name__)


class DependencyInstaller:
    """Installs a Node project's dependencies through a CommandRunner."""

    def __init__(self, options: RunOptions, runner: CommandRunner):
        self._options = options
        self._runner = runner

    def decide(self, project_dir: Path, force: bool) -> InstallDecision:
        """Work out whether and how ``project_dir`` should be installed."""
        deps_present = exists(ProvisioningTarget.directory(project_dir / node.DEPENDENCY_DIR))
        if deps_present and not force:
            return InstallDecision(
                should_install=False,
                reason=f"{node.DEPENDENCY_DIR} exists. Use --force to reinstall.",
            )

        mode = InstallMode.CLEAN if node.has_lockfile(project_dir) else InstallMode.INCREMENTAL
        reason = "forced" if deps_present else f"{node.DEPENDENCY_DIR} missing"
        return InstallDecision(should_install=True, mode=mode, reason=reason)

    def install(
        self,
        project_dir: Path | str,
        force: bool | None = None,
        name: str | None = None,
    ) -> StepOutcome:
        """Install dependencies for ``project_dir`` if needed.

        Args:
            project_dir: Directory holding package.json (relative to the
                project root, or absolute).
            force: Install even if node_modules exists. Defaults to the
                run's ``--force`` setting.
            name: Step name used in the report.
        """
        label = str(project_dir)
        step = name or f"dependencies:{label}"
        path = self._options.path(project_dir)
        if force is None:
            force = self._options.force

        if not exists(ProvisioningTarget.directory(path)):
            logger.warning("Directory %s not found", label)
            return StepOutcome.failure(step, f"Directory {label} not found (directory missing)")

        decision = self.decide(path, force)
        if not decision.should_install:
            logger.info("Skipping %s install (%s)", label, decision.reason)
            return StepOutcome.skip(step, decision.reason)

        args = node.install_command(decision.mode)
        logger.info("Installing dependencies in %s (%s, %s)", label, decision.mode.value, decision.reason)
        result = self._runner.run(args, cwd=path)

        metadata = {"mode": decision.mode.value, "command": result.command_line, "exit_code": result.returncode}
        if not result.ok:
            logger.warning("%s failed in %s with exit code %d", result.command_line, label, result.returncode)
            return StepOutcome.failure(
                step,
                f"{result.command_line} exited with code {result.returncode}",
                metadata=metadata,
            )
        return StepOutcome.success(step, f"Installed {label} dependencies ({decision.mode.value})", metadata=metadata)

    def install_root_helpers(self, name: str = "root-dependencies") -> StepOutcome:
        """Install root dev-dependencies when the root manifest needs a helper.

        Only runs when ``package.json`` at the project root mentions the
        configured helper (``concurrently`` by default) and the root has
        no ``node_modules`` yet. ``--force`` does not apply here.
        """
        root = self._options.project_root
        helper = self._options.config.root_helper

        if not exists(ProvisioningTarget.file(root / node.MANIFEST)):
            return StepOutcome.skip(name, f"No root {node.MANIFEST}")
        if not node.manifest_mentions(root, helper):
            return StepOutcome.skip(name, f"Root {node.MANIFEST} does not use {helper}")
        if exists(ProvisioningTarget.directory(root / node.DEPENDENCY_DIR)):
            return StepOutcome.skip(name, f"Root {node.DEPENDENCY_DIR} exists")

        args = node.install_command(InstallMode.INCREMENTAL)
        logger.info("Installing root devDependencies (%s)", helper)
        result = self._runner.run(args, cwd=root)
        metadata = {"command": result.command_line, "exit_code": result.returncode}
        if not result.ok:
            logger.warning("Root install failed with exit code %d", result.returncode)
            return StepOutcome.failure(
                name,
                f"{result.command_line} exited with code {result.returncode}",
                metadata=metadata,
            )
        return StepOutcome.success(name, "Installed root devDependencies", metadata=metadata)
