"""
Schema tool runner — Prisma generate and migrate, when applicable.

States:

    NoSchema            schema.prisma absent          → skipped, nothing invoked
    CheckToolAvailable  prisma not invocable          → skipped
    Generate            ``prisma generate``; a failure is logged, not fatal
    DecideMigrate       migrations dir present or --force, else skipped
    Migrate             ``migrate deploy``, falling back to ``migrate dev --name init``

Generate and migrate have separate failure domains: a failed generate
never prevents the migrate attempt.

Note: the deploy → dev-init fallback also fires when deploy fails for
reasons other than "no migrations yet" (drift, a broken migration),
so it can hide a real migration error behind a fresh ``init``.
"""

from __future__ import annotations

import logging
from pathlib import Path

from devsetup.adapters.base import CommandRunner
from devsetup.adapters.languages import node
from devsetup.core.engine.chain import ChainLink, OnFailure, run_chain
from devsetup.core.models.outcome import StepOutcome
from devsetup.core.models.setup import ProvisioningTarget, RunOptions
from devsetup.core.services.existence import exists

logger = logging.getLogger(__name__)

GENERATE_CHAIN = [
    ChainLink("generate", node.PRISMA_GENERATE, OnFailure.CONTINUE),
]

MIGRATE_CHAIN = [
    ChainLink("migrate-deploy", node.PRISMA_MIGRATE_DEPLOY, OnFailure.FALLBACK),
    ChainLink("migrate-dev-init", node.PRISMA_MIGRATE_DEV_INIT, OnFailure.CONTINUE),
]


class SchemaToolRunner:
    """Runs the Prisma steps for the server project."""

    def __init__(self, options: RunOptions, runner: CommandRunner):
        self._options = options
        self._runner = runner

    def run(
        self,
        schema_marker: Path | str | None = None,
        migrations_dir: Path | str | None = None,
        force: bool | None = None,
        name: str = "schema",
    ) -> StepOutcome:
        config = self._options.config
        marker = self._options.path(schema_marker or config.schema_marker)
        migrations = self._options.path(migrations_dir or config.migrations_dir)
        server_dir = self._options.server_dir
        if force is None:
            force = self._options.force

        if not exists(ProvisioningTarget.file(marker)):
            logger.info("No Prisma schema found; skipping Prisma setup")
            return StepOutcome.skip(name, "no schema")

        if not node.prisma_available(self._runner, server_dir):
            logger.info("Prisma not installed in %s; skipping Prisma steps", config.server_dir)
            return StepOutcome.skip(name, "tool unavailable")

        generated = run_chain(GENERATE_CHAIN, self._runner, cwd=server_dir)
        metadata: dict = {"generate": generated.status_of("generate")}
        if not generated.ok:
            logger.warning("prisma generate failed; continuing with migrate")

        if not (exists(ProvisioningTarget.directory(migrations)) or force):
            logger.info("No migrations detected; skipping migrate")
            return StepOutcome.skip(name, "no migrations", metadata=metadata)

        migrated = run_chain(MIGRATE_CHAIN, self._runner, cwd=server_dir)
        metadata["migrate"] = migrated.to_dict()
        for link in MIGRATE_CHAIN:
            metadata[link.name] = migrated.status_of(link.name)

        if not migrated.ok:
            logger.warning("prisma migrate deploy and migrate dev both failed")
            return StepOutcome.failure(name, "migrate deploy and migrate dev --name init both failed", metadata=metadata)

        used = "migrate deploy" if migrated.status_of("migrate-deploy") == "ok" else "migrate dev --name init"
        detail = f"Prisma generate {metadata['generate']}, {used} applied"
        return StepOutcome.success(name, detail, metadata=metadata)
