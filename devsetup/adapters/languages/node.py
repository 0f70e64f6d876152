"""
Node.js toolchain — npm and Prisma command lines.

Everything that knows what a Node project looks like on disk
(manifest, lockfile, ``node_modules``) or how npm/npx are spelled
lives here. The provisioning steps only decide *when* to run things.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

from devsetup.adapters.base import CommandRunner
from devsetup.core.models.setup import InstallMode

logger = logging.getLogger(__name__)

MANIFEST = "package.json"
LOCKFILE = "package-lock.json"
DEPENDENCY_DIR = "node_modules"

# Keep installs quiet about audits and funding appeals
_NPM_FLAGS = ["--no-audit", "--no-fund"]

PRISMA_GENERATE = ["npx", "prisma", "generate"]
PRISMA_MIGRATE_DEPLOY = ["npx", "prisma", "migrate", "deploy"]
PRISMA_MIGRATE_DEV_INIT = ["npx", "prisma", "migrate", "dev", "--name", "init"]
PRISMA_PROBE = ["npx", "--no-install", "prisma", "-v"]


def has_lockfile(project_dir: Path) -> bool:
    """Whether the project pins its dependencies with package-lock.json."""
    try:
        return (project_dir / LOCKFILE).is_file()
    except OSError:
        return False


def install_command(mode: InstallMode) -> list[str]:
    """The npm command line for an install mode.

    ``npm ci`` installs strictly from the lockfile (discarding any
    existing node_modules); ``npm install`` resolves and installs.
    """
    if mode is InstallMode.CLEAN:
        return ["npm", "ci", *_NPM_FLAGS]
    return ["npm", "install", *_NPM_FLAGS]


def manifest_mentions(project_dir: Path, needle: str) -> bool:
    """Whether ``package.json`` in ``project_dir`` mentions ``needle``.

    A plain text search, like ``grep -q``: the helper may be listed under
    any dependency section or only used in a script.
    """
    manifest = project_dir / MANIFEST
    try:
        return needle in manifest.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError):
        return False


def tool_version(runner: CommandRunner, program: str) -> str | None:
    """Probe ``<program> --version``; "v20.11.0" → "20.11.0"."""
    result = runner.run([program, "--version"], quiet=True)
    if not result.ok:
        return None
    ver = result.output.strip().splitlines()[0] if result.output.strip() else ""
    return ver.lstrip("v") or None


def prisma_available(runner: CommandRunner, server_dir: Path) -> bool:
    """Whether the Prisma CLI can be invoked from ``server_dir``.

    Either ``npx --no-install prisma -v`` works (output suppressed, a
    non-zero exit just means unavailable), or the locally installed
    binary is executable.
    """
    if runner.run(PRISMA_PROBE, cwd=server_dir, quiet=True).ok:
        return True
    local_bin = server_dir / DEPENDENCY_DIR / ".bin" / "prisma"
    try:
        return local_bin.is_file() and os.access(local_bin, os.X_OK)
    except OSError:
        return False
