"""
Shared test fixtures and configuration.
"""

from pathlib import Path

import pytest

from devsetup.adapters.mock import RecordingRunner
from devsetup.core.models.setup import RunOptions


@pytest.fixture
def app_root(tmp_path: Path) -> Path:
    """A two-tier app with server/ and client/ manifests, nothing installed."""
    root = tmp_path / "app"
    for name in ("server", "client"):
        (root / name).mkdir(parents=True)
        (root / name / "package.json").write_text('{"name": "%s"}\n' % name)
    return root


@pytest.fixture
def runner() -> RecordingRunner:
    """A fake runner where node, npm and npx are installed and everything succeeds."""
    return RecordingRunner(default_output="v20.11.0")


@pytest.fixture
def options(app_root: Path) -> RunOptions:
    return RunOptions(project_root=app_root)


@pytest.fixture
def forced(app_root: Path) -> RunOptions:
    return RunOptions(project_root=app_root, force=True)


@pytest.fixture
def add_prisma():
    """Give the server a Prisma schema (and optionally a migrations dir)."""

    def _add(root: Path, migrations: bool = False) -> Path:
        prisma = root / "server" / "prisma"
        prisma.mkdir(parents=True, exist_ok=True)
        (prisma / "schema.prisma").write_text('datasource db {\n  provider = "sqlite"\n}\n')
        if migrations:
            (prisma / "migrations").mkdir()
        return prisma

    return _add


@pytest.fixture
def snapshot():
    """Every path under a root mapped to its bytes (None for directories)."""

    def _snap(root: Path) -> dict[str, bytes | None]:
        return {
            str(p.relative_to(root)): (p.read_bytes() if p.is_file() else None)
            for p in sorted(root.rglob("*"))
        }

    return _snap
