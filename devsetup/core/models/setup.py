"""
Provisioning models — targets, templates, decisions and run options.

These are the value types that flow between the sequencer and its
steps. All of them live for a single run only.
"""

from __future__ import annotations

from enum import Enum
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field

from devsetup.core.config.loader import SetupConfig


class TargetKind(str, Enum):
    """What kind of filesystem entry a target is expected to be."""

    DIRECTORY = "directory"
    FILE = "file"


class InstallMode(str, Enum):
    """How dependencies get installed."""

    CLEAN = "clean"                 # strictly from the lockfile
    INCREMENTAL = "incremental"     # resolve and install


class ProvisioningTarget(BaseModel):
    """Something that may or may not already exist on disk."""

    model_config = ConfigDict(frozen=True)

    path: Path
    kind: TargetKind

    @classmethod
    def directory(cls, path: Path | str) -> ProvisioningTarget:
        return cls(path=Path(path), kind=TargetKind.DIRECTORY)

    @classmethod
    def file(cls, path: Path | str) -> ProvisioningTarget:
        return cls(path=Path(path), kind=TargetKind.FILE)


class InstallDecision(BaseModel):
    """Whether and how to install a project's dependencies."""

    should_install: bool
    mode: InstallMode = InstallMode.INCREMENTAL
    reason: str = ""


class EnvTemplate(BaseModel):
    """A .env path (relative to the project root) and its default contents."""

    model_config = ConfigDict(frozen=True)

    path: Path
    contents: str


class RunOptions(BaseModel):
    """Run-wide configuration, built once from the CLI.

    Every component receives this explicitly at construction time.
    """

    model_config = ConfigDict(frozen=True)

    force: bool = False
    project_root: Path = Field(default_factory=Path.cwd)
    config: SetupConfig = Field(default_factory=SetupConfig)

    def path(self, relative: str | Path) -> Path:
        """Resolve a path against the project root."""
        return self.project_root / relative

    @property
    def server_dir(self) -> Path:
        return self.path(self.config.server_dir)

    @property
    def client_dir(self) -> Path:
        return self.path(self.config.client_dir)
