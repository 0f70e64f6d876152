"""
Environment files — create default .env files, never overwrite them.

A developer's edits to ``server/.env`` or ``client/.env`` must survive
every later run, ``--force`` included. Writes are atomic (temp file
in the same directory, then rename) so a crash can never leave a
half-written file that passes the existence check next time.
"""

from __future__ import annotations

import logging
import os
import tempfile
from pathlib import Path

from devsetup.core.models.outcome import StepOutcome
from devsetup.core.models.setup import EnvTemplate, ProvisioningTarget, RunOptions
from devsetup.core.services.existence import exists

logger = logging.getLogger(__name__)

SERVER_ENV_CONTENTS = """\
# Server Configuration
PORT=5000
NODE_ENV=development

# Database Configuration (SQLite)
DATABASE_URL="file:./dev.db"

# CORS Configuration
CLIENT_URL=http://localhost:5173

"""

CLIENT_ENV_CONTENTS = """\
# API Configuration
VITE_API_URL=http://localhost:5000/api
"""


def env_templates(server_dir: str = "server", client_dir: str = "client") -> list[EnvTemplate]:
    """The server and client templates, in that order."""
    return [
        EnvTemplate(path=Path(server_dir) / ".env", contents=SERVER_ENV_CONTENTS),
        EnvTemplate(path=Path(client_dir) / ".env", contents=CLIENT_ENV_CONTENTS),
    ]


class EnvironmentFileWriter:
    """Writes a template's contents only when its file is missing."""

    def __init__(self, options: RunOptions):
        self._options = options

    def ensure(self, template: EnvTemplate, name: str | None = None) -> StepOutcome:
        step = name or f"env:{template.path}"
        target = self._options.path(template.path)

        if exists(ProvisioningTarget.file(target)):
            logger.info("%s already exists — leaving it untouched", template.path)
            return StepOutcome.skip(step, f"{template.path} already exists")

        try:
            atomic_write(target, template.contents)
        except OSError as e:
            logger.warning("Could not write %s: %s", template.path, e)
            return StepOutcome.failure(step, f"Could not write {template.path}: {e}")

        logger.info("Created %s", template.path)
        return StepOutcome.success(
            step,
            f"Created {template.path}",
            metadata={"path": str(target), "size": len(template.contents)},
        )


def atomic_write(path: Path, content: str) -> None:
    """Write ``content`` to ``path`` via temp-file-then-rename.

    Parent directories are created as needed. The file gets the same
    umask-derived mode a plain ``open(path, "w")`` would give it.

    Raises:
        OSError: If the directory cannot be created or the write fails.
    """
    path.parent.mkdir(parents=True, exist_ok=True)

    fd, tmp_path = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}_", suffix=".tmp")
    tmp = Path(tmp_path)
    try:
        with open(fd, "w", encoding="utf-8", newline="") as fh:
            fh.write(content)
        tmp.chmod(0o666 & ~_current_umask())
        tmp.replace(path)
    except BaseException:
        tmp.unlink(missing_ok=True)
        raise


def _current_umask() -> int:
    # os.umask can only be read by setting it
    mask = os.umask(0)
    os.umask(mask)
    return mask
