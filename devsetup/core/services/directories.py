"""
Directory ensurer — make sure runtime directories exist.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from pathlib import Path

from devsetup.core.models.outcome import StepOutcome
from devsetup.core.models.setup import ProvisioningTarget, RunOptions
from devsetup.core.services.existence import exists

logger = logging.getLogger(__name__)


class DirectoryEnsurer:
    """Creates each directory (and its parents) if absent.

    One outcome covers the whole sequence: skipped if everything was
    already there, failed if any directory could not be created.
    """

    def __init__(self, options: RunOptions):
        self._options = options

    def ensure_all(self, paths: Sequence[str | Path], name: str = "directories") -> StepOutcome:
        created: list[str] = []
        errors: list[str] = []

        for raw in paths:
            target = self._options.path(raw)
            if exists(ProvisioningTarget.directory(target)):
                continue
            try:
                target.mkdir(parents=True, exist_ok=True)
            except OSError as e:
                logger.warning("Could not create %s: %s", raw, e)
                errors.append(f"{raw}: {e}")
                continue
            logger.info("Created directory %s", raw)
            created.append(str(raw))

        metadata = {"created": created, "errors": errors}
        if errors:
            return StepOutcome.failure(name, "; ".join(errors), metadata=metadata)
        if not created:
            return StepOutcome.skip(name, "All directories already exist", metadata=metadata)
        return StepOutcome.success(name, f"Created {', '.join(created)}", metadata=metadata)
