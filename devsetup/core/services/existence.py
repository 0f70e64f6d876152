"""
Existence gate — may a provisioning step be skipped?

Pure predicates over the filesystem. A step whose artifact already
exists skips; anything that cannot be checked counts as missing, so
the step re-provisions rather than silently skipping.
"""

from __future__ import annotations

import logging

from devsetup.core.models.setup import ProvisioningTarget, TargetKind

logger = logging.getLogger(__name__)


def exists(target: ProvisioningTarget) -> bool:
    """True iff ``target`` exists and is of the expected kind.

    Never raises: filesystem errors (permission denied, broken mounts)
    are reported as ``False``.
    """
    try:
        if target.kind is TargetKind.DIRECTORY:
            return target.path.is_dir()
        return target.path.is_file()
    except OSError as e:
        logger.debug("Cannot stat %s (%s) — treating as missing", target.path, e)
        return False
