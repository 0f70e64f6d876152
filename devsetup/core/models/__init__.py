"""
Domain models — Pydantic types for a setup run.

    from devsetup.core.models import StepOutcome, RunOptions, ProvisioningTarget
"""

from devsetup.core.models.outcome import StepOutcome
from devsetup.core.models.setup import (
    EnvTemplate,
    InstallDecision,
    InstallMode,
    ProvisioningTarget,
    RunOptions,
    TargetKind,
)

__all__ = [
    "EnvTemplate",
    "InstallDecision",
    "InstallMode",
    "ProvisioningTarget",
    "RunOptions",
    "StepOutcome",
    "TargetKind",
]
