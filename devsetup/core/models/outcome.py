"""
StepOutcome model — the result contract of every provisioning step.

Steps never raise for expected failures. Whatever happens (skip,
success, non-fatal failure) is captured in a StepOutcome, and the
sequencer collects them in execution order for the final report.
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any, Literal

from pydantic import BaseModel, Field


def now_iso() -> str:
    """Current UTC time as ISO string."""
    return datetime.now(UTC).isoformat()


class StepOutcome(BaseModel):
    """Result of one provisioning step.

    ``failed`` always means FailedNonFatal: the one fatal condition
    (a missing prerequisite tool) is recorded on the report itself.
    """

    name: str
    status: Literal["succeeded", "skipped", "failed"] = "succeeded"

    started_at: str = Field(default_factory=now_iso)
    ended_at: str = Field(default_factory=now_iso)
    duration_ms: int = 0

    detail: str = ""
    metadata: dict[str, Any] = Field(default_factory=dict)

    @property
    def ok(self) -> bool:
        """Whether the step did its work."""
        return self.status == "succeeded"

    @property
    def skipped(self) -> bool:
        return self.status == "skipped"

    @property
    def failed(self) -> bool:
        """Whether the step failed (non-fatally)."""
        return self.status == "failed"

    @classmethod
    def success(cls, name: str, detail: str = "", **kwargs: Any) -> StepOutcome:
        """Create a success outcome."""
        return cls(name=name, status="succeeded", detail=detail, **kwargs)

    @classmethod
    def skip(cls, name: str, reason: str = "", **kwargs: Any) -> StepOutcome:
        """Create a skip outcome."""
        return cls(name=name, status="skipped", detail=reason, **kwargs)

    @classmethod
    def failure(cls, name: str, error: str, **kwargs: Any) -> StepOutcome:
        """Create a non-fatal failure outcome."""
        return cls(name=name, status="failed", detail=error, **kwargs)
