"""
Action chains — ordered commands with an explicit failure policy.

Instead of ``a || true`` and ``a || b || true``, a chain is data:

    generate:  [ChainLink(generate, CONTINUE)]
    migrate:   [ChainLink(deploy, FALLBACK), ChainLink(dev_init, CONTINUE)]

``run_chain`` walks the links in order:

    on success of a FALLBACK link  → skip the fallbacks that follow it
    on failure of CONTINUE         → record, go on with the next link
    on failure of FALLBACK         → go on with the next link (its fallback)
    on failure of ABORT            → stop the chain
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from devsetup.adapters.base import CommandResult, CommandRunner

logger = logging.getLogger(__name__)


class OnFailure(str, Enum):
    CONTINUE = "continue"
    FALLBACK = "fallback"
    ABORT = "abort"


@dataclass(frozen=True)
class ChainLink:
    """One command in a chain and what to do if it fails."""

    name: str
    args: list[str]
    on_failure: OnFailure = OnFailure.CONTINUE


@dataclass
class ChainResult:
    """What happened while running a chain."""

    results: dict[str, CommandResult] = field(default_factory=dict)
    skipped: list[str] = field(default_factory=list)
    aborted: bool = False
    # Whether each group (a link plus its fallbacks) ended in success
    group_ok: list[bool] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.aborted and all(self.group_ok)

    @property
    def executed(self) -> list[str]:
        return list(self.results)

    def status_of(self, name: str) -> str:
        """``ok``, ``failed``, ``skipped`` or ``not-run`` for a link."""
        if name in self.results:
            return "ok" if self.results[name].ok else "failed"
        if name in self.skipped:
            return "skipped"
        return "not-run"

    def to_dict(self) -> dict:
        return {
            "ok": self.ok,
            "aborted": self.aborted,
            "links": {
                name: {"command": r.command_line, "exit_code": r.returncode}
                for name, r in self.results.items()
            },
            "skipped": list(self.skipped),
        }


def run_chain(
    links: list[ChainLink],
    runner: CommandRunner,
    cwd: Path | str | None = None,
) -> ChainResult:
    """Evaluate ``links`` in order against ``runner``.

    Returns:
        ChainResult. Never raises for failing commands.
    """
    chain = ChainResult()
    i = 0
    while i < len(links):
        link = links[i]
        result = runner.run(link.args, cwd=cwd)
        chain.results[link.name] = result
        in_fallback_group = link.on_failure is OnFailure.FALLBACK

        if result.ok:
            logger.debug("✓ %s", link.name)
            # Skip the fallbacks guarding this link
            j = i + 1
            while j < len(links) and links[j - 1].on_failure is OnFailure.FALLBACK:
                chain.skipped.append(links[j].name)
                j += 1
            chain.group_ok.append(True)
            i = j
            continue

        logger.debug("✗ %s (exit %d, %s)", link.name, result.returncode, link.on_failure.value)
        if link.on_failure is OnFailure.ABORT:
            chain.aborted = True
            chain.group_ok.append(False)
            break
        if not in_fallback_group or i + 1 >= len(links):
            # End of a group with nothing left to fall back to
            chain.group_ok.append(False)
        i += 1

    return chain
