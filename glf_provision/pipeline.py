from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Any, List, Optional, Sequence

from .config import ProvisionConfig
from .context import RunContext
from .lib.command import CommandResult, CommandRunner
from .lib.facts import HostFacts
from .logging_utils import RunLog


class Criticality(enum.Enum):
    FATAL = "fatal"
    RECOVERABLE = "recoverable"


@dataclass(frozen=True)
class StepCtx:
    run: RunContext
    cfg: ProvisionConfig
    runner: CommandRunner
    log: RunLog
    facts: HostFacts


class Step:
    """A single named, idempotent unit of provisioning work.

    Subclasses set step_id/phase/title and implement run(); run() returns True
    when everything it attempted succeeded.
    """

    step_id: str = ""
    phase: str = ""
    title: str = ""
    criticality: Criticality = Criticality.RECOVERABLE
    # Logged when applies() is false; None keeps the skip silent.
    skip_message: Optional[str] = None

    def applies(self, facts: HostFacts) -> bool:
        return True

    def run(self, ctx: StepCtx) -> bool:
        raise NotImplementedError


def all_ok(results: Sequence[Optional[CommandResult]]) -> bool:
    """None entries are commands that had nothing to do (e.g. empty package list)."""
    return all(r is None or r.ok for r in results)


@dataclass
class PipelineResult:
    completed: bool
    ran: List[str] = field(default_factory=list)
    failed: List[str] = field(default_factory=list)
    skipped: List[str] = field(default_factory=list)
    fatal_step: Optional[str] = None

    def summary(self) -> dict[str, Any]:
        return {
            "ran": list(self.ran),
            "failed": list(self.failed),
            "skipped": list(self.skipped),
            "fatal_step": self.fatal_step,
        }


def run_pipeline(ctx: StepCtx, steps: Sequence[Step]) -> PipelineResult:
    """Run steps in order; stop on the first fatal failure, carry on past recoverable ones."""

    result = PipelineResult(completed=False)
    current_phase: Optional[str] = None

    for step in steps:
        if step.phase != current_phase:
            current_phase = step.phase
            ctx.log.log("INFO", f"=== Phase: {current_phase} ===")

        if not step.applies(ctx.facts):
            if step.skip_message:
                ctx.log.log_msg(step.skip_message)
            result.skipped.append(step.step_id)
            continue

        if step.title:
            ctx.log.log_msg(step.title)

        try:
            ok = bool(step.run(ctx))
        except Exception as e:
            ctx.log.exception(f"Step {step.step_id} raised {type(e).__name__}: {e}")
            ok = False

        result.ran.append(step.step_id)
        if ok:
            continue

        result.failed.append(step.step_id)
        if step.criticality is Criticality.FATAL:
            ctx.log.error(f"Fatal step {step.step_id} failed, stopping.", console=True)
            result.fatal_step = step.step_id
            return result

        ctx.log.warn(f"Step {step.step_id} did not complete cleanly, continuing. See {ctx.run.log_path}")

    result.completed = True
    return result
