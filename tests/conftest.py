from __future__ import annotations

import datetime as dt
import io
from pathlib import Path
from typing import Dict, List, Sequence, Tuple

import pytest

from glf_provision.config import load_config
from glf_provision.context import RunContext, new_run_context
from glf_provision.lib.command import CommandRunner
from glf_provision.lib.facts import HostFacts
from glf_provision.logging_utils import RunLog
from glf_provision.pipeline import StepCtx

STARTED = dt.datetime(2024, 4, 13, 9, 14, 44)


class ScriptedRunner(CommandRunner):
    """CommandRunner whose external tools are faked.

    The first response whose needle occurs in the command wins; unmatched
    commands succeed with no output. Commands starting with a passthrough
    prefix really run (file writes in tests go through printf/tee).
    """

    def __init__(
        self,
        ctx: RunContext,
        log: RunLog,
        responses: Sequence[Tuple[str, int, str]] = (),
        passthrough: Sequence[str] = ("printf", "mkdir"),
    ) -> None:
        super().__init__(ctx, log)
        self.responses = list(responses)
        self.passthrough = tuple(passthrough)
        self.commands: List[str] = []

    def _execute(self, command: str, *, echo: bool) -> tuple:
        self.commands.append(command)
        if command.startswith(self.passthrough):
            return super()._execute(command, echo=echo)
        for needle, code, output in self.responses:
            if needle in command:
                if output:
                    self.log.write_output(output, echo=echo)
                return code, output
        return 0, ""


def read_log(ctx: RunContext) -> str:
    return Path(ctx.log_path).read_text(encoding="utf-8")


def error_entries(ctx: RunContext) -> List[str]:
    return [ln for ln in read_log(ctx).splitlines() if "] ERROR: " in ln]


def make_ctx(tmp_path: Path, **kwargs) -> RunContext:
    kwargs.setdefault("started_at", STARTED)
    kwargs.setdefault("privilege_command", "")
    return new_run_context(log_dir=str(tmp_path), **kwargs)


@pytest.fixture
def console():
    return io.StringIO()


@pytest.fixture
def run_ctx(tmp_path):
    return make_ctx(tmp_path)


@pytest.fixture
def run_log(run_ctx, console):
    log = RunLog(run_ctx, stream=console)
    yield log
    log.close()


@pytest.fixture
def runner(run_ctx, run_log):
    return CommandRunner(run_ctx, run_log)


@pytest.fixture
def local_overrides(tmp_path) -> Dict[str, dict]:
    """Point every file the steps touch into tmp_path and drop privilege escalation."""
    return {
        "privilege_command": "",
        "system": {"dnf_conf": str(tmp_path / "etc" / "dnf.conf")},
        "desktop": {"dconf_extensions_file": str(tmp_path / "dconf" / "local.d" / "00-extensions")},
    }


@pytest.fixture
def cfg(local_overrides):
    return load_config(overrides=local_overrides)


@pytest.fixture
def step_ctx(run_ctx, cfg, run_log, runner):
    return StepCtx(run=run_ctx, cfg=cfg, runner=runner, log=run_log, facts=HostFacts(fedora_release="40"))
