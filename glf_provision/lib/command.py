from __future__ import annotations

import enum
import os
import subprocess
from dataclasses import dataclass
from typing import List, Sequence

from ..context import RunContext
from ..logging_utils import RunLog

SHELL = "/bin/bash"


@dataclass(frozen=True)
class CommandResult:
    command: str
    exit_code: int
    output: str
    ok_codes: tuple = (0,)

    @property
    def ok(self) -> bool:
        return self.exit_code in self.ok_codes


class ExitOutcome(enum.Enum):
    SUCCESS = "success"
    FAILURE = "failure"
    NOTHING_TO_DO = "nothing_to_do"
    NOT_FOUND = "not_found"
    UPDATES_AVAILABLE = "updates_available"


def classify_fwupd(exit_code: int) -> ExitOutcome:
    """fwupdmgr(1): 0 ok, 1 generic failure, 2 nothing to do, 3 resource not found."""
    return {
        0: ExitOutcome.SUCCESS,
        2: ExitOutcome.NOTHING_TO_DO,
        3: ExitOutcome.NOT_FOUND,
    }.get(exit_code, ExitOutcome.FAILURE)


def classify_dnf_check_update(exit_code: int) -> ExitOutcome:
    """dnf check-update: 0 up to date, 100 updates available, anything else an error."""
    if exit_code == 0:
        return ExitOutcome.SUCCESS
    if exit_code == 100:
        return ExitOutcome.UPDATES_AVAILABLE
    return ExitOutcome.FAILURE


class CommandRunner:
    """Run shell command lines with consistent logging.

    - Always logs the command before running it.
    - Combined stdout/stderr goes to the log file, and to the operator too when verbose.
    - A failing command is logged once as ERROR and returned; the caller decides what it means.
    """

    def __init__(self, ctx: RunContext, log: RunLog) -> None:
        self.ctx = ctx
        self.log = log

    def privileged(self, command: str) -> str:
        prefix = self.ctx.privilege_command
        return f"{prefix} {command}" if prefix else command

    def run(self, command: str, *, ok_codes: Sequence[int] = (0,)) -> CommandResult:
        codes = tuple(ok_codes)
        note = ""
        if self.ctx.verbose:
            note = " (Verbose)"
        if self.ctx.dry_run:
            note += " (dry run)"
        self.log.log("INFO", f"Executing: {command}{note}")

        if self.ctx.dry_run:
            return CommandResult(command=command, exit_code=0, output="", ok_codes=codes)

        exit_code, output = self._execute(command, echo=self.ctx.verbose)
        result = CommandResult(command=command, exit_code=exit_code, output=output, ok_codes=codes)
        if not result.ok:
            self.log.error(f"Failed command: {command} (exit {exit_code})")
        return result

    def probe(self, command: str) -> CommandResult:
        """Run a read-only inspection command; a non-zero status is an answer, not an error."""

        # Read-only, so it runs in dry run too.
        self.log.log("INFO", f"Probing: {command}")
        exit_code, output = self._execute(command, echo=False)
        return CommandResult(command=command, exit_code=exit_code, output=output)

    def _execute(self, command: str, *, echo: bool) -> tuple:
        lines: List[str] = []
        try:
            p = subprocess.Popen(
                [SHELL, "-c", command],
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                text=True,
                errors="replace",
                env=dict(os.environ, LC_ALL="C"),
            )
        except OSError as e:
            msg = f"{SHELL}: {e}"
            self.log.write_output(msg, echo=echo)
            return 127, msg

        if p.stdout is None:
            return p.wait(), ""
        with p.stdout:
            for line in p.stdout:
                line = line.rstrip("\n")
                lines.append(line)
                self.log.write_output(line, echo=echo)
        exit_code = p.wait()
        return exit_code, "\n".join(lines)
