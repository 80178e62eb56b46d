from __future__ import annotations

import datetime as dt
import os
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Optional


def default_log_dir() -> str:
    """Directory of the running program (where the log file lands by default).

    Falls back to the current directory when the program directory is not
    writable, e.g. a console script installed under /usr/local/bin.
    """
    argv0 = sys.argv[0] if sys.argv and sys.argv[0] else ""
    if not argv0:
        return str(Path.cwd())
    program_dir = Path(argv0).resolve().parent
    if not os.access(program_dir, os.W_OK):
        return str(Path.cwd())
    return str(program_dir)


def log_file_name(program_name: str, started_at: dt.datetime) -> str:
    return f"logfile_{program_name}_{started_at.strftime('%Y%m%d-%H%M%S')}.log"


@dataclass(frozen=True)
class RunContext:
    """Immutable description of one provisioning run."""

    verbose: bool
    log_path: str
    started_at: dt.datetime
    dry_run: bool = False
    program_name: str = "Fedora_GLF"
    privilege_command: str = "sudo"


def new_run_context(
    *,
    program_name: str = "Fedora_GLF",
    log_dir: Optional[str] = None,
    verbose: bool = False,
    dry_run: bool = False,
    privilege_command: str = "sudo",
    started_at: Optional[dt.datetime] = None,
) -> RunContext:
    started = started_at or dt.datetime.now()
    directory = Path(log_dir or default_log_dir())
    return RunContext(
        verbose=verbose,
        log_path=str(directory / log_file_name(program_name, started)),
        started_at=started,
        dry_run=dry_run,
        program_name=program_name,
        privilege_command=privilege_command,
    )
