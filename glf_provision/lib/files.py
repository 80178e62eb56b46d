from __future__ import annotations

import enum
import re
import shlex
from pathlib import Path

from .command import CommandRunner


class Mutation(enum.Enum):
    APPLIED = "applied"
    ALREADY_PRESENT = "already_present"
    FAILED = "failed"


def config_has_key(path: str, key: str) -> bool:
    """True if an ini-style file already sets `key` (any value)."""

    p = Path(path)
    if not p.exists():
        return False
    pattern = re.compile(rf"^\s*{re.escape(key)}\s*=")
    return any(pattern.match(line) for line in p.read_text(encoding="utf-8", errors="replace").splitlines())


def ensure_config_line(runner: CommandRunner, path: str, key: str, value: str) -> Mutation:
    """Append `key=value` to path unless some line already sets key."""

    if config_has_key(path, key):
        runner.log.log_msg(f"{key} already exists in {path}")
        return Mutation.ALREADY_PRESENT

    line = f"{key}={value}"
    tee = runner.privileged(f"tee -a {shlex.quote(path)}")
    r = runner.run(f"printf '%s\\n' {shlex.quote(line)} | {tee} > /dev/null")
    if not r.ok:
        return Mutation.FAILED
    runner.log.log_msg(f"Added {line} to {path}")
    return Mutation.APPLIED


def write_file_once(runner: CommandRunner, path: str, content: str) -> Mutation:
    """Create path with content unless it already exists; never overwrites."""

    if Path(path).exists():
        runner.log.log_msg(f"{path} already exists")
        return Mutation.ALREADY_PRESENT

    parent = str(Path(path).parent)
    r = runner.run(runner.privileged(f"mkdir -p {shlex.quote(parent)}"))
    if not r.ok:
        return Mutation.FAILED
    tee = runner.privileged(f"tee {shlex.quote(path)}")
    r = runner.run(f"printf '%s' {shlex.quote(content)} | {tee} > /dev/null")
    if not r.ok:
        return Mutation.FAILED
    runner.log.log_msg(f"Wrote {path}")
    return Mutation.APPLIED
