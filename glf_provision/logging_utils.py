from __future__ import annotations

import logging
import subprocess
import sys
from pathlib import Path
from typing import IO, Optional, Union

from .context import RunContext

ENTRY_FORMAT = "[%(asctime)s] %(levelname)s: %(message)s"
ENTRY_DATEFMT = "%Y-%m-%d %H:%M:%S"

_LEVELS = {
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
}


class _EntryFormatter(logging.Formatter):
    """Log file format; raw command output is written without an entry prefix."""

    def format(self, record: logging.LogRecord) -> str:
        if getattr(record, "glf_raw", False):
            return record.getMessage()
        return super().format(record)


class _ConsoleFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        msg = record.getMessage()
        if record.levelno >= logging.WARNING and not getattr(record, "glf_raw", False):
            return f"[!] {msg}"
        return msg


class _ConsoleFilter(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:
        return bool(getattr(record, "glf_console", False))


def revision_marker(cwd: Optional[str] = None) -> str:
    """Return the git HEAD of the checkout the program runs from, if any."""

    where = cwd or str(Path(__file__).resolve().parent)
    try:
        p = subprocess.run(
            ["git", "rev-parse", "HEAD"],
            cwd=where,
            text=True,
            stdout=subprocess.PIPE,
            stderr=subprocess.DEVNULL,
        )
    except OSError:
        return "Git not available"
    head = (p.stdout or "").strip()
    if p.returncode != 0 or not head:
        return "Git not available"
    return head


class RunLog:
    """Append-only log file for a single run, mirrored to the operator on demand.

    Creating a RunLog creates the log file; an OSError here means the run
    cannot be recorded and must not start.
    """

    def __init__(self, ctx: RunContext, *, stream: Optional[IO[str]] = None) -> None:
        self.ctx = ctx
        self.path = ctx.log_path

        Path(self.path).parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(self.path, mode="a", encoding="utf-8")
        file_handler.setFormatter(_EntryFormatter(fmt=ENTRY_FORMAT, datefmt=ENTRY_DATEFMT))

        console = logging.StreamHandler(stream or sys.stdout)
        console.setFormatter(_ConsoleFormatter())
        console.addFilter(_ConsoleFilter())

        self._handlers: list[logging.Handler] = [file_handler, console]
        self._logger = logging.getLogger(f"glf_provision.run.{ctx.started_at:%Y%m%d%H%M%S%f}.{id(self)}")
        self._logger.setLevel(logging.INFO)
        self._logger.propagate = False
        for h in self._handlers:
            self._logger.addHandler(h)

        self.write_output(f"Commit hash: {revision_marker()}")
        self.write_output(f"Log file: {self.path}")
        self.write_output("")

    def log(self, level: Union[str, int], message: str) -> None:
        lvl = _LEVELS.get(level.upper(), logging.INFO) if isinstance(level, str) else int(level)
        self._logger.log(lvl, message)

    def log_msg(self, message: str) -> None:
        """Log at INFO and show the same text to the operator."""
        self._logger.info(message, extra={"glf_console": True})

    def warn(self, message: str) -> None:
        self._logger.warning(message, extra={"glf_console": True})

    def error(self, message: str, *, console: bool = False) -> None:
        self._logger.error(message, extra={"glf_console": console})

    def exception(self, message: str) -> None:
        self._logger.error(message, exc_info=True, extra={"glf_console": True})

    def write_output(self, text: str, *, echo: bool = False) -> None:
        self._logger.info(text, extra={"glf_raw": True, "glf_console": echo})

    def close(self) -> None:
        for h in self._handlers:
            self._logger.removeHandler(h)
            if isinstance(h, logging.FileHandler):
                h.close()
            else:
                h.flush()
        self._handlers = []

    def __enter__(self) -> "RunLog":
        return self

    def __exit__(self, *exc) -> None:
        self.close()
