from __future__ import annotations

import argparse
import sys
from typing import IO, Callable, List, Optional, Sequence

from .config import ProvisionConfig, load_config
from .context import RunContext, new_run_context
from .lib.command import CommandRunner
from .lib.facts import HostFacts, detect_host_facts
from .logging_utils import RunLog
from .pipeline import Step, StepCtx, run_pipeline
from .steps import (
    BtrfsToolsStep,
    CheckNetworkStep,
    CompressionToolsStep,
    DesktopToolsStep,
    DnfTuningStep,
    FirmwareUpdateStep,
    FlathubStep,
    GnomeExtensionsStep,
    IntelMediaDriverStep,
    MesaFreeworldStep,
    MicrosoftFontsStep,
    MultimediaStep,
    NonfreeFirmwareStep,
    NvidiaDriverStep,
    RocmStep,
    RpmFusionStep,
    SystemUpdateCheckStep,
    VariousFontsStep,
)

EXIT_OK = 0
EXIT_FATAL = 1


def build_steps() -> List[Step]:
    """Phases in order: connectivity, system, repositories, gpu, fonts, utilities, desktop, filesystem."""
    return [
        CheckNetworkStep(),
        SystemUpdateCheckStep(),
        DnfTuningStep(),
        FirmwareUpdateStep(),
        RpmFusionStep(),
        FlathubStep(),
        NvidiaDriverStep(),
        MesaFreeworldStep(),
        RocmStep(),
        IntelMediaDriverStep(),
        MicrosoftFontsStep(),
        VariousFontsStep(),
        CompressionToolsStep(),
        DesktopToolsStep(),
        MultimediaStep(),
        NonfreeFirmwareStep(),
        GnomeExtensionsStep(),
        BtrfsToolsStep(),
    ]


def build_context(
    cfg: ProvisionConfig,
    *,
    verbose: Optional[bool] = None,
    dry_run: bool = False,
    log_dir: Optional[str] = None,
) -> RunContext:
    return new_run_context(
        program_name=cfg.program_name,
        log_dir=log_dir or cfg.log_dir,
        verbose=cfg.verbose if verbose is None else verbose,
        dry_run=dry_run,
        privilege_command=cfg.privilege_command,
    )


def run(
    cfg: ProvisionConfig,
    *,
    verbose: Optional[bool] = None,
    dry_run: bool = False,
    log_dir: Optional[str] = None,
    facts: Optional[HostFacts] = None,
    steps: Optional[Sequence[Step]] = None,
    stream: Optional[IO[str]] = None,
    run_ctx: Optional[RunContext] = None,
    runner_factory: Callable[[RunContext, RunLog], CommandRunner] = CommandRunner,
) -> int:
    """Run the whole provisioning sequence once and return the process exit code."""

    ctx = run_ctx or build_context(cfg, verbose=verbose, dry_run=dry_run, log_dir=log_dir)

    # Nothing runs unlogged.
    try:
        log = RunLog(ctx, stream=stream)
    except OSError as e:
        print(f"Failed to create log file: {e}", file=sys.stderr)
        return EXIT_FATAL

    with log:
        runner = runner_factory(ctx, log)
        host = facts if facts is not None else detect_host_facts(runner)
        step_ctx = StepCtx(run=ctx, cfg=cfg, runner=runner, log=log, facts=host)

        result = run_pipeline(step_ctx, list(steps) if steps is not None else build_steps())
        log.log("INFO", f"Summary: {result.summary()}")

        if not result.completed:
            log.log_msg(f"[X] Provisioning aborted at {result.fatal_step}. See {ctx.log_path}")
            return EXIT_FATAL

        if result.failed:
            log.warn(f"Some steps did not complete cleanly: {', '.join(result.failed)}")
        log.log_msg("[X] Provisioning completed. Please reboot.")
        return EXIT_OK


def main(argv: Optional[list[str]] = None) -> int:
    p = argparse.ArgumentParser(
        prog="glf-provision",
        description="Post-installation setup of Fedora for gaming and content creation.",
    )
    p.add_argument("--config", default=None, help="YAML file merged over the built-in defaults")
    p.add_argument("--verbose", action="store_true", default=None, help="Echo command output live")
    p.add_argument("--dry-run", action="store_true", help="Log commands without running them")
    p.add_argument(
        "--log-dir",
        default=None,
        help="Directory for the run log (default: program directory if writable, else the current directory)",
    )

    args = p.parse_args(argv)

    try:
        cfg = load_config(args.config)
    except (OSError, ValueError) as e:
        print(f"Invalid configuration: {e}", file=sys.stderr)
        return EXIT_FATAL

    return run(cfg, verbose=args.verbose, dry_run=bool(args.dry_run), log_dir=args.log_dir)


if __name__ == "__main__":
    raise SystemExit(main())
