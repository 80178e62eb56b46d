from __future__ import annotations

import shlex
from typing import Sequence

from .command import CommandResult, CommandRunner


def _args(items: Sequence[str]) -> str:
    # Globs such as 'google-roboto*' are for dnf to expand, not the shell.
    return " ".join(shlex.quote(i) for i in items)


def dnf_install(
    runner: CommandRunner,
    packages: Sequence[str],
    *,
    repo: str | None = None,
) -> CommandResult | None:
    if not packages:
        return None
    argv = "dnf"
    if repo:
        argv += f" --repo={shlex.quote(repo)}"
    return runner.run(runner.privileged(f"{argv} install -y {_args(packages)}"))


def dnf_swap(runner: CommandRunner, old: str, new: str, *, allow_erasing: bool = False) -> CommandResult:
    cmd = f"dnf swap -y {shlex.quote(old)} {shlex.quote(new)}"
    if allow_erasing:
        cmd += " --allowerasing"
    return runner.run(runner.privileged(cmd))


def dnf_group_update(runner: CommandRunner, group: str, *, options: str = "") -> CommandResult:
    cmd = f"dnf groupupdate -y {shlex.quote(group)}"
    if options:
        cmd += f" {options}"
    return runner.run(runner.privileged(cmd))


def dnf_enable_repo(runner: CommandRunner, repo_id: str) -> CommandResult:
    return runner.run(runner.privileged(f"dnf config-manager -y --enable {shlex.quote(repo_id)}"))


def dnf_check_update(runner: CommandRunner) -> CommandResult:
    # 100 means "updates available": not a command failure, the caller decides.
    return runner.run("dnf check-update --refresh", ok_codes=(0, 100))


def rpm_install(runner: CommandRunner, url: str) -> CommandResult:
    """Install a single RPM; rpm exits with the number of failed packages (capped at 255)."""
    return runner.run(runner.privileged(f"rpm -i {shlex.quote(url)}"))


def flatpak_remote_add(runner: CommandRunner, name: str, url: str) -> CommandResult:
    return runner.run(
        runner.privileged(f"flatpak remote-add --if-not-exists {shlex.quote(name)} {shlex.quote(url)}")
    )


def flatpak_install(runner: CommandRunner, remote: str, app_ids: Sequence[str]) -> CommandResult | None:
    if not app_ids:
        return None
    return runner.run(f"flatpak install -y --noninteractive {shlex.quote(remote)} {_args(app_ids)}")
