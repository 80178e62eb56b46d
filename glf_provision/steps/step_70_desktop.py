from __future__ import annotations

from ..lib.facts import HostFacts
from ..lib.files import Mutation, write_file_once
from ..lib.pkg import dnf_install, flatpak_install
from ..pipeline import Step, StepCtx, all_ok


def render_extensions_keyfile(extensions: list[str]) -> str:
    quoted = ", ".join(f"'{e}'" for e in extensions)
    return f"[org/gnome/shell]\nenabled-extensions=[{quoted}]\n"


class GnomeExtensionsStep(Step):
    step_id = "70_gnome_extensions"
    phase = "desktop"
    title = "Installing GNOME Tweaks and essential GNOME Shell extensions:"

    def applies(self, facts: HostFacts) -> bool:
        return facts.gnome_shell_running

    def run(self, ctx: StepCtx) -> bool:
        desktop = ctx.cfg.section("desktop")
        remote = str(ctx.cfg.section("repositories").get("flathub_name") or "flathub")

        results = [
            dnf_install(ctx.runner, ctx.cfg.packages("desktop", "gnome_packages")),
            flatpak_install(ctx.runner, remote, ctx.cfg.packages("desktop", "gnome_flatpaks")),
        ]

        keyfile = str(desktop.get("dconf_extensions_file") or "/etc/dconf/db/local.d/00-extensions")
        extensions = ctx.cfg.packages("desktop", "enabled_extensions")
        ctx.log.log_msg("Setting up system-wide GNOME extensions:")
        change = write_file_once(ctx.runner, keyfile, render_extensions_keyfile(extensions))
        if change is Mutation.APPLIED:
            results.append(ctx.runner.run(ctx.runner.privileged("dconf update")))
        elif change is Mutation.FAILED:
            return False

        return all_ok(results)
