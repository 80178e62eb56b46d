from __future__ import annotations

import shlex

from ..lib.pkg import dnf_install, rpm_install
from ..pipeline import Step, StepCtx


class MicrosoftFontsStep(Step):
    step_id = "50_microsoft_fonts"
    phase = "fonts"
    title = "Install Microsoft fonts :"

    def run(self, ctx: StepCtx) -> bool:
        fonts = ctx.cfg.section("fonts")
        # mkfontscale, mkfontdir and xset are needed by the installer's scriptlets.
        deps = dnf_install(ctx.runner, ctx.cfg.packages("fonts", "microsoft_dependencies"))
        if deps is not None and not deps.ok:
            ctx.log.log_msg("Failed to install Microsoft fonts dependencies.")
            return False

        package = str(fonts.get("microsoft_installer_package") or "msttcore-fonts-installer")
        if ctx.runner.probe(f"rpm -q {shlex.quote(package)}").exit_code == 0:
            ctx.log.log_msg(f"{package} already exists, skipping.")
            return True

        r = rpm_install(ctx.runner, str(fonts["microsoft_installer_rpm"]))
        if r.ok:
            ctx.log.log_msg("Microsoft fonts installed successfully.")
            return True
        ctx.log.log_msg(f"Failed to install Microsoft fonts ({r.exit_code} package(s) failed).")
        return False


class VariousFontsStep(Step):
    step_id = "51_various_fonts"
    phase = "fonts"
    title = (
        "Installing fonts (Google Roboto, Mozilla Fira, dejavu, liberation, Google Noto "
        "Emoji-sans-serif, Adobe Source, Awesome, Google Droid):"
    )

    def run(self, ctx: StepCtx) -> bool:
        r = dnf_install(ctx.runner, ctx.cfg.packages("fonts", "packages"))
        return r is None or r.ok
