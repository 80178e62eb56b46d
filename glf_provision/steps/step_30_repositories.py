from __future__ import annotations

from ..lib.pkg import dnf_enable_repo, dnf_install, flatpak_remote_add
from ..pipeline import Step, StepCtx, all_ok


class RpmFusionStep(Step):
    step_id = "30_rpmfusion"
    phase = "repositories"
    title = "Setting up RPM Fusion repositories:"

    def run(self, ctx: StepCtx) -> bool:
        release = ctx.facts.fedora_release
        if not release:
            ctx.log.log_msg("Unable to determine the Fedora release, skipping RPM Fusion setup.")
            return False

        repos = ctx.cfg.section("repositories")
        urls = [
            str(repos["rpmfusion_free"]).format(release=release),
            str(repos["rpmfusion_nonfree"]).format(release=release),
        ]
        results = [dnf_install(ctx.runner, urls)]
        for repo_id in ctx.cfg.packages("repositories", "enable_repos"):
            results.append(dnf_enable_repo(ctx.runner, repo_id))
        results.append(dnf_install(ctx.runner, ctx.cfg.packages("repositories", "extra_release_packages")))
        return all_ok(results)


class FlathubStep(Step):
    step_id = "31_flathub"
    phase = "repositories"
    title = "Adding Flathub repository:"

    def run(self, ctx: StepCtx) -> bool:
        repos = ctx.cfg.section("repositories")
        name = str(repos.get("flathub_name") or "flathub")
        url = str(repos.get("flathub_url") or "https://dl.flathub.org/repo/flathub.flatpakrepo")
        # --if-not-exists makes a re-run a no-op.
        return flatpak_remote_add(ctx.runner, name, url).ok
