from __future__ import annotations

from ..lib.facts import HostFacts, RootFilesystem
from ..lib.pkg import dnf_install
from ..pipeline import Step, StepCtx, all_ok


class BtrfsToolsStep(Step):
    step_id = "80_btrfs_tools"
    phase = "filesystem"
    title = "Btrfs format detected for root partition. Installing btrfs-assistant :"

    def applies(self, facts: HostFacts) -> bool:
        return facts.root_filesystem is RootFilesystem.BTRFS

    def run(self, ctx: StepCtx) -> bool:
        return all_ok([dnf_install(ctx.runner, ctx.cfg.packages("filesystem", "btrfs_packages"))])
