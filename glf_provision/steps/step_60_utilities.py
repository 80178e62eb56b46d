from __future__ import annotations

from ..lib.pkg import dnf_group_update, dnf_install, dnf_swap, flatpak_install
from ..pipeline import Step, StepCtx, all_ok


class CompressionToolsStep(Step):
    step_id = "60_compression_tools"
    phase = "utilities"
    title = "Installing compression tools (7zip, rar, ace, lha):"

    def run(self, ctx: StepCtx) -> bool:
        return all_ok([dnf_install(ctx.runner, ctx.cfg.packages("utilities", "compression"))])


class DesktopToolsStep(Step):
    step_id = "61_desktop_tools"
    phase = "utilities"
    title = "Installing OpenRGB, Fastfetch, Flatseal and uBlock Origin for Firefox:"

    def run(self, ctx: StepCtx) -> bool:
        remote = str(ctx.cfg.section("repositories").get("flathub_name") or "flathub")
        return all_ok(
            [
                dnf_install(ctx.runner, ctx.cfg.packages("utilities", "desktop_tools")),
                flatpak_install(ctx.runner, remote, ctx.cfg.packages("utilities", "flatpaks")),
            ]
        )


class MultimediaStep(Step):
    step_id = "62_multimedia"
    phase = "utilities"
    title = "Setting up multimedia support:"

    def run(self, ctx: StepCtx) -> bool:
        util = ctx.cfg.section("utilities")
        results = []

        swap = util.get("multimedia_swap") or []
        if swap:
            if not isinstance(swap, list) or len(swap) != 2:
                raise ValueError("utilities.multimedia_swap must be [old, new]")
            results.append(dnf_swap(ctx.runner, str(swap[0]), str(swap[1]), allow_erasing=True))

        for group in util.get("multimedia_groups") or []:
            if not isinstance(group, dict) or not group.get("name"):
                raise ValueError(f"utilities.multimedia_groups entries need a name, got: {group!r}")
            results.append(
                dnf_group_update(ctx.runner, str(group["name"]), options=str(group.get("options") or ""))
            )
        return all_ok(results)


class NonfreeFirmwareStep(Step):
    """Tainted firmware: no clear redistribution status, allowed for hardware interoperability."""

    step_id = "63_nonfree_firmware"
    phase = "utilities"
    title = "Installing various non-free firmware packages (b43, broadcom-bt, dvb, nouveau):"

    def run(self, ctx: StepCtx) -> bool:
        util = ctx.cfg.section("utilities")
        repo = str(util.get("nonfree_firmware_repo") or "rpmfusion-nonfree-tainted")
        pattern = str(util.get("nonfree_firmware_pattern") or "*-firmware")
        return all_ok([dnf_install(ctx.runner, [pattern], repo=repo)])
