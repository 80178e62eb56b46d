from __future__ import annotations

from ..lib.facts import GpuVendor, HostFacts
from ..lib.pkg import dnf_install, dnf_swap
from ..pipeline import Step, StepCtx, all_ok


class NvidiaDriverStep(Step):
    step_id = "40_nvidia_driver"
    phase = "gpu"
    title = "Configuring for NVIDIA GPUs (2014+):"
    skip_message = "No NVIDIA GPU detected, skipping NVIDIA driver installation."

    def applies(self, facts: HostFacts) -> bool:
        return facts.has_gpu(GpuVendor.NVIDIA)

    def run(self, ctx: StepCtx) -> bool:
        return all_ok(
            [
                dnf_install(ctx.runner, ctx.cfg.packages("gpu", "nvidia_driver")),
                dnf_install(ctx.runner, ctx.cfg.packages("gpu", "nvidia_extras")),
            ]
        )


class MesaFreeworldStep(Step):
    """Swap Fedora's Mesa VA-API/VDPAU drivers for the RPM Fusion builds with patented codecs.

    Runs once even when both an AMD and an Intel GPU are present.
    """

    step_id = "41_mesa_freeworld"
    phase = "gpu"
    title = "Codecs for Mesa3D :"

    def applies(self, facts: HostFacts) -> bool:
        return facts.has_gpu(GpuVendor.AMD) or facts.has_gpu(GpuVendor.INTEL)

    def run(self, ctx: StepCtx) -> bool:
        swaps = ctx.cfg.section("gpu").get("mesa_swaps") or []
        results = []
        for pair in swaps:
            if not isinstance(pair, list) or len(pair) != 2:
                raise ValueError(f"gpu.mesa_swaps entries must be [old, new], got: {pair!r}")
            results.append(dnf_swap(ctx.runner, str(pair[0]), str(pair[1])))
        return all_ok(results)


class RocmStep(Step):
    step_id = "42_rocm"
    phase = "gpu"
    title = "Install ROCm :"

    def applies(self, facts: HostFacts) -> bool:
        return facts.has_gpu(GpuVendor.AMD)

    def run(self, ctx: StepCtx) -> bool:
        return all_ok([dnf_install(ctx.runner, ctx.cfg.packages("gpu", "rocm"))])


class IntelMediaDriverStep(Step):
    step_id = "43_intel_media_driver"
    phase = "gpu"
    title = "Installing Intel media driver :"

    def applies(self, facts: HostFacts) -> bool:
        return facts.has_gpu(GpuVendor.INTEL)

    def run(self, ctx: StepCtx) -> bool:
        return all_ok([dnf_install(ctx.runner, ctx.cfg.packages("gpu", "intel_media"))])
