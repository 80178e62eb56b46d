from __future__ import annotations

import shlex

from ..pipeline import Criticality, Step, StepCtx


class CheckNetworkStep(Step):
    step_id = "10_check_network"
    phase = "connectivity"
    title = "Checking network connection:"
    criticality = Criticality.FATAL

    def run(self, ctx: StepCtx) -> bool:
        host = ctx.cfg.network_check_host
        r = ctx.runner.run(f"ping -c 1 {shlex.quote(host)}")
        if not r.ok:
            ctx.log.log_msg("No network connection. Please check your internet connection and try again.")
            return False
        ctx.log.log_msg("Network connection is available.")
        return True
