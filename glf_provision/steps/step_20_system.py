from __future__ import annotations

from ..lib.command import ExitOutcome, classify_dnf_check_update, classify_fwupd
from ..lib.files import Mutation, ensure_config_line
from ..lib.pkg import dnf_check_update
from ..pipeline import Criticality, Step, StepCtx


class SystemUpdateCheckStep(Step):
    """The rest of the sequence assumes an up to date system."""

    step_id = "20_system_update_check"
    phase = "system"
    title = "Checking for system updates:"
    criticality = Criticality.FATAL

    def run(self, ctx: StepCtx) -> bool:
        r = dnf_check_update(ctx.runner)
        outcome = classify_dnf_check_update(r.exit_code)
        if outcome is ExitOutcome.SUCCESS:
            ctx.log.log_msg("System is up to date.")
            return True
        if outcome is ExitOutcome.UPDATES_AVAILABLE:
            ctx.log.log_msg(
                "[X] The script requires an updated system. Please update and reboot, then rerun the script."
            )
            return False
        ctx.log.log_msg("[X] Unable to check for system updates.")
        return False


class DnfTuningStep(Step):
    step_id = "21_dnf_tuning"
    phase = "system"
    title = "Optimizing DNF:"
    criticality = Criticality.FATAL

    def run(self, ctx: StepCtx) -> bool:
        system = ctx.cfg.section("system")
        conf = str(system.get("dnf_conf") or "/etc/dnf/dnf.conf")
        tuning = system.get("dnf_tuning") or {}
        if not isinstance(tuning, dict):
            raise ValueError("config system.dnf_tuning must be a mapping")

        ok = True
        for key, value in tuning.items():
            if ensure_config_line(ctx.runner, conf, str(key), str(value)) is Mutation.FAILED:
                ctx.log.error(f"Failed to configure DNF ({key})")
                ok = False
                break
        return ok


class FirmwareUpdateStep(Step):
    step_id = "22_firmware_update"
    phase = "system"
    title = "Firmwares update:"

    def run(self, ctx: StepCtx) -> bool:
        if not bool(ctx.cfg.section("system").get("firmware_update", True)):
            ctx.log.log_msg("Firmware update disabled in configuration, skipping.")
            return True

        runner = ctx.runner
        ok = runner.run(runner.privileged("fwupdmgr get-devices"), ok_codes=(0, 2)).ok
        ok = runner.run(runner.privileged("fwupdmgr refresh --force"), ok_codes=(0, 2)).ok and ok

        # get-updates answers 2 when there is nothing to install.
        r = runner.run(runner.privileged("fwupdmgr get-updates"), ok_codes=(0, 2, 3))
        outcome = classify_fwupd(r.exit_code)
        if outcome in (ExitOutcome.NOTHING_TO_DO, ExitOutcome.NOT_FOUND):
            ctx.log.log_msg("No firmware updates available.")
            return ok
        if outcome is ExitOutcome.FAILURE:
            ctx.log.log_msg("Failed to check for firmware updates.")
            return False

        r = runner.run(runner.privileged("fwupdmgr update -y --no-reboot-check"), ok_codes=(0, 2))
        outcome = classify_fwupd(r.exit_code)
        if outcome is ExitOutcome.SUCCESS:
            ctx.log.log_msg("Firmware updated successfully.")
        elif outcome is ExitOutcome.NOTHING_TO_DO:
            ctx.log.log_msg("No firmware updates available.")
        else:
            ctx.log.log_msg("Failed to update firmware.")
            return False
        return ok
