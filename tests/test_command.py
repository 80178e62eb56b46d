from __future__ import annotations

import io

import pytest

from glf_provision.lib.command import (
    CommandRunner,
    ExitOutcome,
    classify_dnf_check_update,
    classify_fwupd,
)
from glf_provision.logging_utils import RunLog

from .conftest import error_entries, make_ctx, read_log


def test_success_returns_ok_and_logs_command_once(run_ctx, runner):
    r = runner.run("true")

    assert r.ok
    assert r.exit_code == 0
    text = read_log(run_ctx)
    assert text.count("INFO: Executing: true") == 1
    assert error_entries(run_ctx) == []


def test_failure_logs_exactly_one_error_with_command_text(run_ctx, runner):
    r = runner.run("exit 3")

    assert not r.ok
    assert r.exit_code == 3
    errors = error_entries(run_ctx)
    assert len(errors) == 1
    assert "Failed command: exit 3" in errors[0]


def test_failure_does_not_raise(runner):
    r = runner.run("definitely-not-a-command-glf")
    assert r.exit_code == 127
    assert not r.ok


def test_combined_output_goes_to_log_only_when_quiet(run_ctx, runner, console):
    r = runner.run("echo out; echo err >&2")

    assert r.output.splitlines() == ["out", "err"]
    text = read_log(run_ctx)
    assert "\nout\n" in text
    assert "\nerr\n" in text
    assert console.getvalue() == ""


def test_verbose_echoes_output_live(tmp_path):
    ctx = make_ctx(tmp_path, verbose=True)
    console = io.StringIO()
    with RunLog(ctx, stream=console) as log:
        CommandRunner(ctx, log).run("echo visible")

    assert "visible\n" in console.getvalue()
    text = read_log(ctx)
    assert "Executing: echo visible (Verbose)" in text
    assert "\nvisible\n" in text


def test_commands_run_with_c_locale(runner):
    assert runner.run('echo "$LC_ALL"').output == "C"


def test_extra_ok_codes_are_not_errors(run_ctx, runner):
    r = runner.run("exit 2", ok_codes=(0, 2))
    assert r.ok
    assert error_entries(run_ctx) == []


def test_probe_never_logs_errors(run_ctx, runner):
    r = runner.probe("echo 0; exit 1")
    assert r.exit_code == 1
    assert r.output == "0"
    assert "INFO: Probing: echo 0; exit 1" in read_log(run_ctx)
    assert error_entries(run_ctx) == []


def test_dry_run_does_not_execute(tmp_path):
    ctx = make_ctx(tmp_path, dry_run=True)
    marker = tmp_path / "touched"
    with RunLog(ctx, stream=io.StringIO()) as log:
        r = CommandRunner(ctx, log).run(f"touch {marker}; false")

    assert r.ok
    assert not marker.exists()
    assert "(dry run)" in read_log(ctx)


def test_dry_run_still_answers_read_only_questions(tmp_path):
    ctx = make_ctx(tmp_path, dry_run=True)
    with RunLog(ctx, stream=io.StringIO()) as log:
        r = CommandRunner(ctx, log).probe("echo not-installed; exit 1")

    assert r.exit_code == 1
    assert r.output == "not-installed"


def test_privileged_prefix(tmp_path):
    ctx = make_ctx(tmp_path, privilege_command="sudo")
    with RunLog(ctx, stream=io.StringIO()) as log:
        assert CommandRunner(ctx, log).privileged("dconf update") == "sudo dconf update"

    ctx = make_ctx(tmp_path, privilege_command="")
    with RunLog(ctx, stream=io.StringIO()) as log:
        assert CommandRunner(ctx, log).privileged("dconf update") == "dconf update"


@pytest.mark.parametrize(
    "code,outcome",
    [
        (0, ExitOutcome.SUCCESS),
        (1, ExitOutcome.FAILURE),
        (2, ExitOutcome.NOTHING_TO_DO),
        (3, ExitOutcome.NOT_FOUND),
        (7, ExitOutcome.FAILURE),
    ],
)
def test_classify_fwupd(code, outcome):
    assert classify_fwupd(code) is outcome


def test_classify_dnf_check_update():
    assert classify_dnf_check_update(0) is ExitOutcome.SUCCESS
    assert classify_dnf_check_update(100) is ExitOutcome.UPDATES_AVAILABLE
    assert classify_dnf_check_update(1) is ExitOutcome.FAILURE
