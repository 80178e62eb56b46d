from __future__ import annotations

import pytest

from glf_provision.config import deep_merge, load_config


def test_defaults_load():
    cfg = load_config()
    assert cfg.program_name == "Fedora_GLF"
    assert cfg.privilege_command == "sudo"
    assert cfg.network_check_host == "google.com"
    assert cfg.log_dir is None
    assert not cfg.verbose
    assert "akmod-nvidia" in cfg.packages("gpu", "nvidia_driver")
    assert cfg.section("system")["dnf_tuning"]["max_parallel_downloads"] == "10"


def test_user_file_merges_over_defaults(tmp_path):
    user = tmp_path / "local.yaml"
    user.write_text(
        "verbose: true\n"
        "system:\n"
        "  dnf_tuning:\n"
        "    max_parallel_downloads: '5'\n"
        "fonts:\n"
        "  packages: [liberation-fonts]\n",
        encoding="utf-8",
    )

    cfg = load_config(str(user))

    assert cfg.verbose
    tuning = cfg.section("system")["dnf_tuning"]
    assert tuning == {"fastestmirror": "true", "max_parallel_downloads": "5", "countme": "true"}
    # lists replace rather than extend
    assert cfg.packages("fonts", "packages") == ["liberation-fonts"]
    assert cfg.section("system")["dnf_conf"] == "/etc/dnf/dnf.conf"


def test_overrides_apply_last(tmp_path):
    cfg = load_config(overrides={"privilege_command": "", "connectivity": {"host": "fedoraproject.org"}})
    assert cfg.privilege_command == ""
    assert cfg.network_check_host == "fedoraproject.org"


def test_invalid_files(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_config(str(tmp_path / "missing.yaml"))

    not_yaml = tmp_path / "config.json"
    not_yaml.write_text("{}", encoding="utf-8")
    with pytest.raises(ValueError):
        load_config(str(not_yaml))

    broken = tmp_path / "broken.yaml"
    broken.write_text("system: [unclosed\n", encoding="utf-8")
    with pytest.raises(ValueError):
        load_config(str(broken))


def test_bad_section_types():
    cfg = load_config(overrides={"gpu": {"rocm": "rocm-smi"}})
    with pytest.raises(ValueError):
        cfg.packages("gpu", "rocm")


def test_deep_merge_does_not_mutate_inputs():
    base = {"a": {"b": 1}}
    merged = deep_merge(base, {"a": {"c": 2}})
    assert merged == {"a": {"b": 1, "c": 2}}
    assert base == {"a": {"b": 1}}
