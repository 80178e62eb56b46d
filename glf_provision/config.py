from __future__ import annotations

import copy
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

import yaml

DEFAULT_CONFIG_PATH = Path(__file__).resolve().parent / "manifests" / "default.yaml"


def _read_yaml(p: Path) -> Dict[str, Any]:
    try:
        raw = yaml.safe_load(p.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ValueError(f"{p} is not valid YAML: {e}") from e
    if not isinstance(raw, dict):
        raise ValueError(f"{p} must contain a mapping/object")
    return raw


def deep_merge(base: Mapping[str, Any], override: Mapping[str, Any]) -> Dict[str, Any]:
    """Merge override into a copy of base; nested mappings merge, everything else replaces."""

    merged = copy.deepcopy(dict(base))
    for key, value in override.items():
        if isinstance(value, Mapping) and isinstance(merged.get(key), Mapping):
            merged[key] = deep_merge(merged[key], value)
        else:
            merged[key] = copy.deepcopy(value)
    return merged


@dataclass(frozen=True)
class ProvisionConfig:
    raw: Dict[str, Any]

    @property
    def program_name(self) -> str:
        return str(self.raw.get("program_name") or "Fedora_GLF")

    @property
    def log_dir(self) -> Optional[str]:
        v = self.raw.get("log_dir")
        return str(v) if v else None

    @property
    def verbose(self) -> bool:
        return bool(self.raw.get("verbose", False))

    @property
    def privilege_command(self) -> str:
        v = self.raw.get("privilege_command")
        return "" if v is None else str(v).strip()

    @property
    def network_check_host(self) -> str:
        return str(self.section("connectivity").get("host") or "google.com")

    def section(self, name: str) -> Dict[str, Any]:
        v = self.raw.get(name) or {}
        if not isinstance(v, dict):
            raise ValueError(f"config section '{name}' must be a mapping")
        return v

    def packages(self, section: str, key: str) -> List[str]:
        v = self.section(section).get(key) or []
        if not isinstance(v, list):
            raise ValueError(f"config {section}.{key} must be a list")
        return [str(p).strip() for p in v if str(p).strip()]


def load_config(path: Optional[str] = None, *, overrides: Optional[Mapping[str, Any]] = None) -> ProvisionConfig:
    """Load built-in defaults, then the optional user file, then in-code overrides."""

    raw = _read_yaml(DEFAULT_CONFIG_PATH)

    if path:
        p = Path(path)
        if not p.exists():
            raise FileNotFoundError(path)
        if p.suffix.lower() not in {".yaml", ".yml"}:
            raise ValueError("config must be YAML")
        raw = deep_merge(raw, _read_yaml(p))

    if overrides:
        raw = deep_merge(raw, overrides)

    return ProvisionConfig(raw=raw)
