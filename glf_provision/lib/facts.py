from __future__ import annotations

import enum
import re
from dataclasses import dataclass
from typing import FrozenSet, Optional

from .command import CommandRunner


class GpuVendor(enum.Enum):
    NVIDIA = "nvidia"
    AMD = "amd"
    INTEL = "intel"


class RootFilesystem(enum.Enum):
    BTRFS = "btrfs"
    EXT4 = "ext4"
    XFS = "xfs"
    OTHER = "other"
    UNKNOWN = "unknown"


# lspci vendor strings, matched case-insensitively on the device description.
_GPU_VENDOR_PATTERNS = (
    (GpuVendor.NVIDIA, re.compile(r"\bnvidia\b", re.I)),
    (GpuVendor.AMD, re.compile(r"\b(amd|ati|advanced micro devices)\b", re.I)),
    (GpuVendor.INTEL, re.compile(r"\bintel\b", re.I)),
)

_DISPLAY_CLASS = re.compile(r"\b(vga|3d|display)\b", re.I)
# "01:00.0 VGA compatible controller: ..." or, with a PCI domain, "0000:01:00.0 ..."
_LSPCI_LINE = re.compile(r"^(?:[0-9a-f]{4,}:)?[0-9a-f]{2}:[0-9a-f]{2}\.[0-7]\s+([^:]+):\s*(.*)$", re.I)


@dataclass(frozen=True)
class HostFacts:
    gpu_vendors: FrozenSet[GpuVendor] = frozenset()
    root_filesystem: RootFilesystem = RootFilesystem.UNKNOWN
    gnome_shell_running: bool = False
    fedora_release: Optional[str] = None

    def has_gpu(self, vendor: GpuVendor) -> bool:
        return vendor in self.gpu_vendors

    def summary(self) -> str:
        vendors = ",".join(sorted(v.value for v in self.gpu_vendors)) or "none"
        return (
            f"gpu={vendors} root_fs={self.root_filesystem.value} "
            f"gnome_shell={self.gnome_shell_running} fedora={self.fedora_release or 'unknown'}"
        )


def parse_gpu_vendors(lspci_output: str) -> FrozenSet[GpuVendor]:
    """Classify every display controller listed by lspci.

    Hybrid laptops list an integrated and a discrete GPU; both are reported.
    """

    found = set()
    for line in lspci_output.splitlines():
        m = _LSPCI_LINE.match(line.strip())
        if not m or not _DISPLAY_CLASS.search(m.group(1)):
            continue
        desc = m.group(2)
        for vendor, pattern in _GPU_VENDOR_PATTERNS:
            if pattern.search(desc):
                found.add(vendor)
                break
    return frozenset(found)


def parse_root_filesystem(lsblk_output: str) -> RootFilesystem:
    """Read `lsblk -rno FSTYPE,MOUNTPOINT` output and classify the filesystem at /."""

    for line in lsblk_output.splitlines():
        parts = line.split()
        if len(parts) < 2 or parts[-1] != "/":
            continue
        fstype = parts[0].lower()
        try:
            return RootFilesystem(fstype)
        except ValueError:
            return RootFilesystem.OTHER
    return RootFilesystem.UNKNOWN


def parse_process_count(pgrep_output: str) -> int:
    txt = pgrep_output.strip().splitlines()
    if not txt:
        return 0
    try:
        return int(txt[0].strip())
    except ValueError:
        return 0


def parse_fedora_release(rpm_output: str) -> Optional[str]:
    v = rpm_output.strip()
    # rpm echoes the macro back unexpanded on non-Fedora hosts.
    if not v.isdigit():
        return None
    return v


def detect_host_facts(runner: CommandRunner) -> HostFacts:
    """Gather everything steps branch on, once per run."""

    lspci = runner.probe("lspci")
    lsblk = runner.probe("lsblk -rno FSTYPE,MOUNTPOINT")
    pgrep = runner.probe("pgrep -c gnome-shell")
    release = runner.probe("rpm -E %fedora")

    facts = HostFacts(
        gpu_vendors=parse_gpu_vendors(lspci.output) if lspci.ok else frozenset(),
        root_filesystem=parse_root_filesystem(lsblk.output) if lsblk.ok else RootFilesystem.UNKNOWN,
        gnome_shell_running=parse_process_count(pgrep.output) > 0,
        fedora_release=parse_fedora_release(release.output) if release.ok else None,
    )
    runner.log.log("INFO", f"Host facts: {facts.summary()}")
    return facts
