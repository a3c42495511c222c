"""
Platform probe — normalize OS, architecture and package manager.

``SystemSignals.collect()`` is the only place that reads the host;
``probe()`` is a pure function of those signals and never raises:
anything it does not recognise maps to ``unsupported``.
"""

from __future__ import annotations

import logging
import os
import platform
from dataclasses import dataclass, field
from pathlib import Path

from appfast_bootstrap.core.models.platform import (
    Arch,
    OsFamily,
    PackageManager,
    PlatformInfo,
)

logger = logging.getLogger(__name__)

PROC_VERSION = "/proc/version"

# Checked in this order; first present marker wins.
DISTRO_MARKERS: tuple[tuple[str, PackageManager], ...] = (
    ("/etc/debian_version", PackageManager.APT),
    ("/etc/fedora-release", PackageManager.DNF),
    ("/etc/arch-release", PackageManager.PACMAN),
)

ARCH_MAP: dict[str, Arch] = {
    "x86_64": Arch.AMD64,
    "aarch64": Arch.ARM64,
    "arm64": Arch.ARM64,
    "armv7l": Arch.ARMV7,
    "ppc64le": Arch.PPC64LE,
    "s390x": Arch.S390X,
}

_WSL_MARKER = "microsoft"
_WINDOWS_OSTYPES = ("msys", "cygwin")
_WINDOWS_KERNEL_PREFIXES = ("mingw", "msys", "cygwin", "windows")


@dataclass(frozen=True)
class SystemSignals:
    """Raw host signals, collected once and then treated as data.

    Attributes:
        kernel_name: ``uname -s`` equivalent (``platform.system()``).
        machine: ``uname -m`` equivalent (``platform.machine()``).
        kernel_version: Contents of /proc/version (empty if absent).
        os_env: The ``OS`` environment variable (``Windows_NT`` on Windows).
        ostype: The ``OSTYPE`` environment variable, when exported.
        distro_markers: Which of ``DISTRO_MARKERS`` exist on disk.
    """

    kernel_name: str = ""
    machine: str = ""
    kernel_version: str = ""
    os_env: str = ""
    ostype: str = ""
    distro_markers: frozenset[str] = field(default_factory=frozenset)

    @classmethod
    def collect(cls) -> SystemSignals:
        """Read the signals of the current host."""
        try:
            kernel_version = Path(PROC_VERSION).read_text(encoding="utf-8", errors="replace")
        except OSError:
            kernel_version = ""

        markers = frozenset(path for path, _ in DISTRO_MARKERS if Path(path).is_file())

        signals = cls(
            kernel_name=platform.system(),
            machine=platform.machine(),
            kernel_version=kernel_version.strip(),
            os_env=os.environ.get("OS", ""),
            ostype=os.environ.get("OSTYPE", ""),
            distro_markers=markers,
        )
        logger.debug("Collected system signals: %s", signals)
        return signals


def map_arch(machine: str) -> Arch:
    """Map a ``uname -m`` value to a release architecture."""
    return ARCH_MAP.get(machine.strip().lower(), Arch.UNSUPPORTED)


def _is_native_windows(signals: SystemSignals) -> bool:
    if signals.ostype.lower().startswith(_WINDOWS_OSTYPES):
        return True
    if signals.os_env == "Windows_NT":
        return True
    return signals.kernel_name.lower().startswith(_WINDOWS_KERNEL_PREFIXES)


def _linux_package_manager(signals: SystemSignals) -> PackageManager:
    for path, manager in DISTRO_MARKERS:
        if path in signals.distro_markers:
            return manager
    return PackageManager.NONE


def probe(signals: SystemSignals | None = None) -> PlatformInfo:
    """Normalize host signals into a PlatformInfo.

    Priority: WSL kernel marker > native Windows markers > Darwin >
    Linux (with distro refinement) > unsupported.
    """
    if signals is None:
        signals = SystemSignals.collect()

    arch = map_arch(signals.machine)
    base = {"arch": arch, "kernel_name": signals.kernel_name, "machine": signals.machine}
    kernel = signals.kernel_name.strip().lower()

    if _WSL_MARKER in signals.kernel_version.lower():
        info = PlatformInfo(os_family=OsFamily.WSL, package_manager=PackageManager.APT, **base)
    elif _is_native_windows(signals):
        info = PlatformInfo(os_family=OsFamily.WINDOWS, **base)
    elif kernel == "darwin":
        info = PlatformInfo(os_family=OsFamily.DARWIN, package_manager=PackageManager.BREW, **base)
    elif kernel == "linux":
        manager = _linux_package_manager(signals)
        info = PlatformInfo(
            os_family=OsFamily.LINUX,
            package_manager=manager,
            unknown_distribution=manager == PackageManager.NONE,
            **base,
        )
    else:
        info = PlatformInfo(os_family=OsFamily.UNSUPPORTED, **base)

    logger.info(
        "Platform: os=%s arch=%s pm=%s",
        info.os_family, info.arch, info.package_manager,
    )
    return info
