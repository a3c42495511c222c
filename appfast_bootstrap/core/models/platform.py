"""
Platform model — the host the installer is running on.

Produced once per run by the platform probe and treated as
read-only data by every component downstream.
"""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, ConfigDict


class OsFamily(StrEnum):
    """Normalized operating-system family."""

    DARWIN = "darwin"
    LINUX = "linux"
    WINDOWS = "windows"
    WSL = "wsl"
    UNSUPPORTED = "unsupported"

    @property
    def asset_os(self) -> str:
        """OS name used in release asset filenames (WSL runs Linux binaries)."""
        return OsFamily.LINUX.value if self is OsFamily.WSL else self.value


class Arch(StrEnum):
    """Normalized CPU architecture, named the way release assets are."""

    AMD64 = "amd64"
    ARM64 = "arm64"
    ARMV7 = "armv7"
    PPC64LE = "ppc64le"
    S390X = "s390x"
    UNSUPPORTED = "unsupported"


class PackageManager(StrEnum):
    """System package manager used to phrase install commands."""

    APT = "apt"
    DNF = "dnf"
    PACMAN = "pacman"
    BREW = "brew"
    NONE = "none"


class PlatformInfo(BaseModel):
    """Normalized (OS family, architecture, package manager) triple.

    ``kernel_name`` and ``machine`` keep the raw signals so error
    messages can show what was actually seen.
    """

    model_config = ConfigDict(frozen=True)

    os_family: OsFamily
    arch: Arch
    package_manager: PackageManager = PackageManager.NONE
    unknown_distribution: bool = False
    kernel_name: str = ""
    machine: str = ""

    @property
    def asset_os(self) -> str:
        return self.os_family.asset_os

    @property
    def is_supported(self) -> bool:
        """Whether a backend binary can be installed on this host."""
        return (
            self.os_family not in (OsFamily.UNSUPPORTED, OsFamily.WINDOWS)
            and self.arch != Arch.UNSUPPORTED
        )
