"""
Tests for platform detection — OS family, architecture, package manager.
"""

import itertools

import pytest

from appfast_bootstrap.core.models.platform import Arch, OsFamily, PackageManager
from appfast_bootstrap.core.services.platform_probe import SystemSignals, map_arch, probe


def _linux(*markers: str, machine: str = "x86_64") -> SystemSignals:
    return SystemSignals(
        kernel_name="Linux",
        machine=machine,
        kernel_version="Linux version 6.5.0",
        distro_markers=frozenset(markers),
    )


class TestArchMapping:
    @pytest.mark.parametrize("machine, expected", [
        ("x86_64", Arch.AMD64),
        ("aarch64", Arch.ARM64),
        ("arm64", Arch.ARM64),
        ("armv7l", Arch.ARMV7),
        ("ppc64le", Arch.PPC64LE),
        ("s390x", Arch.S390X),
        ("X86_64", Arch.AMD64),
    ])
    def test_known(self, machine, expected):
        assert map_arch(machine) == expected

    @pytest.mark.parametrize("machine", ["i686", "riscv64", "mips", ""])
    def test_unknown(self, machine):
        assert map_arch(machine) == Arch.UNSUPPORTED


class TestProbe:
    def test_debian(self, debian_signals):
        info = probe(debian_signals)
        assert info.os_family == OsFamily.LINUX
        assert info.arch == Arch.AMD64
        assert info.package_manager == PackageManager.APT
        assert info.unknown_distribution is False

    @pytest.mark.parametrize("marker, manager", [
        ("/etc/fedora-release", PackageManager.DNF),
        ("/etc/arch-release", PackageManager.PACMAN),
    ])
    def test_distro_markers(self, marker, manager):
        assert probe(_linux(marker)).package_manager == manager

    def test_first_marker_wins(self):
        info = probe(_linux("/etc/arch-release", "/etc/debian_version"))
        assert info.package_manager == PackageManager.APT

    def test_unknown_distribution(self):
        info = probe(_linux())
        assert info.os_family == OsFamily.LINUX
        assert info.package_manager == PackageManager.NONE
        assert info.unknown_distribution is True

    def test_darwin_arm64(self):
        info = probe(SystemSignals(kernel_name="Darwin", machine="arm64"))
        assert info.os_family == OsFamily.DARWIN
        assert info.arch == Arch.ARM64
        assert info.package_manager == PackageManager.BREW

    def test_wsl(self):
        signals = SystemSignals(
            kernel_name="Linux",
            machine="x86_64",
            kernel_version="Linux version 5.15.153.1-microsoft-standard-WSL2",
        )
        info = probe(signals)
        assert info.os_family == OsFamily.WSL
        assert info.package_manager == PackageManager.APT
        assert info.asset_os == "linux"

    def test_wsl_beats_windows_env(self):
        signals = SystemSignals(
            kernel_name="Linux",
            machine="x86_64",
            kernel_version="5.15 Microsoft",
            os_env="Windows_NT",
        )
        assert probe(signals).os_family == OsFamily.WSL

    @pytest.mark.parametrize("signals", [
        SystemSignals(kernel_name="MINGW64_NT-10.0", machine="x86_64"),
        SystemSignals(kernel_name="Windows", machine="AMD64"),
        SystemSignals(kernel_name="", machine="x86_64", ostype="msys"),
        SystemSignals(kernel_name="", machine="x86_64", os_env="Windows_NT"),
    ])
    def test_native_windows(self, signals):
        info = probe(signals)
        assert info.os_family == OsFamily.WINDOWS
        assert info.is_supported is False

    def test_unknown_kernel(self):
        info = probe(SystemSignals(kernel_name="FreeBSD", machine="amd64"))
        assert info.os_family == OsFamily.UNSUPPORTED
        assert info.kernel_name == "FreeBSD"

    def test_total_over_inputs(self):
        kernels = ["Linux", "Darwin", "FreeBSD", "MINGW64_NT", "", "SunOS"]
        machines = ["x86_64", "aarch64", "armv7l", "i386", "", "sparc"]
        for kernel, machine in itertools.product(kernels, machines):
            info = probe(SystemSignals(kernel_name=kernel, machine=machine))
            assert info.os_family in set(OsFamily)
            assert info.arch in set(Arch)

    def test_collect_reads_host(self, monkeypatch):
        monkeypatch.setattr("platform.system", lambda: "Linux")
        monkeypatch.setattr("platform.machine", lambda: "aarch64")
        monkeypatch.setenv("OS", "")
        signals = SystemSignals.collect()
        assert signals.kernel_name == "Linux"
        assert signals.machine == "aarch64"
        assert probe(signals).arch == Arch.ARM64
