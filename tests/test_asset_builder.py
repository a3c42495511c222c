"""
Tests for release asset naming.
"""

import pytest

from appfast_bootstrap.core.errors import UnsupportedPlatform
from appfast_bootstrap.core.models.platform import Arch, OsFamily
from appfast_bootstrap.core.services.asset_builder import build


class TestBuild:
    def test_linux_amd64(self):
        asset = build("0.24.1", OsFamily.LINUX, Arch.AMD64)
        assert asset.file_name == "pocketbase_0.24.1_linux_amd64.zip"
        assert asset.download_url == (
            "https://github.com/pocketbase/pocketbase/releases/download/"
            "v0.24.1/pocketbase_0.24.1_linux_amd64.zip"
        )

    def test_darwin_arm64(self):
        asset = build("0.24.1", OsFamily.DARWIN, Arch.ARM64)
        assert asset.file_name == "pocketbase_0.24.1_darwin_arm64.zip"

    def test_wsl_uses_linux_binaries(self):
        assert build("0.24.1", OsFamily.WSL, Arch.AMD64) == build("0.24.1", OsFamily.LINUX, Arch.AMD64)

    @pytest.mark.parametrize("os_family, expected", [
        (OsFamily.LINUX, "linux"),
        (OsFamily.WSL, "linux"),
        (OsFamily.DARWIN, "darwin"),
    ])
    def test_asset_os(self, os_family, expected):
        assert os_family.asset_os == expected
        assert f"_{expected}_amd64" in build("0.24.1", os_family, Arch.AMD64).file_name

    def test_wsl_string_uses_linux_binaries(self):
        assert build("0.24.1", "wsl", "amd64").file_name == "pocketbase_0.24.1_linux_amd64.zip"

    def test_leading_v_stripped(self):
        asset = build("v0.25.0", "linux", "arm64")
        assert asset.version == "0.25.0"
        assert "/v0.25.0/" in asset.download_url

    def test_deterministic(self):
        assert build("0.24.1", OsFamily.LINUX, Arch.S390X) == build("0.24.1", OsFamily.LINUX, Arch.S390X)

    def test_custom_project(self):
        asset = build("1.0", OsFamily.LINUX, Arch.AMD64, project="demo", ext="tar.gz",
                      download_base="https://example.com/dl/")
        assert asset.file_name == "demo_1.0_linux_amd64.tar.gz"
        assert asset.download_url == "https://example.com/dl/v1.0/demo_1.0_linux_amd64.tar.gz"

    @pytest.mark.parametrize("os_family, arch", [
        (OsFamily.UNSUPPORTED, Arch.AMD64),
        (OsFamily.LINUX, Arch.UNSUPPORTED),
        ("solaris", "amd64"),
        ("linux", "i386"),
    ])
    def test_rejects_unsupported(self, os_family, arch):
        with pytest.raises(UnsupportedPlatform):
            build("0.24.1", os_family, arch)

    def test_rejects_empty_version(self):
        with pytest.raises(ValueError):
            build("v", OsFamily.LINUX, Arch.AMD64)
