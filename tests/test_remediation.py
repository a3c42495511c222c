"""
Tests for install hints and warning text.
"""

from appfast_bootstrap.core.models.platform import PackageManager
from appfast_bootstrap.core.services.remediation import (
    install_command,
    unknown_distribution_warning,
)


class TestUnknownDistributionWarning:
    def test_default_minimum(self):
        text = unknown_distribution_warning()
        assert text.startswith("Unknown Linux distribution.")
        assert "- Node.js v22 or higher" in text

    def test_configured_minimum(self):
        text = unknown_distribution_warning("24")
        assert "- Node.js v24 or higher" in text
        assert "v22" not in text
        assert "- Git" in text
        assert "- unzip" in text


class TestInstallCommand:
    def test_apt(self):
        assert "sudo apt-get install unzip" in install_command(PackageManager.APT, "unzip")

    def test_unknown_manager(self):
        assert "system package manager" in install_command(PackageManager.NONE, "git")
