"""
Remediation text — what the user should run to fix a failed check.

Commands are only printed, never executed.
"""

from __future__ import annotations

from appfast_bootstrap.core.models.platform import PackageManager, PlatformInfo

INSTALL_COMMANDS: dict[PackageManager, str] = {
    PackageManager.APT: "sudo apt-get install",
    PackageManager.DNF: "sudo dnf install",
    PackageManager.PACMAN: "sudo pacman -S",
    PackageManager.BREW: "brew install",
}

WSL_INSTALL_COMMAND = "wsl --install"
NODE_DOWNLOAD_PAGE = "https://nodejs.org/en/download/"
NVM_HOMEPAGE = "https://github.com/nvm-sh/nvm"

def install_command(manager: PackageManager, package: str) -> str:
    """Install hint for one package with the detected package manager."""
    prefix = INSTALL_COMMANDS.get(manager)
    if prefix is None:
        return (
            f"Install '{package}' with your system package manager, "
            "then run the installer again."
        )
    return f"Please install it using: {prefix} {package}"


def download_tool_remediation(manager: PackageManager) -> str:
    prefix = INSTALL_COMMANDS.get(manager)
    if prefix is None:
        return "Install either cURL or wget with your system package manager."
    return f"Please install either cURL or wget, e.g.: {prefix} curl"


def wsl_remediation() -> str:
    return (
        "This installer requires Windows Subsystem for Linux (WSL).\n"
        "Open PowerShell as Administrator and run:\n"
        f"   {WSL_INSTALL_COMMAND}\n"
        "After installing WSL, run this installer again from within WSL."
    )


def unsupported_platform_remediation(platform: PlatformInfo) -> str:
    return (
        f"OS: {platform.kernel_name or 'unknown'}, "
        f"Architecture: {platform.machine or 'unknown'}. "
        "Supported: macOS and Linux (or Windows via WSL) on "
        "amd64, arm64, armv7, ppc64le or s390x."
    )


def node_install_remediation(min_version: str) -> str:
    return (
        f"Install Node.js v{min_version} or higher from {NODE_DOWNLOAD_PAGE}\n"
        f"or use a version manager like nvm: {NVM_HOMEPAGE}"
    )


def node_upgrade_remediation(min_version: str, nvm_installed: bool) -> str:
    if nvm_installed:
        return (
            "Since you have nvm installed, run:\n"
            f"  nvm install {min_version}\n"
            f"  nvm use {min_version}"
        )
    return (
        f"Visit: {NODE_DOWNLOAD_PAGE}\n"
        f"Or use a version manager like nvm: {NVM_HOMEPAGE}"
    )


def unknown_distribution_warning(node_min_version: str = "22") -> str:
    """Shown when the Linux distribution could not be identified."""
    requirements = ("Git", f"Node.js v{node_min_version} or higher", "unzip")
    lines = [
        "Unknown Linux distribution. This installer may or may not work.",
        "Please ensure you have the following packages installed:",
    ]
    lines.extend(f"- {item}" for item in requirements)
    return "\n".join(lines)
