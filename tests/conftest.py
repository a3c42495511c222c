"""
Shared test fixtures.
"""

from __future__ import annotations

import pytest

from appfast_bootstrap.core.models.settings import InstallerSettings
from appfast_bootstrap.core.models.tooling import ToolStatus
from appfast_bootstrap.core.services.platform_probe import SystemSignals
from appfast_bootstrap.core.services.versioning import meets_minimum


@pytest.fixture
def settings() -> InstallerSettings:
    return InstallerSettings()


@pytest.fixture
def debian_signals() -> SystemSignals:
    """A Debian/Ubuntu amd64 host."""
    return SystemSignals(
        kernel_name="Linux",
        machine="x86_64",
        kernel_version="Linux version 6.5.0-generic (buildd@ubuntu)",
        distro_markers=frozenset({"/etc/debian_version"}),
    )


@pytest.fixture
def make_statuses():
    """Build tool statuses: everything present, node v22.11.0, unless overridden.

    ``make_statuses(git=False, node="v20.1.0")`` marks git missing and
    reports an old node.
    """

    def _make(
        unzip: bool = True,
        git: bool = True,
        curl: bool = True,
        wget: bool = True,
        node: str | bool | None = "v22.11.0",
        node_ok: bool | None = None,
    ) -> list[ToolStatus]:
        statuses = [
            ToolStatus(name="unzip", found=unzip),
            ToolStatus(name="git", found=git),
            ToolStatus(name="curl", found=curl),
            ToolStatus(name="wget", found=wget),
        ]
        if node is False or node is None:
            statuses.append(ToolStatus(name="node", found=False))
        else:
            version = None if node is True else node
            if node_ok is None:
                node_ok = meets_minimum(version, "22")
            statuses.append(
                ToolStatus(name="node", found=True, version=version, meets_minimum=node_ok),
            )
        return statuses

    return _make
