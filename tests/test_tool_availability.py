"""
Tests for tool detection — presence, version minimums, download tool choice.
"""

import subprocess
from unittest.mock import MagicMock

import pytest

from appfast_bootstrap.core.models.settings import InstallerSettings
from appfast_bootstrap.core.models.tooling import ToolRequirement, ToolRole, ToolStatus
from appfast_bootstrap.core.services import tool_availability
from appfast_bootstrap.core.services.tool_availability import (
    check,
    check_tool,
    default_requirements,
    get_tool_version,
    select_download_tool,
)


def _which(*present: str):
    return lambda name: f"/usr/bin/{name}" if name in present else None


def _version_output(stdout: str = "", stderr: str = "", returncode: int = 0):
    return MagicMock(stdout=stdout, stderr=stderr, returncode=returncode)


NODE = ToolRequirement(name="node", role=ToolRole.RUNTIME, min_version="22", label="Node.js")


class TestDefaultRequirements:
    def test_order_and_roles(self):
        reqs = default_requirements()
        assert [r.name for r in reqs] == ["unzip", "git", "curl", "wget", "node"]
        assert reqs[-1].role == ToolRole.RUNTIME
        assert reqs[-1].min_version == "22"

    def test_minimum_from_settings(self):
        reqs = default_requirements(InstallerSettings(node_min_version="24"))
        assert reqs[-1].min_version == "24"


class TestGetToolVersion:
    def test_first_non_empty_line(self, monkeypatch):
        monkeypatch.setattr(
            tool_availability.subprocess, "run",
            lambda *a, **kw: _version_output(stdout="\nv22.1.0\nextra\n"),
        )
        assert get_tool_version("node") == "v22.1.0"

    def test_stderr_used(self, monkeypatch):
        monkeypatch.setattr(
            tool_availability.subprocess, "run",
            lambda *a, **kw: _version_output(stderr="v22.11.0\n"),
        )
        assert get_tool_version("node") == "v22.11.0"

    def test_timeout_returns_none(self, monkeypatch):
        def _raise(*a, **kw):
            raise subprocess.TimeoutExpired(cmd="node", timeout=1)

        monkeypatch.setattr(tool_availability.subprocess, "run", _raise)
        assert get_tool_version("node", timeout=1) is None


class TestCheckTool:
    def test_missing(self, monkeypatch):
        monkeypatch.setattr(tool_availability.shutil, "which", _which())
        status = check_tool(NODE)
        assert status == ToolStatus(name="node", found=False)

    def test_no_version_probe_without_minimum(self, monkeypatch):
        monkeypatch.setattr(tool_availability.shutil, "which", _which("git"))
        run = MagicMock()
        monkeypatch.setattr(tool_availability.subprocess, "run", run)

        status = check_tool(ToolRequirement(name="git"))

        assert status.found is True
        assert status.version is None
        assert status.meets_minimum is None
        run.assert_not_called()

    @pytest.mark.parametrize("reported, ok", [
        ("v22.1.0", True),
        ("v21.9.0", False),
        ("garbage", False),
    ])
    def test_minimum(self, monkeypatch, reported, ok):
        monkeypatch.setattr(tool_availability.shutil, "which", _which("node"))
        monkeypatch.setattr(
            tool_availability.subprocess, "run",
            lambda *a, **kw: _version_output(stdout=reported),
        )
        status = check_tool(NODE)
        assert status.found is True
        assert status.version == reported
        assert status.meets_minimum is ok
        assert status.satisfied is ok


class TestCheck:
    def test_order_preserved(self, monkeypatch):
        monkeypatch.setattr(tool_availability.shutil, "which", _which("git", "wget"))
        reqs = [ToolRequirement(name=n) for n in ("unzip", "git", "curl", "wget")]

        statuses = check(reqs)

        assert [s.name for s in statuses] == ["unzip", "git", "curl", "wget"]
        assert [s.found for s in statuses] == [False, True, False, True]

    def test_failure_does_not_stop_others(self, monkeypatch):
        def _which_raising(name):
            if name == "git":
                raise PermissionError("boom")
            return f"/usr/bin/{name}"

        monkeypatch.setattr(tool_availability.shutil, "which", _which_raising)
        reqs = [ToolRequirement(name=n) for n in ("unzip", "git", "curl")]

        statuses = check(reqs)

        assert [s.found for s in statuses] == [True, False, True]


class TestSelectDownloadTool:
    def test_prefers_curl(self):
        statuses = [ToolStatus(name="wget", found=True), ToolStatus(name="curl", found=True)]
        assert select_download_tool(statuses) == "curl"

    def test_falls_back_to_wget(self):
        statuses = [ToolStatus(name="curl", found=False), ToolStatus(name="wget", found=True)]
        assert select_download_tool(statuses) == "wget"

    def test_none(self):
        assert select_download_tool([ToolStatus(name="curl", found=False)]) is None
