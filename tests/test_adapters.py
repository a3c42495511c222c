"""
Tests for the adapter registry, mock adapter, and the shell, git,
unzip and download adapters (subprocess patched out).
"""

from pathlib import Path
from unittest.mock import patch

import pytest

from appfast_bootstrap.adapters.archive.unzip import UnzipAdapter
from appfast_bootstrap.adapters.base import ExecutionContext
from appfast_bootstrap.adapters.mock import MockAdapter
from appfast_bootstrap.adapters.network.download import DownloadAdapter
from appfast_bootstrap.adapters.registry import AdapterRegistry
from appfast_bootstrap.adapters.shell.command import ShellCommandAdapter, run_command
from appfast_bootstrap.adapters.vcs.git import GitAdapter
from appfast_bootstrap.core.models.action import Action


def _ok(stdout: str = "", **extra):
    return {"ok": True, "stdout": stdout, "stderr": "", "return_code": 0, "elapsed_ms": 1, **extra}


def _fail(error: str, return_code: int = 1, stdout: str = "", stderr: str = ""):
    return {
        "ok": False, "stdout": stdout, "stderr": stderr,
        "return_code": return_code, "elapsed_ms": 1, "error": error,
    }


# ── Mock Adapter ─────────────────────────────────────────────────────


class TestMockAdapter:
    def test_default_success(self):
        mock = MockAdapter(adapter_name="git")
        ctx = ExecutionContext(action=Action(id="clone", adapter="git"))
        receipt = mock.execute(ctx)
        assert receipt.ok
        assert mock.call_count == 1
        assert mock.called_ids == ["clone"]

    def test_scripted_failure(self):
        mock = MockAdapter(adapter_name="download")
        mock.set_failure("dl", "HTTP 404", http_status=404)
        receipt = mock.execute(ExecutionContext(action=Action(id="dl", adapter="download")))
        assert receipt.failed
        assert receipt.metadata["http_status"] == 404

    def test_side_effect(self, tmp_path: Path):
        mock = MockAdapter(adapter_name="unzip")
        mock.on_execute("x", lambda ctx: (tmp_path / "done").touch())
        mock.execute(ExecutionContext(action=Action(id="x", adapter="unzip")))
        assert (tmp_path / "done").exists()

    def test_reset(self):
        mock = MockAdapter()
        mock.set_failure("a")
        mock.execute(ExecutionContext(action=Action(id="a", adapter="mock")))
        mock.reset()
        assert mock.call_count == 0
        assert mock.execute(ExecutionContext(action=Action(id="a", adapter="mock"))).ok


# ── Registry ─────────────────────────────────────────────────────────


class TestAdapterRegistry:
    def test_dispatch_by_name(self):
        registry = AdapterRegistry()
        git = MockAdapter(adapter_name="git")
        unzip = MockAdapter(adapter_name="unzip")
        registry.register(git)
        registry.register(unzip)

        receipt = registry.execute_action(Action(id="extract", adapter="unzip"))
        assert receipt.ok
        assert unzip.called_ids == ["extract"]
        assert git.call_count == 0

    def test_register_replaces(self):
        registry = AdapterRegistry()
        first = MockAdapter(adapter_name="git")
        second = MockAdapter(adapter_name="git")
        registry.register(first)
        registry.register(second)

        registry.execute_action(Action(id="clone", adapter="git"))
        assert first.call_count == 0
        assert second.called_ids == ["clone"]

    def test_unknown_adapter(self):
        receipt = AdapterRegistry().execute_action(Action(id="x", adapter="nope"))
        assert receipt.failed
        assert "No adapter registered" in receipt.error

    def test_validation_failure(self):
        registry = AdapterRegistry()
        registry.register(ShellCommandAdapter())
        receipt = registry.execute_action(Action(id="x", adapter="shell", params={}))
        assert receipt.failed
        assert "command" in receipt.error

    def test_adapter_exception_becomes_failure(self):
        registry = AdapterRegistry()
        mock = MockAdapter(adapter_name="git")

        def _boom(ctx):
            raise RuntimeError("boom")

        mock.on_execute("x", _boom)
        registry.register(mock)
        receipt = registry.execute_action(Action(id="x", adapter="git"))
        assert receipt.failed
        assert "boom" in receipt.error


# ── Shell ────────────────────────────────────────────────────────────


class TestRunCommand:
    def test_success(self):
        with patch("subprocess.run") as run:
            run.return_value.returncode = 0
            run.return_value.stdout = "hello\n"
            run.return_value.stderr = ""
            result = run_command(["echo", "hello"])
        assert result["ok"] is True
        assert result["stdout"] == "hello"

    def test_env_overrides(self, monkeypatch):
        monkeypatch.setenv("HOME", "/home/test")
        with patch("subprocess.run") as run:
            run.return_value.returncode = 0
            run.return_value.stdout = ""
            run.return_value.stderr = ""
            run_command(["true"], env_overrides={"NVM_DIR": "$HOME/.nvm"})
        assert run.call_args.kwargs["env"]["NVM_DIR"] == "/home/test/.nvm"

    def test_missing_binary(self):
        with patch("subprocess.run", side_effect=FileNotFoundError("nope")):
            result = run_command(["nope"])
        assert result["ok"] is False
        assert "Could not run" in result["error"]


class TestShellCommandAdapter:
    def test_string_command_uses_shell(self, tmp_path: Path):
        ctx = ExecutionContext(
            action=Action(id="nvm", adapter="shell", params={"command": "curl -o- x | bash"}),
            working_dir=str(tmp_path),
        )
        with patch("appfast_bootstrap.adapters.shell.command.run_command", return_value=_ok("done")) as rc:
            receipt = ShellCommandAdapter().execute(ctx)
        assert receipt.ok
        assert receipt.output == "done"
        assert rc.call_args.kwargs["shell"] is True

    def test_failure(self, tmp_path: Path):
        ctx = ExecutionContext(
            action=Action(id="npm", adapter="shell", params={"command": ["npm", "install"]}),
            working_dir=str(tmp_path),
        )
        with patch("appfast_bootstrap.adapters.shell.command.run_command",
                   return_value=_fail("ERESOLVE")):
            receipt = ShellCommandAdapter().execute(ctx)
        assert receipt.failed
        assert receipt.error == "ERESOLVE"
        assert receipt.metadata["command"] == "npm install"

    def test_validate_bad_cwd(self, tmp_path: Path):
        ctx = ExecutionContext(
            action=Action(id="x", adapter="shell",
                          params={"command": "ls", "cwd": str(tmp_path / "missing")}),
        )
        ok, error = ShellCommandAdapter().validate(ctx)
        assert ok is False
        assert "does not exist" in error


# ── Git / unzip ──────────────────────────────────────────────────────


class TestGitAdapter:
    def test_rejects_existing_dest(self, tmp_path: Path):
        ctx = ExecutionContext(action=Action(
            id="clone", adapter="git",
            params={"operation": "clone", "url": "https://x/y.git", "dest": str(tmp_path)},
        ))
        ok, error = GitAdapter().validate(ctx)
        assert ok is False
        assert "already exists" in error

    def test_rejects_unknown_operation(self):
        ctx = ExecutionContext(action=Action(id="x", adapter="git", params={"operation": "push"}))
        ok, _ = GitAdapter().validate(ctx)
        assert ok is False

    def test_clone_command(self, tmp_path: Path):
        dest = tmp_path / "frontend"
        ctx = ExecutionContext(action=Action(
            id="clone", adapter="git",
            params={"operation": "clone", "url": "https://x/y.git", "dest": str(dest), "depth": 1},
        ))
        with patch("appfast_bootstrap.adapters.vcs.git.run_command", return_value=_ok()) as rc:
            receipt = GitAdapter().execute(ctx)
        assert receipt.ok
        assert rc.call_args[0][0] == ["git", "clone", "--depth", "1", "https://x/y.git", str(dest)]


class TestUnzipAdapter:
    def test_extract_command(self, tmp_path: Path):
        archive = tmp_path / "pb.zip"
        archive.write_bytes(b"PK")
        ctx = ExecutionContext(action=Action(
            id="extract", adapter="unzip",
            params={"archive": str(archive), "dest": str(tmp_path)},
        ))
        assert UnzipAdapter().validate(ctx) == (True, "")
        with patch("appfast_bootstrap.adapters.archive.unzip.run_command", return_value=_ok()) as rc:
            receipt = UnzipAdapter().execute(ctx)
        assert receipt.ok
        assert rc.call_args[0][0] == ["unzip", "-o", str(archive), "-d", str(tmp_path)]

    def test_missing_archive(self, tmp_path: Path):
        ctx = ExecutionContext(action=Action(
            id="extract", adapter="unzip",
            params={"archive": str(tmp_path / "nope.zip"), "dest": str(tmp_path)},
        ))
        ok, error = UnzipAdapter().validate(ctx)
        assert ok is False
        assert "not found" in error


# ── Download ─────────────────────────────────────────────────────────


URL = "https://github.com/pocketbase/pocketbase/releases/download/v0.24.1/pb.zip"


def _download_ctx(tmp_path: Path) -> ExecutionContext:
    return ExecutionContext(
        action=Action(id="dl", adapter="download",
                      params={"url": URL, "dest": str(tmp_path / "pb.zip")}),
        working_dir=str(tmp_path),
    )


class TestDownloadAdapter:
    def test_unknown_tool(self):
        with pytest.raises(ValueError):
            DownloadAdapter("aria2c")

    def test_curl_success(self, tmp_path: Path):
        with patch("appfast_bootstrap.adapters.network.download.run_command",
                   return_value=_ok("200")) as rc:
            receipt = DownloadAdapter("curl").execute(_download_ctx(tmp_path))
        assert receipt.ok
        assert receipt.metadata["http_status"] == 200
        cmd = rc.call_args[0][0]
        assert cmd[0] == "curl"
        assert cmd[-1] == URL

    def test_curl_404_removes_partial_file(self, tmp_path: Path):
        (tmp_path / "pb.zip").write_text("Not Found")
        with patch("appfast_bootstrap.adapters.network.download.run_command",
                   return_value=_ok("404")):
            receipt = DownloadAdapter("curl").execute(_download_ctx(tmp_path))
        assert receipt.failed
        assert receipt.metadata["http_status"] == 404
        assert receipt.metadata["network_error"] is False
        assert not (tmp_path / "pb.zip").exists()

    def test_curl_network_failure(self, tmp_path: Path):
        with patch("appfast_bootstrap.adapters.network.download.run_command",
                   return_value=_fail("Could not resolve host", return_code=6, stdout="000")):
            receipt = DownloadAdapter("curl").execute(_download_ctx(tmp_path))
        assert receipt.failed
        assert receipt.metadata["network_error"] is True
        assert "http_status" not in receipt.metadata

    def test_wget_404(self, tmp_path: Path):
        with patch("appfast_bootstrap.adapters.network.download.run_command",
                   return_value=_fail("failed", return_code=8,
                                      stderr="https://x: 2024 ERROR 404: Not Found.")):
            receipt = DownloadAdapter("wget").execute(_download_ctx(tmp_path))
        assert receipt.metadata["http_status"] == 404

    def test_wget_network_failure(self, tmp_path: Path):
        with patch("appfast_bootstrap.adapters.network.download.run_command",
                   return_value=_fail("unable to resolve host address", return_code=4)):
            receipt = DownloadAdapter("wget").execute(_download_ctx(tmp_path))
        assert receipt.metadata["network_error"] is True

