"""
Shell command adapter — run a command and capture its output.

Also home of ``run_command``, the single place where the adapters call
``subprocess.run``; git, unzip and download adapters build on it.
"""

from __future__ import annotations

import logging
import os
import subprocess
import time
from pathlib import Path
from typing import Any

from appfast_bootstrap.adapters.base import Adapter, ExecutionContext
from appfast_bootstrap.core.models.action import Receipt

logger = logging.getLogger(__name__)

_TAIL = 2000


def run_command(
    cmd: list[str] | str,
    *,
    cwd: str | None = None,
    timeout: float = 300,
    shell: bool = False,
    env_overrides: dict[str, str] | None = None,
) -> dict[str, Any]:
    """Run a command, never raising.

    Args:
        cmd: Argument list, or a string when ``shell`` is True.
        cwd: Working directory.
        timeout: Seconds before the command is killed.
        shell: Run through ``/bin/sh`` (needed for pipes).
        env_overrides: Extra environment variables; ``$VARS`` are expanded.

    Returns:
        ``{"ok": True, "stdout": "...", "stderr": "...", "return_code": 0,
        "elapsed_ms": N}`` or ``{"ok": False, "error": "...", ...}``.
    """
    env = os.environ.copy()
    if env_overrides:
        for key, value in env_overrides.items():
            env[key] = os.path.expandvars(value)

    start = time.monotonic()
    try:
        result = subprocess.run(
            cmd,
            shell=shell,
            cwd=cwd,
            capture_output=True,
            text=True,
            timeout=timeout,
            env=env,
        )
    except subprocess.TimeoutExpired:
        return {"ok": False, "error": f"Command timed out after {timeout}s", "timed_out": True}
    except OSError as e:
        logger.debug("Could not start %s: %s", cmd, e)
        return {"ok": False, "error": f"Could not run command: {e}"}

    elapsed_ms = int((time.monotonic() - start) * 1000)
    stdout = (result.stdout or "")[-_TAIL:]
    stderr = (result.stderr or "")[-_TAIL:]
    data: dict[str, Any] = {
        "ok": result.returncode == 0,
        "stdout": stdout.strip(),
        "stderr": stderr.strip(),
        "return_code": result.returncode,
        "elapsed_ms": elapsed_ms,
    }
    if result.returncode != 0:
        data["error"] = stderr.strip() or f"Command exited with code {result.returncode}"
    return data


class ShellCommandAdapter(Adapter):
    """Execute commands (npm install, the nvm installer) and capture output.

    Action params:
        command (str | list[str]): The command to execute.
        shell (bool): Run through the shell (default: True for strings).
        timeout (int): Timeout in seconds (default: 300).
        cwd (str): Override working directory (default: context.working_dir).
        env (dict): Extra environment variables.
    """

    @property
    def name(self) -> str:
        return "shell"

    def validate(self, context: ExecutionContext) -> tuple[bool, str]:
        command = context.param("command")
        if not command:
            return False, "Missing required param: 'command'"

        cwd = context.param("cwd", context.working_dir)
        if cwd and not Path(cwd).is_dir():
            return False, f"Working directory does not exist: {cwd}"

        return True, ""

    def execute(self, context: ExecutionContext) -> Receipt:
        command = context.param("command")
        use_shell = context.param("shell", isinstance(command, str))
        timeout = context.param("timeout", 300)
        cwd = context.param("cwd", context.working_dir)

        logger.debug("Executing: %s (cwd=%s)", command, cwd)
        result = run_command(
            command,
            cwd=cwd,
            timeout=timeout,
            shell=use_shell,
            env_overrides=context.param("env"),
        )

        metadata = {
            "command": command if isinstance(command, str) else " ".join(command),
            "return_code": result.get("return_code"),
        }
        if result["ok"]:
            return Receipt.success(
                adapter=self.name,
                action_id=context.action.id,
                output=result["stdout"],
                metadata={**metadata, "stderr": result["stderr"]},
            )
        return Receipt.failure(
            adapter=self.name,
            action_id=context.action.id,
            error=result["error"],
            metadata={**metadata, "stdout": result.get("stdout", "")},
        )
