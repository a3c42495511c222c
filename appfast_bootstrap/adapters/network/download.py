"""
Download adapter — fetch a URL to a file with curl or wget.

Failures are classified in the receipt metadata so the caller can tell
a missing release asset (``http_status == 404``) from an unreachable
network (``network_error``).
"""

from __future__ import annotations

import logging
import re
from pathlib import Path

from appfast_bootstrap.adapters.base import Adapter, ExecutionContext
from appfast_bootstrap.adapters.shell.command import run_command
from appfast_bootstrap.core.models.action import Receipt

logger = logging.getLogger(__name__)

# curl exit codes that mean "never got an HTTP answer"
_CURL_NETWORK_EXITS = {5, 6, 7, 28, 35, 52, 56}
# wget: 4 = network failure, 5 = SSL verification failure
_WGET_NETWORK_EXITS = {4, 5}
_WGET_HTTP_ERROR = re.compile(r"ERROR (\d{3})")


class DownloadAdapter(Adapter):
    """Fetch a file over HTTP(S).

    Action params:
        url (str): What to fetch (redirects are followed).
        dest (str): Output file path.
        connect_timeout (int): Connect timeout in seconds (default: 10).
        timeout (int): Overall timeout in seconds (default: 600).
    """

    def __init__(self, tool: str = "curl"):
        if tool not in ("curl", "wget"):
            raise ValueError(f"Unsupported download tool: {tool}")
        self._tool = tool

    @property
    def name(self) -> str:
        return "download"

    @property
    def tool(self) -> str:
        return self._tool

    def validate(self, context: ExecutionContext) -> tuple[bool, str]:
        if not context.param("url"):
            return False, "Missing required param: 'url'"
        dest = context.param("dest")
        if not dest:
            return False, "Missing required param: 'dest'"
        if not Path(dest).parent.is_dir():
            return False, f"Directory does not exist: {Path(dest).parent}"
        return True, ""

    def execute(self, context: ExecutionContext) -> Receipt:
        if self._tool == "curl":
            return self._curl(context)
        return self._wget(context)

    def _curl(self, ctx: ExecutionContext) -> Receipt:
        url, dest = ctx.param("url"), ctx.param("dest")
        cmd = [
            "curl", "-sSL",
            "--connect-timeout", str(ctx.param("connect_timeout", 10)),
            "-o", dest,
            "-w", "%{http_code}",
            url,
        ]
        result = run_command(cmd, cwd=ctx.working_dir, timeout=ctx.param("timeout", 600))
        code = result.get("return_code")
        status = _parse_status(result.get("stdout", ""))

        if result["ok"] and status is not None and status < 400:
            return self._success(ctx, url, dest, status)

        if status is not None and status >= 400:
            _discard(dest)
            return self._failure(ctx, url, f"HTTP {status} for {url}", http_status=status)

        return self._failure(
            ctx, url, result.get("error", "curl failed"),
            network_error=code in _CURL_NETWORK_EXITS or bool(result.get("timed_out")),
            return_code=code,
        )

    def _wget(self, ctx: ExecutionContext) -> Receipt:
        url, dest = ctx.param("url"), ctx.param("dest")
        cmd = [
            "wget", "-nv",
            f"--connect-timeout={ctx.param('connect_timeout', 10)}",
            "-O", dest,
            url,
        ]
        result = run_command(cmd, cwd=ctx.working_dir, timeout=ctx.param("timeout", 600))
        if result["ok"]:
            return self._success(ctx, url, dest, 200)

        code = result.get("return_code")
        _discard(dest)
        match = _WGET_HTTP_ERROR.search(result.get("stderr", ""))
        if match:
            status = int(match.group(1))
            return self._failure(ctx, url, f"HTTP {status} for {url}", http_status=status)

        return self._failure(
            ctx, url, result.get("error", "wget failed"),
            network_error=code in _WGET_NETWORK_EXITS or bool(result.get("timed_out")),
            return_code=code,
        )

    def _success(self, ctx: ExecutionContext, url: str, dest: str, status: int) -> Receipt:
        logger.debug("Downloaded %s -> %s", url, dest)
        return Receipt.success(
            adapter=self.name,
            action_id=ctx.action.id,
            output=f"Downloaded {url}",
            metadata={"url": url, "dest": dest, "http_status": status, "tool": self._tool},
        )

    def _failure(self, ctx: ExecutionContext, url: str, error: str, **metadata) -> Receipt:
        metadata.setdefault("network_error", False)
        return Receipt.failure(
            adapter=self.name,
            action_id=ctx.action.id,
            error=error,
            metadata={"url": url, "tool": self._tool, **metadata},
        )


def _parse_status(text: str) -> int | None:
    text = text.strip()[-3:]
    if not text.isdigit() or text == "000":
        return None
    return int(text)


def _discard(path: str) -> None:
    try:
        Path(path).unlink(missing_ok=True)
    except OSError as exc:
        logger.debug("Could not remove partial download %s: %s", path, exc)
