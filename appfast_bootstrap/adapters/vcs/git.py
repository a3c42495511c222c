"""
Git adapter — clone the application template.

Uses the git CLI, never raw API calls.
"""

from __future__ import annotations

import logging
from pathlib import Path

from appfast_bootstrap.adapters.base import Adapter, ExecutionContext
from appfast_bootstrap.adapters.shell.command import run_command
from appfast_bootstrap.core.models.action import Receipt

logger = logging.getLogger(__name__)


class GitAdapter(Adapter):
    """Git operations.

    Action params:
        operation (str): Only 'clone' is supported.
        url (str): Repository URL.
        dest (str): Destination directory (must not exist yet).
        depth (int): Optional shallow-clone depth.
        timeout (int): Timeout in seconds (default: 300).
    """

    _OPERATIONS = {"clone"}

    @property
    def name(self) -> str:
        return "git"

    def validate(self, context: ExecutionContext) -> tuple[bool, str]:
        operation = context.param("operation", "")
        if operation not in self._OPERATIONS:
            return False, f"Unknown operation '{operation}'. Valid: {', '.join(sorted(self._OPERATIONS))}"

        if not context.param("url"):
            return False, "Missing required param: 'url'"
        dest = context.param("dest")
        if not dest:
            return False, "Missing required param: 'dest'"
        if Path(dest).exists():
            return False, f"Destination already exists: {dest}"
        return True, ""

    def execute(self, context: ExecutionContext) -> Receipt:
        return self._clone(context)

    def _clone(self, ctx: ExecutionContext) -> Receipt:
        url = ctx.param("url")
        dest = ctx.param("dest")
        args = ["git", "clone"]
        depth = ctx.param("depth")
        if depth:
            args += ["--depth", str(depth)]
        args += [url, dest]

        logger.debug("git clone %s -> %s", url, dest)
        result = run_command(args, cwd=ctx.working_dir, timeout=ctx.param("timeout", 300))
        if result["ok"]:
            return Receipt.success(
                adapter=self.name,
                action_id=ctx.action.id,
                output=f"Cloned {url} into {dest}",
                metadata={"url": url, "dest": dest},
            )
        return Receipt.failure(
            adapter=self.name,
            action_id=ctx.action.id,
            error=f"Git error: {result['error']}",
            metadata={"url": url, "dest": dest, "return_code": result.get("return_code")},
        )
