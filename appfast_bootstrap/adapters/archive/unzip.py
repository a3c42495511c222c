"""
Archive adapter — extract release archives with the ``unzip`` CLI.
"""

from __future__ import annotations

from pathlib import Path

from appfast_bootstrap.adapters.base import Adapter, ExecutionContext
from appfast_bootstrap.adapters.shell.command import run_command
from appfast_bootstrap.core.models.action import Receipt


class UnzipAdapter(Adapter):
    """Extract a zip archive, overwriting existing files.

    Action params:
        archive (str): Path to the archive.
        dest (str): Directory to extract into.
        timeout (int): Timeout in seconds (default: 120).
    """

    @property
    def name(self) -> str:
        return "unzip"

    def validate(self, context: ExecutionContext) -> tuple[bool, str]:
        archive = context.param("archive")
        dest = context.param("dest")
        if not archive:
            return False, "Missing required param: 'archive'"
        if not dest:
            return False, "Missing required param: 'dest'"
        if not Path(archive).is_file():
            return False, f"Archive not found: {archive}"
        if not Path(dest).is_dir():
            return False, f"Destination is not a directory: {dest}"
        return True, ""

    def execute(self, context: ExecutionContext) -> Receipt:
        archive = context.param("archive")
        dest = context.param("dest")

        result = run_command(
            ["unzip", "-o", archive, "-d", dest],
            cwd=context.working_dir,
            timeout=context.param("timeout", 120),
        )
        if result["ok"]:
            return Receipt.success(
                adapter=self.name,
                action_id=context.action.id,
                output=f"Extracted {archive}",
                metadata={"archive": archive, "dest": dest},
            )
        return Receipt.failure(
            adapter=self.name,
            action_id=context.action.id,
            error=result["error"],
            metadata={"archive": archive, "return_code": result.get("return_code")},
        )
