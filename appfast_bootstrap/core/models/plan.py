"""
Install plan model — the single decision object the planner hands
to the execution layer.

A plan is built once, is terminal, and is discarded after use.
It is executable only in the ``READY`` state; every other terminal
state carries a ``PlanFailure`` and a non-empty ``missing_hard``.
"""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field

from appfast_bootstrap.core.errors import ErrorKind, error_for_kind
from appfast_bootstrap.core.models.platform import PlatformInfo
from appfast_bootstrap.core.models.release import ReleaseAsset
from appfast_bootstrap.core.models.tooling import ToolStatus


class PlanState(StrEnum):
    """Planner states, in transition order."""

    INIT = "init"
    PLATFORM_CHECKED = "platform_checked"
    TOOLS_CHECKED = "tools_checked"
    VERSION_RESOLVED = "version_resolved"
    ASSET_BUILT = "asset_built"
    READY = "ready"
    FAILED = "failed"


class VersionChoice(BaseModel):
    """The user's version answer plus what the release index returned."""

    model_config = ConfigDict(frozen=True)

    use_latest: bool = False
    latest: str | None = None


class PlanFailure(BaseModel):
    """Why planning stopped, and at which transition."""

    model_config = ConfigDict(frozen=True)

    kind: ErrorKind
    failed_at: PlanState
    message: str
    tool: str | None = None


class InstallPlan(BaseModel):
    """Everything the execution layer needs to act (or to explain why not)."""

    model_config = ConfigDict(frozen=True)

    platform: PlatformInfo
    tools: tuple[ToolStatus, ...] = ()
    missing_hard: frozenset[str] = Field(default_factory=frozenset)
    remediation: dict[str, str] = Field(default_factory=dict)
    asset: ReleaseAsset | None = None
    state: PlanState = PlanState.INIT
    download_tool: str | None = None
    version: str | None = None
    failure: PlanFailure | None = None

    @property
    def executable(self) -> bool:
        return self.state == PlanState.READY

    def tool(self, name: str) -> ToolStatus | None:
        """Look up a tool status by name."""
        for status in self.tools:
            if status.name == name:
                return status
        return None

    def remediation_text(self) -> str:
        """All remediation hints, one per line, in a stable order."""
        return "\n".join(self.remediation[name] for name in sorted(self.remediation))

    def raise_for_failure(self) -> None:
        """Raise the installer error matching this plan's failure, if any."""
        if self.failure is None:
            return
        tool = self.failure.tool
        remediation = self.remediation.get(tool, "") if tool else self.remediation_text()
        raise error_for_kind(
            self.failure.kind,
            self.failure.message,
            remediation=remediation or self.remediation_text(),
            tool=tool,
        )

    def to_dict(self) -> dict:
        data = self.model_dump(mode="json")
        data["missing_hard"] = sorted(self.missing_hard)
        data["executable"] = self.executable
        return data
