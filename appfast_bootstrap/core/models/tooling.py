"""
Tool models — what the installer needs on PATH and what it found.
"""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, ConfigDict


class ToolRole(StrEnum):
    """How the planner treats a missing tool."""

    HARD = "hard"            # absence aborts the run
    DOWNLOAD = "download"    # first present one wins; none present aborts
    RUNTIME = "runtime"      # absence offers an interactive install first


class ToolRequirement(BaseModel):
    """A tool the installer expects to find on the search path."""

    model_config = ConfigDict(frozen=True)

    name: str
    role: ToolRole = ToolRole.HARD
    min_version: str | None = None
    label: str = ""

    @property
    def display_name(self) -> str:
        return self.label or self.name


class ToolStatus(BaseModel):
    """Result of probing one required tool.

    ``version`` is the raw first line the tool reported, only
    collected when the requirement carries a minimum version.
    ``meets_minimum`` is ``None`` when no minimum applies.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    found: bool
    version: str | None = None
    meets_minimum: bool | None = None
    path: str | None = None

    @property
    def satisfied(self) -> bool:
        """Present and, if a minimum applies, new enough."""
        return self.found and self.meets_minimum is not False
