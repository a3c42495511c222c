"""
Action and Receipt models — the contract with external tools.

The install flow sends Actions (clone, download, extract, run);
adapters answer with Receipts. Never exceptions.
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any, Literal

from pydantic import BaseModel, Field


def _now_iso() -> str:
    """Current UTC time as ISO string."""
    return datetime.now(UTC).isoformat()


class Action(BaseModel):
    """A side effect the install flow wants an adapter to perform."""

    id: str                         # step identifier, e.g. "clone-frontend"
    adapter: str                    # which adapter handles this
    name: str = ""                  # human-readable label for logs
    params: dict[str, Any] = Field(default_factory=dict)


class Receipt(BaseModel):
    """Outcome of one adapter execution.

    Adapter-specific details (exit code, HTTP status, whether the
    failure looked like a network problem) go into ``metadata``.
    """

    adapter: str
    action_id: str
    status: Literal["ok", "failed"] = "ok"

    started_at: str = Field(default_factory=_now_iso)
    duration_ms: int = 0

    output: str = ""
    error: str | None = None

    metadata: dict[str, Any] = Field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return self.status == "ok"

    @property
    def failed(self) -> bool:
        return self.status == "failed"

    @classmethod
    def success(cls, adapter: str, action_id: str, output: str = "", **extra: Any) -> Receipt:
        return cls(adapter=adapter, action_id=action_id, output=output, **extra)

    @classmethod
    def failure(cls, adapter: str, action_id: str, error: str, **extra: Any) -> Receipt:
        return cls(adapter=adapter, action_id=action_id, status="failed", error=error, **extra)

