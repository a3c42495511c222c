"""
Mock adapter — test double for any adapter name.

Returns success by default. Per-action responses and side effects
(e.g. creating the extracted binary) can be scripted so the install
flow can run end to end without git, unzip or the network.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from appfast_bootstrap.adapters.base import Adapter, ExecutionContext
from appfast_bootstrap.core.models.action import Receipt

SideEffect = Callable[[ExecutionContext], None]


class MockAdapter(Adapter):
    """Scriptable stand-in for a real adapter."""

    def __init__(
        self,
        adapter_name: str = "mock",
        default_output: str = "[mock] executed",
    ):
        self._name = adapter_name
        self._default_output = default_output
        self._responses: dict[str, Receipt] = {}
        self._side_effects: dict[str, SideEffect] = {}
        self._call_log: list[ExecutionContext] = []

    @property
    def name(self) -> str:
        return self._name

    @property
    def call_log(self) -> list[ExecutionContext]:
        return self._call_log

    @property
    def call_count(self) -> int:
        return len(self._call_log)

    @property
    def called_ids(self) -> list[str]:
        return [ctx.action.id for ctx in self._call_log]

    def set_response(self, action_id: str, receipt: Receipt) -> None:
        self._responses[action_id] = receipt

    def set_failure(
        self,
        action_id: str,
        error: str = "Mock failure",
        **metadata: Any,
    ) -> None:
        """Make ``action_id`` fail, optionally with receipt metadata."""
        self._responses[action_id] = Receipt.failure(
            adapter=self._name,
            action_id=action_id,
            error=error,
            metadata=metadata,
        )

    def on_execute(self, action_id: str, effect: SideEffect) -> None:
        """Run ``effect(context)`` when ``action_id`` executes."""
        self._side_effects[action_id] = effect

    def validate(self, context: ExecutionContext) -> tuple[bool, str]:
        return True, ""

    def execute(self, context: ExecutionContext) -> Receipt:
        self._call_log.append(context)
        action_id = context.action.id

        effect = self._side_effects.get(action_id)
        if effect is not None:
            effect(context)

        if action_id in self._responses:
            return self._responses[action_id]

        return Receipt.success(
            adapter=self._name,
            action_id=action_id,
            output=self._default_output,
            metadata={"mock": True},
        )

    def reset(self) -> None:
        self._call_log.clear()
        self._responses.clear()
        self._side_effects.clear()
