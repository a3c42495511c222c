"""
Adapter registry — one dispatch point for every external side effect.

The install flow builds an ``Action`` and hands it to
``execute_action``; it never calls git, unzip, curl/wget or npm
adapters directly, so tests can swap any of them for a MockAdapter.
"""

from __future__ import annotations

import logging
import time

from appfast_bootstrap.adapters.base import Adapter, ExecutionContext
from appfast_bootstrap.core.models.action import Action, Receipt

logger = logging.getLogger(__name__)


class AdapterRegistry:
    """Adapters keyed by name."""

    def __init__(self) -> None:
        self._by_name: dict[str, Adapter] = {}

    def register(self, adapter: Adapter) -> None:
        if adapter.name in self._by_name:
            logger.warning("Replacing adapter %r", adapter.name)
        self._by_name[adapter.name] = adapter

    def execute_action(
        self,
        action: Action,
        working_dir: str = ".",
    ) -> Receipt:
        """Validate, then execute ``action``. Never raises.

        Args:
            action: What to do and which adapter does it.
            working_dir: Directory the adapter runs in.
        """
        started = time.monotonic()

        def _fail(error: str) -> Receipt:
            return Receipt.failure(adapter=action.adapter, action_id=action.id, error=error)

        adapter = self._by_name.get(action.adapter)
        if adapter is None:
            return _fail(f"No adapter registered for '{action.adapter}'")

        context = ExecutionContext(action=action, working_dir=working_dir)

        try:
            valid, reason = adapter.validate(context)
        except Exception as exc:
            return _fail(f"Validation error: {exc}")
        if not valid:
            return _fail(f"Validation failed: {reason}")

        logger.debug("Running %s:%s in %s", action.adapter, action.id, working_dir)
        try:
            receipt = adapter.execute(context)
        except Exception as exc:
            logger.error("%s:%s raised: %s", action.adapter, action.id, exc)
            receipt = _fail(f"Unexpected error: {exc}")

        receipt.duration_ms = int((time.monotonic() - started) * 1000)
        if receipt.failed:
            logger.info("%s:%s failed: %s", action.adapter, action.id, receipt.error)
        return receipt
