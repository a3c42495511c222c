"""
Adapter base — the contract between the install flow and external tools.

The install flow only talks to git, unzip, curl/wget and npm through
adapters, which makes every side effect swappable in tests.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from pydantic import BaseModel

from appfast_bootstrap.core.models.action import Action, Receipt


class ExecutionContext(BaseModel):
    """Everything an adapter needs to execute an action."""

    action: Action
    working_dir: str = "."

    def param(self, key: str, default: Any = None) -> Any:
        return self.action.params.get(key, default)


class Adapter(ABC):
    """Abstract base class for all adapters.

    Adapters perform one kind of external side effect and return
    receipts. They NEVER raise — failures are captured in the Receipt.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """The adapter identifier (e.g. 'git', 'unzip', 'download')."""

    @abstractmethod
    def validate(self, context: ExecutionContext) -> tuple[bool, str]:
        """Check the action's params.

        Returns:
            (is_valid, error_message). error_message is empty if valid.
        """

    @abstractmethod
    def execute(self, context: ExecutionContext) -> Receipt:
        """Perform the action. MUST never raise."""

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} name={self.name!r}>"
