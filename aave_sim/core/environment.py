# aave_sim/core/environment.py

from abc import ABC, abstractmethod


class RevertError(Exception):
    """A call was reverted by the execution environment. No state was changed."""
    def __init__(self, reason: str = ""):
        super().__init__(reason)
        self.reason = reason


class Environment(ABC):
    """
    Request/response service holding the lending market and exchange state.
    Agents only ever talk to the protocols through this interface.

    Both `query` and `execute` return an `(output, events)` pair and raise
    RevertError when the call reverts.
    """

    @abstractmethod
    def query(self, caller: str, target: str, request) -> tuple:
        """Evaluates `request` against `target` without changing any state."""

    @abstractmethod
    def execute(self, caller: str, target: str, request, value: int = 0) -> tuple:
        """Applies `request` to `target`. State is only changed if the call succeeds."""

    @abstractmethod
    def provision(self, address: str, balance: int):
        """Credits `address` with a native balance."""
