"""Base classes for decision oracles."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Sequence

from ..models import FinalAnswer, OracleResponse, ToolCalls, ToolDescriptor, Turn


class OracleError(RuntimeError):
    """Raised when the oracle cannot be reached or returns something unusable.

    This is fatal to a research run.
    """


class DecisionOracle(ABC):
    """Abstract interface for the component that decides the next step."""

    @abstractmethod
    def decide(
        self,
        history: Sequence[Turn],
        catalog: Sequence[ToolDescriptor],
    ) -> OracleResponse:
        """Return either a final answer or the tool calls to run next.

        ``history`` is the full conversation so far and ``catalog`` lists every
        tool that may be requested.
        """


class StaticOracle(DecisionOracle):
    """An oracle that always returns a predefined response.

    Useful for tests and for wiring the orchestrator without calling a real LLM.
    """

    def __init__(self, response: FinalAnswer | ToolCalls) -> None:
        self._response = response

    def decide(
        self,
        history: Sequence[Turn],
        catalog: Sequence[ToolDescriptor],
    ) -> OracleResponse:
        return self._response
