"""Mock oracles for testing and offline use."""

from __future__ import annotations

from collections import deque
from typing import Deque, Iterable, Sequence

from ..models import OracleResponse, ToolDescriptor, Turn
from .base import DecisionOracle, OracleError


class ScriptedOracle(DecisionOracle):
    """Return responses from a predefined sequence."""

    def __init__(self, responses: Iterable[OracleResponse]) -> None:
        self._responses: Deque[OracleResponse] = deque(responses)
        self.histories: list[tuple[Turn, ...]] = []
        self.catalogs: list[tuple[ToolDescriptor, ...]] = []

    def decide(
        self,
        history: Sequence[Turn],
        catalog: Sequence[ToolDescriptor],
    ) -> OracleResponse:
        self.histories.append(tuple(history))
        self.catalogs.append(tuple(catalog))
        if not self._responses:
            raise OracleError("ScriptedOracle ran out of responses")
        return self._responses.popleft()
