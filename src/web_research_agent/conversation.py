"""Append-only conversation history shared with the decision oracle."""

from __future__ import annotations

from typing import Iterable, Iterator, Optional

from .models import (
    TURN_TYPES,
    OracleMessage,
    ToolCallBatch,
    ToolCallRequest,
    ToolCallResult,
    ToolResultBatch,
    Turn,
    UserMessage,
)


class ConversationState:
    """Ordered log of turns. Turns are only ever appended, never edited or removed."""

    def __init__(self) -> None:
        self._turns: list[Turn] = []

    def append(self, turn: Turn) -> Turn:
        if not isinstance(turn, TURN_TYPES):
            raise TypeError(f"Expected a conversation turn, got {type(turn).__name__}")
        self._turns.append(turn)
        return turn

    def add_user_message(self, text: str) -> UserMessage:
        return self.append(UserMessage(text=text))

    def add_oracle_message(self, text: str) -> OracleMessage:
        return self.append(OracleMessage(text=text))

    def add_tool_calls(self, requests: Iterable[ToolCallRequest]) -> ToolCallBatch:
        return self.append(ToolCallBatch(requests=tuple(requests)))

    def add_tool_results(self, results: Iterable[ToolCallResult]) -> ToolResultBatch:
        return self.append(ToolResultBatch(results=tuple(results)))

    def snapshot(self) -> tuple[Turn, ...]:
        """Immutable view of the history at this point."""

        return tuple(self._turns)

    def last(self) -> Optional[Turn]:
        return self._turns[-1] if self._turns else None

    def __iter__(self) -> Iterator[Turn]:
        return iter(tuple(self._turns))

    def __len__(self) -> int:
        return len(self._turns)
