"""Main orchestrator that couples the decision oracle with the browser tools."""

from __future__ import annotations

import logging
from typing import Optional

from ..browser.base import BrowserSession
from ..conversation import ConversationState
from ..llm.base import DecisionOracle, OracleError
from ..models import FinalAnswer, NotificationEvent, NotificationLevel, ToolCalls, Turn
from ..notifications.base import NullNotifier, Notifier
from ..tools.registry import CapabilityRegistry
from .control import RunController

LOGGER = logging.getLogger(__name__)

DEFAULT_MAX_STEPS = 10


class OrchestratorError(RuntimeError):
    """Base class for conditions that end a run without an answer."""


class LoopTerminatedWithoutAnswer(OrchestratorError):
    """The step budget ran out before the oracle produced a final answer."""

    def __init__(self, steps: int) -> None:
        super().__init__(f"No final answer after {steps} step(s)")
        self.steps = steps


class RunCancelled(OrchestratorError):
    """The caller cancelled the run."""


class ResearchOrchestrator:
    """Drive the decide/execute loop for a single research run.

    Each oracle response is either a final answer, which ends the run, or a
    batch of tool calls that are dispatched one after another in the order
    given. Calls and results are appended to the conversation, which is the
    only context the oracle sees on the next step. The browser session is
    closed exactly once when :meth:`run` returns or raises.
    """

    def __init__(
        self,
        oracle: DecisionOracle,
        session: BrowserSession,
        registry: CapabilityRegistry,
        *,
        max_steps: int = DEFAULT_MAX_STEPS,
        notifier: Optional[Notifier] = None,
        controller: Optional[RunController] = None,
    ) -> None:
        if max_steps < 1:
            raise ValueError("max_steps must be at least 1")
        self._oracle = oracle
        self._session = session
        self._registry = registry
        self._max_steps = max_steps
        self._notifier = notifier or NullNotifier()
        self._controller = controller or RunController()
        self._conversation = ConversationState()
        self._started = False

    @property
    def conversation(self) -> ConversationState:
        return self._conversation

    @property
    def turns(self) -> tuple[Turn, ...]:
        """Every turn of the run so far, in order."""

        return self._conversation.snapshot()

    @property
    def controller(self) -> RunController:
        return self._controller

    def run(self, instruction: str, max_steps: Optional[int] = None) -> str:
        """Research ``instruction`` and return the oracle's final answer.

        Raises :class:`LoopTerminatedWithoutAnswer` when the step budget is
        exhausted, :class:`RunCancelled` when cancelled between steps, and
        :class:`~web_research_agent.llm.base.OracleError` when the oracle fails.
        """

        try:
            if not instruction.strip():
                raise ValueError("Instruction must not be empty")
            budget = self._max_steps if max_steps is None else max_steps
            if budget < 1:
                raise ValueError("max_steps must be at least 1")
            if self._started:
                raise RuntimeError("ResearchOrchestrator instances run only once")
            self._started = True

            LOGGER.info("Starting research run: %s", instruction)
            self._notify("run_started", f"Researching: {instruction}", NotificationLevel.INFO)
            answer = self._loop(instruction, budget)
        except RunCancelled as exc:
            self._notify("run_cancelled", str(exc), NotificationLevel.WARNING)
            raise
        except (OrchestratorError, OracleError) as exc:
            LOGGER.error("Research run failed: %s", exc)
            self._notify("run_failed", str(exc), NotificationLevel.ERROR)
            raise
        finally:
            self._session.close()
        self._notify(
            "run_finished",
            "Research complete",
            NotificationLevel.SUCCESS,
            data={"turns": len(self._conversation)},
        )
        return answer

    def _loop(self, instruction: str, budget: int) -> str:
        self._conversation.add_user_message(instruction)
        catalog = self._registry.catalog()
        for step in range(1, budget + 1):
            if self._controller.cancelled:
                raise RunCancelled(self._controller.reason or "Run cancelled")
            LOGGER.info("Step %d/%d: asking the oracle for the next action", step, budget)
            response = self._oracle.decide(self._conversation.snapshot(), catalog)
            if isinstance(response, FinalAnswer):
                self._conversation.add_oracle_message(response.text)
                return response.text
            if not isinstance(response, ToolCalls):
                raise OracleError(f"Unsupported oracle response: {type(response).__name__}")
            self._conversation.add_tool_calls(response.requests)
            results = [self._registry.dispatch(request) for request in response.requests]
            self._conversation.add_tool_results(results)
        raise LoopTerminatedWithoutAnswer(budget)

    def _notify(
        self,
        event_type: str,
        message: str,
        level: NotificationLevel,
        data: Optional[dict[str, object]] = None,
    ) -> None:
        self._notifier.notify(
            NotificationEvent(type=event_type, message=message, level=level, data=data or {})
        )
