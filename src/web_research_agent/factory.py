"""Factories for constructing components from configuration."""

from __future__ import annotations

from typing import Optional

from pydantic import TypeAdapter

from .browser.base import BrowserSession
from .browser.playwright_session import PlaywrightBrowserSession
from .config import AgentConfig, BrowserConfig, LLMConfig, NotificationConfig
from .llm.base import DecisionOracle
from .llm.mock import ScriptedOracle
from .llm.openai_client import OpenAIChatOracle
from .models import OracleResponse
from .notifications.base import ConsoleNotifier, Notifier, NullNotifier
from .orchestrator.control import RunController
from .orchestrator.runner import ResearchOrchestrator
from .tools.browser_tools import build_browser_registry
from .tools.registry import CapabilityRegistry

_ORACLE_RESPONSES = TypeAdapter(list[OracleResponse])


def build_oracle(config: LLMConfig) -> DecisionOracle:
    provider = config.provider.lower()
    if provider in {"openai", "azure", "openai-compatible"}:
        return OpenAIChatOracle(config)
    if provider == "mock":
        responses = _ORACLE_RESPONSES.validate_python(config.parameters.get("responses", []))
        return ScriptedOracle(responses)
    raise ValueError(f"Unsupported LLM provider: {config.provider}")


def build_browser(config: AgentConfig) -> PlaywrightBrowserSession:
    return PlaywrightBrowserSession(
        config.browser,
        search_engine=config.search_engine,
        extraction=config.extraction,
    )


def build_registry(session: BrowserSession, config: BrowserConfig) -> CapabilityRegistry:
    return build_browser_registry(session, config)


def build_notifier(config: NotificationConfig) -> Notifier:
    channel = config.channel.lower()
    if channel == "console":
        return ConsoleNotifier()
    if channel == "none":
        return NullNotifier()
    raise ValueError(f"Unsupported notification channel: {config.channel}")


def build_orchestrator(
    config: AgentConfig,
    *,
    oracle: Optional[DecisionOracle] = None,
    session: Optional[BrowserSession] = None,
    notifier: Optional[Notifier] = None,
    controller: Optional[RunController] = None,
) -> ResearchOrchestrator:
    """Assemble an orchestrator with a fresh browser session for one run."""

    session = session or build_browser(config)
    return ResearchOrchestrator(
        oracle=oracle or build_oracle(config.llm),
        session=session,
        registry=build_registry(session, config.browser),
        max_steps=config.max_steps,
        notifier=notifier or build_notifier(config.notifications),
        controller=controller,
    )


def run_research(instruction: str, config: Optional[AgentConfig] = None) -> str:
    """Run one research task end to end and return the final answer."""

    orchestrator = build_orchestrator(config or AgentConfig())
    return orchestrator.run(instruction)
