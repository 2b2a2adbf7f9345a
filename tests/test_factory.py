import pytest

from web_research_agent.browser.playwright_session import PlaywrightBrowserSession
from web_research_agent.config import AgentConfig, LLMConfig, NotificationConfig
from web_research_agent.factory import (
    build_browser,
    build_notifier,
    build_oracle,
    build_orchestrator,
)
from web_research_agent.llm.mock import ScriptedOracle
from web_research_agent.llm.openai_client import OpenAIChatOracle
from web_research_agent.models import FinalAnswer, SessionState, ToolCalls
from web_research_agent.notifications.base import ConsoleNotifier, NullNotifier


def test_build_mock_oracle_from_parameters():
    config = LLMConfig(
        provider="mock",
        parameters={
            "responses": [
                {"kind": "tool_calls", "requests": [{"tool_name": "launch_browser"}]},
                {"kind": "final_answer", "text": "done"},
            ]
        },
    )

    oracle = build_oracle(config)

    assert isinstance(oracle, ScriptedOracle)
    first = oracle.decide([], [])
    assert isinstance(first, ToolCalls)
    assert oracle.decide([], []) == FinalAnswer(text="done")


def test_build_openai_oracle():
    oracle = build_oracle(LLMConfig(provider="openai", model="gpt-test", api_key="k"))

    assert isinstance(oracle, OpenAIChatOracle)
    oracle.close()


def test_unsupported_provider():
    with pytest.raises(ValueError):
        build_oracle(LLMConfig(provider="carrier-pigeon"))


def test_build_notifier_channels():
    assert isinstance(build_notifier(NotificationConfig(channel="console")), ConsoleNotifier)
    assert isinstance(build_notifier(NotificationConfig(channel="none")), NullNotifier)
    with pytest.raises(ValueError):
        build_notifier(NotificationConfig(channel="pager"))


def test_build_browser_does_not_launch():
    session = build_browser(AgentConfig())

    assert isinstance(session, PlaywrightBrowserSession)
    assert session.state is SessionState.UNINITIALIZED


def test_build_orchestrator_runs_with_injected_parts(fake_driver):
    config = AgentConfig.model_validate(
        {
            "llm": {
                "provider": "mock",
                "parameters": {"responses": [{"kind": "final_answer", "text": "ok"}]},
            },
            "notifications": {"channel": "none"},
        }
    )
    session = PlaywrightBrowserSession(config.browser, playwright_factory=fake_driver)

    orchestrator = build_orchestrator(config, session=session)

    assert orchestrator.run("Say ok") == "ok"
    assert session.state is SessionState.CLOSED
    assert fake_driver.start_calls == 0
