from pathlib import Path

import pytest
from pydantic import ValidationError

from web_research_agent.config import AgentConfig, load_config


def test_defaults_match_documented_limits() -> None:
    config = AgentConfig()

    assert config.max_steps == 10
    assert config.extraction.max_search_results == 5
    assert config.extraction.content_char_budget == 2000
    assert config.extraction.content_selectors[0] == "article"
    assert config.extraction.content_selectors[-1] == "body"
    assert config.browser.headless is True


def test_load_config_reads_env_file(tmp_path: Path) -> None:
    env_path = tmp_path / ".env"
    env_path.write_text(
        "\n".join(
            [
                "WEB_RESEARCH_AGENT_LLM__PROVIDER=mock",
                "WEB_RESEARCH_AGENT_LLM__MODEL=env-model",
                "WEB_RESEARCH_AGENT_MAX_STEPS=4",
                "WEB_RESEARCH_AGENT_BROWSER__NAVIGATION_TIMEOUT=12.5",
            ]
        )
    )

    config = load_config(env_file=env_path)

    assert config.llm.provider == "mock"
    assert config.llm.model == "env-model"
    assert config.max_steps == 4
    assert config.browser.navigation_timeout == 12.5


def test_load_config_prioritises_overrides(tmp_path: Path) -> None:
    env_path = tmp_path / ".env"
    env_path.write_text(
        "\n".join(
            [
                "WEB_RESEARCH_AGENT_LLM__PROVIDER=mock",
                "WEB_RESEARCH_AGENT_MAX_STEPS=4",
            ]
        )
    )

    config_path = tmp_path / "agent.yaml"
    config_path.write_text(
        "\n".join(
            [
                "max_steps: 6",
                "extraction:",
                "  content_char_budget: 500",
            ]
        )
    )

    config = load_config(config_path, env_file=env_path, max_steps=8)

    assert config.max_steps == 8
    assert config.extraction.content_char_budget == 500
    assert config.extraction.max_search_results == 5
    assert config.llm.provider == "mock"


def test_max_steps_must_be_positive() -> None:
    with pytest.raises(ValidationError):
        AgentConfig(max_steps=0)
