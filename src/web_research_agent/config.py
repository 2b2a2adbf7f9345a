"""Configuration models for the web research agent."""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from typing import Any, Optional

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class LLMConfig(BaseModel):
    """Settings for the decision oracle provider."""

    provider: str = Field(default="openai")
    model: Optional[str] = None
    api_key: Optional[str] = None
    base_url: Optional[str] = None
    timeout: float = Field(default=60.0, gt=0, description="Seconds to wait for the oracle.")
    native_tools: bool = Field(
        default=True,
        description="Use the provider's tool-calling API instead of JSON-in-text replies.",
    )
    parameters: dict[str, Any] = Field(default_factory=dict)


class BrowserConfig(BaseModel):
    """Settings for the browser backend."""

    headless: bool = True
    viewport_width: int = 1280
    viewport_height: int = 720
    navigation_timeout: float = Field(default=30.0, gt=0)
    interaction_timeout: float = Field(default=10.0, gt=0)
    auto_launch: bool = Field(
        default=True,
        description="Launch the browser implicitly before navigation tools run.",
    )


class SearchEngineConfig(BaseModel):
    """Selectors describing how to drive and scrape one search engine."""

    name: str = "duckduckgo"
    url: str = "https://duckduckgo.com/"
    search_box_selector: str = 'input[name="q"]'
    results_container_selector: str = '[data-testid="mainline"], #links'
    result_item_selector: str = 'article[data-testid="result"], .result'
    result_link_selector: str = 'a[data-testid="result-title-a"], a.result__a'


class ExtractionConfig(BaseModel):
    """Limits applied to extracted search results and page text."""

    max_search_results: int = Field(default=5, ge=1)
    content_char_budget: int = Field(default=2000, ge=1)
    min_content_length: int = Field(default=200, ge=0)
    content_selectors: list[str] = Field(
        default_factory=lambda: ["article", "main", '[role="main"]', "#content", "body"]
    )


class NotificationConfig(BaseModel):
    """Notification channel settings."""

    channel: str = Field(default="console")


class AgentConfig(BaseSettings):
    """Top-level configuration for a research run."""

    model_config = SettingsConfigDict(
        env_prefix="WEB_RESEARCH_AGENT_",
        env_file=(".env",),
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
    )

    llm: LLMConfig = Field(default_factory=LLMConfig)
    browser: BrowserConfig = Field(default_factory=BrowserConfig)
    search_engine: SearchEngineConfig = Field(default_factory=SearchEngineConfig)
    extraction: ExtractionConfig = Field(default_factory=ExtractionConfig)
    notifications: NotificationConfig = Field(default_factory=NotificationConfig)
    max_steps: int = Field(default=10, ge=1, description="Oracle round-trips allowed per run.")


def load_config(
    path: Path | None = None,
    *,
    env_file: Path | None = None,
    **overrides: object,
) -> AgentConfig:
    """Load configuration from an optional file and overrides."""

    data: dict[str, Any] = {}
    if path:
        import yaml

        data = yaml.safe_load(path.read_text()) or {}
    if overrides:
        _deep_update(data, overrides)
    settings_kwargs: dict[str, object] = {}
    if env_file is not None:
        settings_kwargs["_env_file"] = env_file
    config = AgentConfig(**data, **settings_kwargs)
    if not data:
        return config

    merged = config.model_dump(mode="python")
    _deep_update(merged, data)
    return AgentConfig.model_validate(merged)


def _deep_update(target: dict[str, Any], updates: Mapping[str, Any]) -> None:
    """Recursively merge ``updates`` into ``target`` in-place."""

    for key, value in updates.items():
        if (
            isinstance(value, Mapping)
            and isinstance(existing := target.get(key), Mapping)
        ):
            nested: dict[str, Any]
            if isinstance(existing, dict):
                nested = existing
            else:
                nested = dict(existing)
            _deep_update(nested, value)
            target[key] = nested
        else:
            target[key] = value
