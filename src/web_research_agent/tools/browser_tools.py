"""Tools that expose a browser session to the decision oracle."""

from __future__ import annotations

import json
from typing import Optional

from ..browser.base import BrowserSession
from ..config import BrowserConfig
from ..models import ParameterType, ToolDescriptor, ToolParameter
from .registry import CapabilityRegistry

LAUNCH_BROWSER = ToolDescriptor(
    name="launch_browser",
    description="Start the web browser. Call this once before any other browser tool.",
)

NAVIGATE_TO_SEARCH_ENGINE = ToolDescriptor(
    name="navigate_to_search_engine",
    description="Open the search engine home page so that a search can be made.",
)

SEARCH_FOR = ToolDescriptor(
    name="search_for",
    description=(
        "Type a query into the search engine and submit it. "
        "Requires navigate_to_search_engine to have been called first."
    ),
    parameters=(
        ToolParameter(
            name="query",
            type=ParameterType.STRING,
            description="The text to search for.",
        ),
    ),
)

EXTRACT_SEARCH_RESULTS = ToolDescriptor(
    name="extract_search_results",
    description=(
        "Return the top results of the current search as a JSON list of "
        "objects with 'title' and 'url'. Requires search_for first."
    ),
)

FETCH_PAGE_CONTENT = ToolDescriptor(
    name="fetch_page_content",
    description=(
        "Open a web page and return the readable text of its main content, "
        "truncated to a fixed length."
    ),
    parameters=(
        ToolParameter(
            name="url",
            type=ParameterType.STRING,
            description="Absolute http(s) URL of the page to read.",
        ),
    ),
)


class BrowserTools:
    """Handlers binding the browser tool descriptors to one session."""

    def __init__(self, session: BrowserSession, *, auto_launch: bool = True) -> None:
        self._session = session
        self._auto_launch = auto_launch

    def launch_browser(self) -> str:
        self._session.launch()
        return "Browser is running."

    def navigate_to_search_engine(self) -> str:
        self._ensure_launched()
        url = self._session.navigate_to_search_engine()
        return f"Search engine loaded at {url}."

    def search_for(self, query: str) -> str:
        self._session.search_for(query)
        return f"Search results for {query!r} are ready."

    def extract_search_results(self) -> str:
        results = self._session.extract_search_results()
        return json.dumps([result.model_dump() for result in results], ensure_ascii=False)

    def fetch_page_content(self, url: str) -> str:
        self._ensure_launched()
        return self._session.fetch_page_content(url)

    def _ensure_launched(self) -> None:
        if self._auto_launch:
            self._session.launch()


def build_browser_registry(
    session: BrowserSession,
    config: Optional[BrowserConfig] = None,
    registry: Optional[CapabilityRegistry] = None,
) -> CapabilityRegistry:
    """Register the browser tools for ``session`` and return the registry."""

    config = config or BrowserConfig()
    registry = registry if registry is not None else CapabilityRegistry()
    tools = BrowserTools(session, auto_launch=config.auto_launch)
    registry.register(LAUNCH_BROWSER, tools.launch_browser)
    registry.register(NAVIGATE_TO_SEARCH_ENGINE, tools.navigate_to_search_engine)
    registry.register(SEARCH_FOR, tools.search_for)
    registry.register(EXTRACT_SEARCH_RESULTS, tools.extract_search_results)
    registry.register(FETCH_PAGE_CONTENT, tools.fetch_page_content)
    return registry
