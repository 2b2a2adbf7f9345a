"""Playwright-powered browser session implementation."""

from __future__ import annotations

import logging
from typing import Any, Callable, Optional
from urllib.parse import urlparse

from playwright.sync_api import Error, sync_playwright
from playwright.sync_api import TimeoutError as PlaywrightTimeoutError
from pydantic import ValidationError

from ..config import BrowserConfig, ExtractionConfig, SearchEngineConfig
from ..models import SearchResult, SessionState
from .base import (
    BrowserSession,
    ExtractionFailure,
    InteractionFailure,
    LaunchFailure,
    NavigationFailure,
    PreconditionFailure,
)

LOGGER = logging.getLogger(__name__)

_EXTRACT_RESULTS_SCRIPT = """
({itemSelector, linkSelector}) => {
    const items = Array.from(document.querySelectorAll(itemSelector));
    return items
        .map((item) => {
            const link = item.querySelector(linkSelector);
            if (!link) {
                return null;
            }
            const title = (link.innerText || link.textContent || "").trim();
            return {title: title, url: link.href || ""};
        })
        .filter((entry) => entry !== null);
}
"""


class PlaywrightBrowserSession(BrowserSession):
    """Browser session backed by Playwright.

    The session owns the Playwright driver, one browser, one context and a
    single page. Every page operation checks the lifecycle state before the
    driver is touched, so calls made in the wrong order fail fast with
    :class:`PreconditionFailure`.
    """

    def __init__(
        self,
        config: Optional[BrowserConfig] = None,
        search_engine: Optional[SearchEngineConfig] = None,
        extraction: Optional[ExtractionConfig] = None,
        *,
        playwright_factory: Callable[[], Any] = sync_playwright,
    ) -> None:
        self._config = config or BrowserConfig()
        self._search_engine = search_engine or SearchEngineConfig()
        self._extraction = extraction or ExtractionConfig()
        self._playwright_factory = playwright_factory
        self._playwright = None
        self._browser = None
        self._context = None
        self._page = None
        self._state = SessionState.UNINITIALIZED
        self._on_search_engine = False
        self._results_ready = False

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def on_search_engine(self) -> bool:
        return self._on_search_engine

    @property
    def results_ready(self) -> bool:
        return self._results_ready

    def launch(self) -> None:
        if self._state is SessionState.CLOSED:
            raise PreconditionFailure("Cannot launch: the browser session is closed")
        if self._state is not SessionState.UNINITIALIZED:
            LOGGER.debug("Browser already launched; ignoring launch request")
            return
        LOGGER.debug("Starting Playwright browser session")
        viewport = {"width": self._config.viewport_width, "height": self._config.viewport_height}
        try:
            self._playwright = self._playwright_factory().start()
            self._browser = self._playwright.chromium.launch(
                headless=self._config.headless,
                args=[
                    "--no-sandbox",
                    "--disable-dev-shm-usage",
                    "--disable-gpu",
                ],
            )
            self._context = self._browser.new_context(viewport=viewport)
            self._page = self._context.new_page()
        except Error as exc:
            self._release()
            raise LaunchFailure("Could not start the browser engine") from exc
        self._state = SessionState.LAUNCHED

    def navigate_to_search_engine(self) -> str:
        self._require("open the search engine", SessionState.LAUNCHED, SessionState.PAGE_ACTIVE)
        self._goto(self._search_engine.url)
        self._on_search_engine = True
        return self._page.url

    def search_for(self, query: str) -> None:
        self._require("search", SessionState.PAGE_ACTIVE)
        if not self._on_search_engine:
            raise PreconditionFailure("Cannot search: open the search engine first")
        if not query.strip():
            raise InteractionFailure("Search query must not be empty")
        self._results_ready = False
        timeout = _to_timeout(self._config.interaction_timeout)
        LOGGER.info("Searching %s for %r", self._search_engine.name, query)
        try:
            search_box = self._page.locator(self._search_engine.search_box_selector).first
            search_box.fill(query, timeout=timeout)
            search_box.press("Enter", timeout=timeout)
        except Error as exc:
            raise InteractionFailure("The search box could not be found or used") from exc
        try:
            self._page.wait_for_selector(
                self._search_engine.results_container_selector,
                timeout=timeout,
            )
        except PlaywrightTimeoutError as exc:
            raise InteractionFailure(
                f"Search results did not appear within {self._config.interaction_timeout:g}s"
            ) from exc
        except Error as exc:
            raise InteractionFailure("The results page could not be inspected") from exc
        self._results_ready = True

    def extract_search_results(self) -> list[SearchResult]:
        self._require("extract search results", SessionState.PAGE_ACTIVE)
        if not self._results_ready:
            raise PreconditionFailure("Cannot extract results: no search results are loaded")
        try:
            raw = self._page.evaluate(
                _EXTRACT_RESULTS_SCRIPT,
                {
                    "itemSelector": self._search_engine.result_item_selector,
                    "linkSelector": self._search_engine.result_link_selector,
                },
            )
        except Error as exc:
            raise ExtractionFailure("Could not read search results from the page") from exc
        if not isinstance(raw, list):
            raise ExtractionFailure("The results page has an unexpected structure")
        limit = self._extraction.max_search_results
        results: list[SearchResult] = []
        for entry in raw:
            try:
                result = SearchResult.model_validate(entry)
            except ValidationError as exc:
                raise ExtractionFailure("A search result entry is malformed") from exc
            if not result.title or not result.url:
                continue
            results.append(result)
            if len(results) >= limit:
                break
        LOGGER.debug("Extracted %d search results", len(results))
        return results

    def fetch_page_content(self, url: str) -> str:
        self._require("fetch a page", SessionState.LAUNCHED, SessionState.PAGE_ACTIVE)
        parsed = urlparse(url)
        if parsed.scheme not in {"http", "https"} or not parsed.netloc:
            raise NavigationFailure(f"Only http(s) URLs can be fetched, got {url!r}")
        self._goto(url)
        budget = self._extraction.content_char_budget
        threshold = self._extraction.min_content_length
        for selector in self._extraction.content_selectors:
            text = self._read_region(selector)
            if text is not None and len(text) > threshold:
                LOGGER.debug("Using content region %r for %s", selector, url)
                return text[:budget]
        try:
            text = self._page.inner_text(
                "body", timeout=_to_timeout(self._config.interaction_timeout)
            )
        except Error as exc:
            raise ExtractionFailure(f"No readable text found at {url}") from exc
        return text[:budget]

    def close(self) -> None:
        if self._state is SessionState.CLOSED:
            return
        LOGGER.debug("Stopping Playwright browser session")
        self._release()
        self._state = SessionState.CLOSED
        self._on_search_engine = False
        self._results_ready = False

    def _require(self, operation: str, *allowed: SessionState) -> None:
        if self._state not in allowed:
            raise PreconditionFailure(
                f"Cannot {operation} while the browser session is {self._state.value}"
            )

    def _goto(self, url: str) -> None:
        self._on_search_engine = False
        self._results_ready = False
        LOGGER.info("Navigating to %s", url)
        try:
            self._page.goto(
                url,
                wait_until="networkidle",
                timeout=_to_timeout(self._config.navigation_timeout),
            )
        except PlaywrightTimeoutError as exc:
            raise NavigationFailure(
                f"{url} did not settle within {self._config.navigation_timeout:g}s"
            ) from exc
        except Error as exc:
            raise NavigationFailure(f"Could not load {url}") from exc
        self._state = SessionState.PAGE_ACTIVE

    def _read_region(self, selector: str) -> Optional[str]:
        try:
            element = self._page.query_selector(selector)
            if element is None:
                return None
            return element.inner_text()
        except Error:
            LOGGER.debug("Could not read content region %r", selector, exc_info=True)
            return None

    def _release(self) -> None:
        handles = (
            ("page", self._page, "close"),
            ("context", self._context, "close"),
            ("browser", self._browser, "close"),
            ("driver", self._playwright, "stop"),
        )
        for label, handle, method in handles:
            if handle is None:
                continue
            try:
                getattr(handle, method)()
            except Exception:
                LOGGER.warning("Failed to release browser %s", label, exc_info=True)
        self._page = None
        self._context = None
        self._browser = None
        self._playwright = None


def _to_timeout(timeout: Optional[float]) -> Optional[int]:
    if timeout is None:
        return None
    return int(timeout * 1000)
