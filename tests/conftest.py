from __future__ import annotations

from typing import Any, Optional

import pytest
from playwright.sync_api import TimeoutError as PlaywrightTimeoutError


class FakeElement:
    def __init__(self, text: str) -> None:
        self.text = text

    def inner_text(self) -> str:
        return self.text


class FakeLocator:
    def __init__(self, page: "FakePage", selector: str) -> None:
        self._page = page
        self._selector = selector

    @property
    def first(self) -> "FakeLocator":
        return self

    def fill(self, value: str, timeout: Optional[int] = None) -> None:
        if self._selector not in self._page.inputs:
            raise PlaywrightTimeoutError(f"Timeout {timeout}ms waiting for {self._selector}")
        self._page.calls.append(("fill", self._selector, value))

    def press(self, key: str, timeout: Optional[int] = None) -> None:
        self._page.calls.append(("press", key))


class FakePage:
    def __init__(self, events: list[str]) -> None:
        self._events = events
        self.url = "about:blank"
        self.calls: list[tuple[Any, ...]] = []
        self.inputs = {'input[name="q"]'}
        self.regions: dict[str, str] = {}
        self.body = ""
        self.search_results: Any = []
        self.goto_error: Optional[Exception] = None
        self.results_appear = True

    def goto(self, url: str, wait_until: Optional[str] = None, timeout: Optional[int] = None) -> None:
        self.calls.append(("goto", url, wait_until))
        if self.goto_error is not None:
            raise self.goto_error
        self.url = url

    def locator(self, selector: str) -> FakeLocator:
        return FakeLocator(self, selector)

    def wait_for_selector(self, selector: str, timeout: Optional[int] = None) -> None:
        self.calls.append(("wait_for_selector", selector))
        if not self.results_appear:
            raise PlaywrightTimeoutError(f"Timeout {timeout}ms exceeded")

    def evaluate(self, script: str, arg: Any = None) -> Any:
        self.calls.append(("evaluate", arg))
        return self.search_results

    def query_selector(self, selector: str) -> Optional[FakeElement]:
        text = self.regions.get(selector)
        return FakeElement(text) if text is not None else None

    def inner_text(self, selector: str, timeout: Optional[int] = None) -> str:
        self.calls.append(("inner_text", selector))
        return self.body

    def close(self) -> None:
        self._events.append("page")


class FakeContext:
    def __init__(self, events: list[str], page: FakePage) -> None:
        self._events = events
        self._page = page
        self.viewport: Optional[dict[str, int]] = None

    def new_page(self) -> FakePage:
        return self._page

    def close(self) -> None:
        self._events.append("context")


class FakeBrowser:
    def __init__(self, events: list[str], context: FakeContext) -> None:
        self._events = events
        self._context = context

    def new_context(self, viewport: Optional[dict[str, int]] = None) -> FakeContext:
        self._context.viewport = viewport
        return self._context

    def close(self) -> None:
        self._events.append("browser")


class FakeChromium:
    def __init__(self, browser: FakeBrowser) -> None:
        self._browser = browser
        self.launch_kwargs: list[dict[str, Any]] = []
        self.launch_error: Optional[Exception] = None

    def launch(self, **kwargs: Any) -> FakeBrowser:
        self.launch_kwargs.append(kwargs)
        if self.launch_error is not None:
            raise self.launch_error
        return self._browser


class FakePlaywright:
    def __init__(self, events: list[str], chromium: FakeChromium) -> None:
        self._events = events
        self.chromium = chromium

    def stop(self) -> None:
        self._events.append("driver")


class FakeDriver:
    """Stands in for ``sync_playwright`` and records how often it was started."""

    def __init__(self) -> None:
        self.events: list[str] = []
        self.page = FakePage(self.events)
        self.context = FakeContext(self.events, self.page)
        self.browser = FakeBrowser(self.events, self.context)
        self.chromium = FakeChromium(self.browser)
        self.playwright = FakePlaywright(self.events, self.chromium)
        self.start_calls = 0

    def __call__(self) -> "FakeDriver":
        return self

    def start(self) -> FakePlaywright:
        self.start_calls += 1
        return self.playwright


@pytest.fixture
def fake_driver() -> FakeDriver:
    return FakeDriver()
