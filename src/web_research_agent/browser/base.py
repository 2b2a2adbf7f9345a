"""Browser session abstractions."""

from __future__ import annotations

from abc import ABC, abstractmethod

from ..models import SearchResult, SessionState


class BrowserActionError(RuntimeError):
    """Raised when executing a browser operation fails.

    Messages are written by the session itself and are safe to show to the
    oracle; raw driver errors are only attached as ``__cause__``.
    """


class PreconditionFailure(BrowserActionError):
    """The session is not in the state the operation requires."""


class LaunchFailure(BrowserActionError):
    """The browser engine could not be started."""


class NavigationFailure(BrowserActionError):
    """A page could not be reached or did not settle in time."""


class InteractionFailure(BrowserActionError):
    """An expected page element was missing or rejected the interaction."""


class ExtractionFailure(BrowserActionError):
    """No usable content could be read from the page."""


class BrowserSession(ABC):
    """Interface for a stateful, single-page research browser."""

    @property
    @abstractmethod
    def state(self) -> SessionState:
        """Current lifecycle state."""

    @abstractmethod
    def launch(self) -> None:
        """Start the browser and open a page. No-op when already launched."""

    @abstractmethod
    def navigate_to_search_engine(self) -> str:
        """Load the search engine entry page and return its URL."""

    @abstractmethod
    def search_for(self, query: str) -> None:
        """Submit ``query`` in the search box and wait for results."""

    @abstractmethod
    def extract_search_results(self) -> list[SearchResult]:
        """Return the leading results of the current results page."""

    @abstractmethod
    def fetch_page_content(self, url: str) -> str:
        """Open ``url`` and return its main text, truncated."""

    @abstractmethod
    def close(self) -> None:
        """Release every browser resource. Safe to call repeatedly."""

    def __enter__(self) -> BrowserSession:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()
