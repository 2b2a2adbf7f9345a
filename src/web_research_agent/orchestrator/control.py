"""Utilities for cancelling a research run from outside the orchestrator."""

from __future__ import annotations

import threading
from typing import Optional


class RunController:
    """Thread-safe cancellation flag checked by the orchestrator between steps."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._cancelled = False
        self._reason: Optional[str] = None

    def request_cancel(self, reason: str = "Cancelled by caller") -> bool:
        """Flag the run for cancellation. Returns False if already flagged."""

        with self._lock:
            if self._cancelled:
                return False
            self._cancelled = True
            self._reason = reason
            return True

    @property
    def cancelled(self) -> bool:
        with self._lock:
            return self._cancelled

    @property
    def reason(self) -> Optional[str]:
        with self._lock:
            return self._reason

    def reset(self) -> None:
        with self._lock:
            self._cancelled = False
            self._reason = None
