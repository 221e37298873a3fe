"""
Caller-owned cancellation tokens.
"""

import logging
import threading
from typing import Callable, List, Optional

from .exceptions import RequestCancelledError

logger = logging.getLogger(__name__)


class CancellationToken:
    """
    Thread-safe, one-shot cancellation signal.

    A token is owned by the caller and passed to client calls. Once
    cancelled it stays cancelled; registered callbacks run exactly once,
    on the thread that calls cancel(). Callbacks added after cancellation
    run immediately.
    """

    def __init__(self):
        self._event = threading.Event()
        self._lock = threading.Lock()
        self._callbacks: List[Callable[[], None]] = []
        self.reason: Optional[str] = None

    @property
    def is_cancelled(self) -> bool:
        return self._event.is_set()

    def cancel(self, reason: Optional[str] = None):
        """Signal cancellation. Subsequent calls are no-ops."""
        with self._lock:
            if self._event.is_set():
                return
            self.reason = reason
            self._event.set()
            callbacks, self._callbacks = self._callbacks, []

        for callback in callbacks:
            try:
                callback()
            except Exception:
                logger.exception("Cancellation callback %r failed", callback)

    def add_callback(self, callback: Callable[[], None]) -> Callable[[], None]:
        """
        Register a callback to run on cancellation.

        Returns:
            Function that unregisters the callback
        """
        with self._lock:
            if not self._event.is_set():
                self._callbacks.append(callback)
                return lambda: self._remove_callback(callback)
        callback()
        return lambda: None

    def _remove_callback(self, callback):
        with self._lock:
            try:
                self._callbacks.remove(callback)
            except ValueError:
                pass

    def wait(self, timeout: Optional[float] = None) -> bool:
        """Block until cancelled or timeout expires."""
        return self._event.wait(timeout)

    def raise_if_cancelled(self):
        """Raise RequestCancelledError if the token has been cancelled."""
        if self._event.is_set():
            raise RequestCancelledError(self.reason or "Request cancelled")

    def __repr__(self):
        return f"CancellationToken(cancelled={self.is_cancelled})"
