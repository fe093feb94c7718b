"""Cancelable periodic task driving the live elapsed-time display."""

import logging
import threading

from collections.abc import Callable

logger = logging.getLogger(__name__)


class DisplayTicker:
    """
    Calls ``callback`` every ``interval`` seconds on a daemon thread.

    A ticker runs once: after ``cancel()`` a new instance is needed. The
    callback must only read session state.

    Args:
        interval: Seconds between calls
        callback: Zero-argument callable
        name: Thread name, for diagnostics
    """

    def __init__(
        self,
        interval: float,
        callback: Callable[[], None],
        name: str = "impmon-display",
    ):
        if interval <= 0:
            raise ValueError(f"Ticker interval must be positive, got {interval}")
        self.interval = interval
        self._callback = callback
        self._stop = threading.Event()
        self._thread = threading.Thread(target=self._run, name=name, daemon=True)

    @property
    def cancelled(self) -> bool:
        return self._stop.is_set()

    @property
    def running(self) -> bool:
        return self._thread.is_alive() and not self._stop.is_set()

    def start(self) -> None:
        self._thread.start()

    def cancel(self) -> None:
        """Stop after the in-flight call, if any. Does not block."""
        self._stop.set()

    def join(self, timeout: float | None = None) -> None:
        """Wait for the thread to exit. No-op from the ticker thread itself."""
        if self._thread.is_alive() and threading.current_thread() is not self._thread:
            self._thread.join(timeout)

    def _run(self) -> None:
        while not self._stop.wait(self.interval):
            try:
                self._callback()
            except Exception as e:
                logger.error(f"Display refresh failed: {e}", exc_info=True)
