"""
Observer interface for session notifications.

Rendering, alerting and transport adapters subscribe to the controller
through this protocol. Notifications are fire-and-forget: an observer that
raises is logged and skipped.
"""

import logging

from typing import Protocol, runtime_checkable

from impmon.models.alarm import AlarmNotification
from impmon.models.session import EventMarker, Sample

logger = logging.getLogger(__name__)


@runtime_checkable
class SessionObserver(Protocol):
    """Receiver of controller notifications. Implement any subset."""

    def on_sample(self, sample: Sample) -> None: ...

    def on_marker(self, marker: EventMarker) -> None: ...

    def on_alarm(self, notification: AlarmNotification) -> None: ...

    def on_tick(self, elapsed: float) -> None: ...

    def on_reset(self) -> None: ...


class BaseObserver:
    """No-op observer to subclass when only some notifications matter."""

    def on_sample(self, sample: Sample) -> None:
        pass

    def on_marker(self, marker: EventMarker) -> None:
        pass

    def on_alarm(self, notification: AlarmNotification) -> None:
        pass

    def on_tick(self, elapsed: float) -> None:
        pass

    def on_reset(self) -> None:
        pass


class LoggingObserver(BaseObserver):
    """Writes markers and alarms to the application log."""

    def on_marker(self, marker: EventMarker) -> None:
        logger.info(f"Event {marker.label} marked at {marker.elapsed_time:.2f}s")

    def on_alarm(self, notification: AlarmNotification) -> None:
        logger.warning(
            f"ALARM: {notification.message} "
            f"(value {notification.value:.2f} at {notification.elapsed_time:.2f}s)"
        )


class ObserverHub:
    """Fans notifications out to registered observers."""

    def __init__(self) -> None:
        self._observers: list[SessionObserver] = []

    def register(self, observer: SessionObserver) -> None:
        if observer not in self._observers:
            self._observers.append(observer)

    def unregister(self, observer: SessionObserver) -> None:
        if observer in self._observers:
            self._observers.remove(observer)

    def emit(self, method: str, *args: object) -> None:
        """
        Call ``method`` on every observer that defines it.

        Args:
            method: Observer method name, e.g. ``"on_sample"``
            *args: Arguments passed through
        """
        for observer in list(self._observers):
            handler = getattr(observer, method, None)
            if handler is None:
                continue
            try:
                handler(*args)
            except Exception as e:
                logger.error(
                    f"Observer {type(observer).__name__}.{method} failed: {e}",
                    exc_info=True,
                )
