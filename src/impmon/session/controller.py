"""
Session controller.

Single owner of the session clock, data log, sample ingest and alarm
evaluator. Every mutation runs under one lock; observer and transport
notifications are dispatched after the lock is released so a slow or
failing collaborator never stalls the stream.
"""

import functools
import logging
import threading

from typing import Any

from impmon.constants import DEFAULT_REFRESH_INTERVAL
from impmon.errors import InvalidStateError
from impmon.models.alarm import AlarmConfig
from impmon.models.metadata import ExportMetadata
from impmon.models.session import (
    ControlCommand,
    EventMarker,
    Sample,
    SessionPhase,
    SessionState,
    SessionStatus,
    SessionSummary,
)
from impmon.report.exporter import export_report
from impmon.report.summary import summarize_samples
from impmon.session.alarm import AlarmEvaluator
from impmon.session.clock import SessionClock, TimeSource, format_elapsed
from impmon.session.events import ObserverHub, SessionObserver
from impmon.session.ingest import SampleIngest
from impmon.session.log import DataLog
from impmon.session.ticker import DisplayTicker
from impmon.transport.base import CommandSink, send_command

logger = logging.getLogger(__name__)

# (observer method, args) queued while the lock is held
_Notification = tuple[str, tuple[Any, ...]]


class SessionController:
    """
    Measurement session with pause/resume, event markers and a one-shot alarm.

    Args:
        alarm_config: Initial alarm configuration (disabled if omitted)
        transport: Command channel to the device; START/STOP/RESET are sent
            on start or resume, pause, and reset
        time_source: Seconds clock for elapsed-time accounting
        refresh_interval: Display tick period in seconds, or None for no ticker
    """

    def __init__(
        self,
        alarm_config: AlarmConfig | None = None,
        transport: CommandSink | None = None,
        time_source: TimeSource | None = None,
        refresh_interval: float | None = DEFAULT_REFRESH_INTERVAL,
    ):
        self._lock = threading.RLock()
        self.clock = SessionClock(time_source) if time_source else SessionClock()
        self.log = DataLog(self.clock)
        self.evaluator = AlarmEvaluator(alarm_config)
        self.ingestor = SampleIngest(self.clock, self.log, self.evaluator)
        self.transport = transport
        self.refresh_interval = refresh_interval
        self._observers = ObserverHub()
        # Serializes outbound notifications so they leave in transition order
        self._notify_lock = threading.RLock()
        self._ticker: DisplayTicker | None = None
        # Bumped whenever a ticker is cancelled; ticks from older tickers are dropped
        self._tick_generation = 0

    # ------------------------------------------------------------------
    # Observers
    # ------------------------------------------------------------------

    def register_observer(self, observer: SessionObserver) -> None:
        self._observers.register(observer)

    def unregister_observer(self, observer: SessionObserver) -> None:
        self._observers.unregister(observer)

    def _dispatch(
        self,
        notifications: list[_Notification],
        command: ControlCommand | None = None,
    ) -> None:
        with self._notify_lock:
            if command is not None:
                send_command(self.transport, command)
            for method, args in notifications:
                self._observers.emit(method, *args)

    # ------------------------------------------------------------------
    # Control operations
    # ------------------------------------------------------------------

    def start(self) -> bool:
        """
        Start a new session from Idle.

        Returns:
            True if the session started, False if it was already started
        """
        with self._lock:
            if not self.clock.start():
                return False
            self._start_ticker()
        logger.info("Measurement session started")
        self._dispatch([], ControlCommand.START)
        return True

    def pause(self) -> bool:
        """
        Pause a running session. Samples arriving while paused are dropped.

        Returns:
            True if the session paused, False if it was not running
        """
        with self._lock:
            if not self.clock.pause():
                return False
            ticker = self._cancel_ticker()
            elapsed = self.clock.elapsed()
        logger.info(f"Measurement session paused at {elapsed:.2f}s")
        if ticker:
            ticker.join(timeout=1.0)
        self._dispatch([], ControlCommand.STOP)
        return True

    def resume(self) -> bool:
        """
        Resume a paused session.

        Returns:
            True if the session resumed, False if it was not paused
        """
        with self._lock:
            if not self.clock.resume():
                return False
            self._start_ticker()
            paused_total = self.clock.accumulated_pause_duration
        logger.info(f"Measurement session resumed (paused {paused_total:.2f}s total)")
        self._dispatch([], ControlCommand.START)
        return True

    def toggle(self) -> SessionPhase:
        """
        Single start/pause control: Start when idle, Resume when paused,
        Pause when running.

        Returns:
            Phase after the toggle
        """
        with self._lock:
            phase = self.clock.phase
        if phase is SessionPhase.IDLE:
            self.start()
        elif phase is SessionPhase.PAUSED:
            self.resume()
        else:
            self.pause()
        return self.phase

    def mark_event(self) -> EventMarker | None:
        """
        Mark an event at the current elapsed time.

        Returns:
            The new marker, or None if the session is not running
        """
        with self._lock:
            try:
                marker = self.log.append_event()
            except InvalidStateError as e:
                logger.info(f"Event marker rejected: {e}")
                return None
        self._dispatch([("on_marker", (marker,))])
        return marker

    def reset(self) -> None:
        """
        Discard the session: clock, samples, markers, initial and current
        value and the fired alarm. The alarm configuration is kept.

        Unconditional; callers are responsible for operator confirmation.
        """
        with self._lock:
            ticker = self._cancel_ticker()
            self.clock.reset()
            self.log.clear()
            self.ingestor.reset()
            self.evaluator.reset()
        logger.info("Measurement session reset")
        if ticker:
            ticker.join(timeout=1.0)
        self._dispatch([("on_reset", ())], ControlCommand.RESET)

    def configure_alarm(self, config: AlarmConfig) -> None:
        """Replace the alarm configuration without re-arming a fired alarm."""
        with self._lock:
            self.evaluator.configure(config)
        logger.info(
            f"Alarm configured: enabled={config.enabled} mode={config.mode.value} "
            f"threshold={config.threshold}"
        )

    def close(self) -> None:
        """Stop the display ticker. The session itself is left untouched."""
        with self._lock:
            ticker = self._cancel_ticker()
        if ticker:
            ticker.join(timeout=1.0)

    def __enter__(self) -> "SessionController":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    # ------------------------------------------------------------------
    # Stream
    # ------------------------------------------------------------------

    def ingest(self, raw_payload: str | bytes | float | int) -> Sample | None:
        """
        Process one stream frame.

        Returns:
            The accepted sample, or None if the frame was malformed or the
            session is not running
        """
        with self._lock:
            result = self.ingestor.ingest(raw_payload)
            if result is None:
                return None
            notifications: list[_Notification] = [("on_sample", (result.sample,))]
            if result.alarm_fired:
                notifications.append(("on_alarm", (self.evaluator.notification,)))
        self._dispatch(notifications)
        return result.sample

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    @property
    def phase(self) -> SessionPhase:
        with self._lock:
            return self.clock.phase

    def elapsed(self) -> float:
        with self._lock:
            return self.clock.elapsed()

    def samples(self) -> tuple[Sample, ...]:
        with self._lock:
            return self.log.samples()

    def events(self) -> tuple[EventMarker, ...]:
        with self._lock:
            return self.log.events()

    def state(self) -> SessionState:
        """Immutable snapshot of the session state."""
        with self._lock:
            return SessionState(
                phase=self.clock.phase,
                start_instant=self.clock.start_instant,
                accumulated_pause_duration=self.clock.accumulated_pause_duration,
                pause_started_at=self.clock.pause_started_at,
                initial_value=self.ingestor.initial_value,
                current_value=self.ingestor.current_value,
                alarm_fired=self.evaluator.fired,
            )

    def status(self) -> SessionStatus:
        """Operator-facing status line."""
        with self._lock:
            elapsed = self.clock.elapsed()
            return SessionStatus(
                phase=self.clock.phase,
                elapsed_seconds=elapsed,
                elapsed_display=format_elapsed(elapsed),
                initial_value=self.ingestor.initial_value,
                current_value=self.ingestor.current_value,
                sample_count=self.log.sample_count,
                event_count=self.log.event_count,
                alarm_enabled=self.evaluator.config.enabled,
                alarm_fired=self.evaluator.fired,
            )

    def summary(self) -> SessionSummary:
        with self._lock:
            samples = self.log.samples()
            initial_value = self.ingestor.initial_value
        return summarize_samples(samples, initial_value)

    def export(self, metadata: ExportMetadata | None = None) -> str:
        """
        Render the report from a snapshot of the data log.

        Args:
            metadata: Subject metadata, or None for a data-only report

        Returns:
            Report text
        """
        with self._lock:
            samples = self.log.samples()
            events = self.log.events()
        return export_report(samples, events, metadata)

    # ------------------------------------------------------------------
    # Display ticker
    # ------------------------------------------------------------------

    def _start_ticker(self) -> None:
        if self.refresh_interval is None:
            return
        if self._ticker is not None and self._ticker.running:
            return
        self._ticker = DisplayTicker(
            self.refresh_interval,
            functools.partial(self._tick, self._tick_generation),
        )
        self._ticker.start()

    def _cancel_ticker(self) -> DisplayTicker | None:
        ticker, self._ticker = self._ticker, None
        self._tick_generation += 1
        if ticker is not None:
            ticker.cancel()
        return ticker

    def _tick(self, generation: int) -> None:
        with self._lock:
            if (
                generation != self._tick_generation
                or self.clock.phase is not SessionPhase.RUNNING
            ):
                return
            elapsed = self.clock.elapsed()
        with self._notify_lock:
            # A pause or reset between the read and here makes the value stale
            if generation != self._tick_generation:
                return
            self._observers.emit("on_tick", elapsed)
