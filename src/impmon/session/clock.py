"""
Session clock.

Tracks active elapsed time across pause/resume cycles. Paused wall-clock
intervals are excluded from elapsed time.
"""

import logging
import time

from collections.abc import Callable

from impmon.models.session import SessionPhase

logger = logging.getLogger(__name__)

TimeSource = Callable[[], float]


class SessionClock:
    """
    Elapsed-time accounting for a single measurement session.

    The clock is not thread-safe on its own; the session controller
    serializes every call.

    Args:
        time_source: Zero-argument callable returning seconds. Defaults to
            ``time.monotonic`` so wall-clock adjustments do not skew elapsed time.
    """

    def __init__(self, time_source: TimeSource = time.monotonic):
        self._now = time_source
        self.phase = SessionPhase.IDLE
        self.start_instant: float | None = None
        self.accumulated_pause_duration = 0.0
        self.pause_started_at: float | None = None

    def start(self) -> bool:
        """Idle -> Running. Returns False if the session was already started."""
        if self.phase is not SessionPhase.IDLE:
            return False
        self.start_instant = self._now()
        self.phase = SessionPhase.RUNNING
        logger.debug(f"Clock started at {self.start_instant:.3f}")
        return True

    def pause(self) -> bool:
        """Running -> Paused. Returns False if the clock was not running."""
        if self.phase is not SessionPhase.RUNNING:
            return False
        self.pause_started_at = self._now()
        self.phase = SessionPhase.PAUSED
        return True

    def resume(self) -> bool:
        """Paused -> Running, folding the pause into the accumulated duration."""
        if self.phase is not SessionPhase.PAUSED or self.pause_started_at is None:
            return False
        self.accumulated_pause_duration += self._now() - self.pause_started_at
        self.pause_started_at = None
        self.phase = SessionPhase.RUNNING
        return True

    def elapsed(self) -> float:
        """
        Active session time in seconds.

        While paused, time stands still at the moment the pause began, so
        the value never jumps backwards when the session resumes.

        Returns:
            Elapsed seconds, or 0.0 before the session starts
        """
        if self.start_instant is None:
            return 0.0
        now = self.pause_started_at
        if now is None:
            now = self._now()
        return max(0.0, now - self.start_instant - self.accumulated_pause_duration)

    def reset(self) -> None:
        """Return to Idle defaults."""
        self.phase = SessionPhase.IDLE
        self.start_instant = None
        self.accumulated_pause_duration = 0.0
        self.pause_started_at = None


def format_elapsed(seconds: float) -> str:
    """
    Format elapsed seconds as zero-padded ``MM:SS``.

    Minutes are not wrapped at 60, so long sessions read ``75:02``.
    """
    total = int(max(0.0, seconds))
    minutes, secs = divmod(total, 60)
    return f"{minutes:02d}:{secs:02d}"
