"""Append-only storage of samples and event markers for one session."""

import logging

from impmon.errors import InvalidStateError
from impmon.models.session import EventMarker, Sample, SessionPhase
from impmon.session.clock import SessionClock

logger = logging.getLogger(__name__)


class DataLog:
    """
    Ordered in-memory log of the session timeline.

    Samples are appended in arrival order, which is chronological. Markers
    are numbered from 1 and stamped with the clock's elapsed time.
    """

    def __init__(self, clock: SessionClock):
        self._clock = clock
        self._samples: list[Sample] = []
        self._events: list[EventMarker] = []
        self._next_sequence_id = 1

    def append_sample(self, sample: Sample) -> None:
        """Append an already-gated sample."""
        self._samples.append(sample)

    def append_event(self) -> EventMarker:
        """
        Record an event marker at the current elapsed time.

        Returns:
            The new marker

        Raises:
            InvalidStateError: If the session is not running
        """
        if self._clock.phase is not SessionPhase.RUNNING:
            raise InvalidStateError(
                f"Cannot mark an event while session is {self._clock.phase.value}"
            )
        marker = EventMarker(
            sequence_id=self._next_sequence_id, elapsed_time=self._clock.elapsed()
        )
        self._events.append(marker)
        self._next_sequence_id += 1
        return marker

    def samples(self) -> tuple[Sample, ...]:
        return tuple(self._samples)

    def events(self) -> tuple[EventMarker, ...]:
        return tuple(self._events)

    @property
    def sample_count(self) -> int:
        return len(self._samples)

    @property
    def event_count(self) -> int:
        return len(self._events)

    def clear(self) -> None:
        """Drop all samples and markers and restart marker numbering at 1."""
        self._samples.clear()
        self._events.clear()
        self._next_sequence_id = 1
