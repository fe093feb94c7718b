"""Tests for the append-only data log."""

import pytest

from pydantic import ValidationError

from impmon.errors import InvalidStateError
from impmon.models.session import EventMarker, Sample
from impmon.session.clock import SessionClock
from impmon.session.log import DataLog


@pytest.fixture
def clock(fake_clock):
    return SessionClock(fake_clock)


@pytest.fixture
def log(clock):
    return DataLog(clock)


class TestSamples:
    def test_samples_kept_in_order(self, log):
        for i in range(5):
            log.append_sample(Sample(elapsed_time=i * 0.5, value=100 - i))

        samples = log.samples()
        assert [s.value for s in samples] == [100, 99, 98, 97, 96]
        assert log.sample_count == 5

    def test_append_sample_ignores_phase(self, log):
        log.append_sample(Sample(elapsed_time=0, value=1))
        assert log.sample_count == 1

    def test_snapshot_is_immutable_copy(self, log):
        log.append_sample(Sample(elapsed_time=0, value=1))
        snapshot = log.samples()

        log.append_sample(Sample(elapsed_time=1, value=2))

        assert isinstance(snapshot, tuple)
        assert len(snapshot) == 1


class TestEvents:
    def test_sequence_ids_start_at_one(self, log, clock, fake_clock):
        clock.start()
        fake_clock.advance(2.25)

        first = log.append_event()
        fake_clock.advance(1)
        second = log.append_event()

        assert first == EventMarker(sequence_id=1, elapsed_time=2.25)
        assert second.sequence_id == 2
        assert second.elapsed_time == pytest.approx(3.25)
        assert log.events() == (first, second)

    def test_rejected_when_idle(self, log):
        with pytest.raises(InvalidStateError):
            log.append_event()
        assert log.event_count == 0

    def test_rejected_when_paused(self, log, clock):
        clock.start()
        clock.pause()
        with pytest.raises(InvalidStateError, match="paused"):
            log.append_event()

    def test_rejection_does_not_consume_id(self, log, clock):
        clock.start()
        log.append_event()
        clock.pause()
        with pytest.raises(InvalidStateError):
            log.append_event()
        clock.resume()

        assert log.append_event().sequence_id == 2

    def test_label(self):
        assert EventMarker(sequence_id=7, elapsed_time=0).label == "#7"

    def test_marker_ids_must_be_positive(self):
        with pytest.raises(ValidationError):
            EventMarker(sequence_id=0, elapsed_time=0)


def test_clear_resets_sequence(log, clock):
    clock.start()
    log.append_sample(Sample(elapsed_time=0, value=1))
    log.append_event()
    log.append_event()

    log.clear()

    assert log.samples() == ()
    assert log.events() == ()
    assert log.append_event().sequence_id == 1
