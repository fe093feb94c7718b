"""Tests for session clock elapsed-time accounting."""

import pytest

from impmon.models.session import SessionPhase
from impmon.session.clock import SessionClock, format_elapsed
from tests.helpers.fakes import FakeClock


@pytest.fixture
def clock(fake_clock):
    return SessionClock(fake_clock)


class TestTransitions:
    """Phase transitions and their no-op cases."""

    def test_new_clock_is_idle(self, clock):
        assert clock.phase is SessionPhase.IDLE
        assert clock.start_instant is None
        assert clock.pause_started_at is None
        assert clock.elapsed() == 0.0

    def test_start_sets_start_instant(self, clock, fake_clock):
        assert clock.start() is True
        assert clock.phase is SessionPhase.RUNNING
        assert clock.start_instant == fake_clock.now

    def test_start_twice_is_noop(self, clock, fake_clock):
        clock.start()
        first = clock.start_instant
        fake_clock.advance(5)

        assert clock.start() is False
        assert clock.start_instant == first

    def test_pause_only_from_running(self, clock):
        assert clock.pause() is False
        assert clock.phase is SessionPhase.IDLE

        clock.start()
        assert clock.pause() is True
        assert clock.phase is SessionPhase.PAUSED
        assert clock.pause() is False

    def test_resume_only_from_paused(self, clock):
        assert clock.resume() is False
        clock.start()
        assert clock.resume() is False
        clock.pause()
        assert clock.resume() is True
        assert clock.phase is SessionPhase.RUNNING
        assert clock.pause_started_at is None

    def test_start_while_paused_does_not_restart(self, clock, fake_clock):
        clock.start()
        fake_clock.advance(3)
        clock.pause()

        assert clock.start() is False
        assert clock.phase is SessionPhase.PAUSED

    def test_reset_returns_to_idle_defaults(self, clock, fake_clock):
        clock.start()
        fake_clock.advance(2)
        clock.pause()
        fake_clock.advance(2)
        clock.resume()

        clock.reset()

        assert clock.phase is SessionPhase.IDLE
        assert clock.start_instant is None
        assert clock.pause_started_at is None
        assert clock.accumulated_pause_duration == 0.0
        assert clock.elapsed() == 0.0


class TestElapsed:
    """Elapsed time excludes paused intervals."""

    def test_elapsed_while_running(self, clock, fake_clock):
        clock.start()
        fake_clock.advance(12.5)
        assert clock.elapsed() == pytest.approx(12.5)

    def test_pause_interval_excluded(self, clock, fake_clock):
        clock.start()
        fake_clock.advance(10)
        clock.pause()
        fake_clock.advance(30)
        clock.resume()
        fake_clock.advance(5)

        assert clock.accumulated_pause_duration == pytest.approx(30)
        assert clock.elapsed() == pytest.approx(15)

    def test_elapsed_frozen_while_paused(self, clock, fake_clock):
        clock.start()
        fake_clock.advance(4)
        clock.pause()

        fake_clock.advance(100)
        assert clock.elapsed() == pytest.approx(4)

    def test_elapsed_never_decreases_across_cycles(self, clock, fake_clock):
        steps = [
            ("start", 1.0),
            ("pause", 2.0),
            ("resume", 0.5),
            ("pause", 3.0),
            ("resume", 1.5),
            ("pause", 0.25),
            ("resume", 2.0),
        ]
        readings = [clock.elapsed()]
        running = 0.0
        paused = 0.0

        for op, wait in steps:
            getattr(clock, op)()
            readings.append(clock.elapsed())
            fake_clock.advance(wait)
            if clock.phase is SessionPhase.RUNNING:
                running += wait
            else:
                paused += wait
            readings.append(clock.elapsed())

        assert readings == sorted(readings)
        assert clock.elapsed() == pytest.approx(running)
        assert clock.accumulated_pause_duration == pytest.approx(paused)

    def test_default_time_source_is_monotonic(self):
        clock = SessionClock()
        clock.start()
        first = clock.elapsed()
        assert clock.elapsed() >= first >= 0.0


class TestFormatElapsed:
    """MM:SS display formatting."""

    @pytest.mark.parametrize(
        "seconds,expected",
        [
            (0, "00:00"),
            (9.99, "00:09"),
            (61.2, "01:01"),
            (3599, "59:59"),
            (4502, "75:02"),
            (-3, "00:00"),
        ],
    )
    def test_format(self, seconds, expected):
        assert format_elapsed(seconds) == expected


def test_fake_clock_helper():
    clock = FakeClock(start=5)
    clock.advance(1.5)
    assert clock() == 6.5
