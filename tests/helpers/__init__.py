"""Test helpers for impmon."""

from tests.helpers.fakes import FakeClock, RecordingObserver

__all__ = ["FakeClock", "RecordingObserver"]
