"""Pytest configuration and fixtures for impmon tests."""

from pathlib import Path

import pytest

from impmon.models.alarm import AlarmConfig, AlarmMode
from impmon.session.controller import SessionController
from impmon.transport.base import RecordingTransport
from tests.helpers.fakes import FakeClock, RecordingObserver


def pytest_configure(config):
    """Register custom test markers."""
    config.addinivalue_line(
        "markers", "unit: Unit tests that do not require external dependencies"
    )
    config.addinivalue_line(
        "markers", "integration: Integration tests combining multiple components"
    )
    config.addinivalue_line(
        "markers", "threaded: Tests that start the display ticker thread"
    )


@pytest.fixture
def fake_clock():
    """Manually advanced time source starting at t=1000s."""
    return FakeClock(start=1000.0)


@pytest.fixture
def transport():
    """Transport that records every command token."""
    return RecordingTransport()


@pytest.fixture
def observer():
    """Observer that records every notification."""
    return RecordingObserver()


@pytest.fixture
def controller(fake_clock, transport, observer):
    """Controller on a fake clock, without the display ticker."""
    ctrl = SessionController(
        transport=transport, time_source=fake_clock, refresh_interval=None
    )
    ctrl.register_observer(observer)
    yield ctrl
    ctrl.close()


@pytest.fixture
def absolute_alarm():
    """Absolute alarm at 50 ohms."""
    return AlarmConfig(enabled=True, mode=AlarmMode.ABSOLUTE, threshold=50)


@pytest.fixture
def config_path(tmp_path, monkeypatch) -> Path:
    """Point the config file at a temporary directory."""
    path = tmp_path / "impmon" / "config.toml"
    monkeypatch.setattr("impmon.config.get_config_path", lambda: path)
    monkeypatch.setattr("impmon.cli.get_config_path", lambda: path)
    return path
