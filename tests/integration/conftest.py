import pytest


def pytest_collection_modifyitems(items):
    """Apply integration marker to all tests in this directory."""
    for item in items:
        if "/integration/" in str(item.fspath):
            item.add_marker(pytest.mark.integration)


@pytest.fixture(autouse=True)
def quiet_logging(monkeypatch):
    """Keep CLI invocations from writing to the user's log directory."""
    monkeypatch.setattr("impmon.logging_config._logging_configured", True)
