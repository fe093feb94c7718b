"""
impmon: impedance measurement session monitor

Session/alarm controller for a live stream of impedance values, with
pause/resume, event markers, a one-shot threshold alarm and text reports.
"""

from typing import Any

from impmon.session.controller import SessionController

__all__ = ["SessionController", "server"]


def __getattr__(name: str) -> Any:
    """Lazy load server so importing the core does not build the MCP app."""
    if name == "server":
        from impmon.server import server

        return server
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
