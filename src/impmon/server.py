"""
impmon Server

MCP server exposing the measurement session controls: start/pause, event
markers, reset, alarm configuration, live status and report export.
"""

import json
import logging

from mcp.server.fastmcp import FastMCP
from pydantic import ValidationError

from impmon.config import get_alarm_config, get_export_directory, get_refresh_interval
from impmon.models.alarm import AlarmConfig, AlarmMode
from impmon.models.metadata import ExportMetadata
from impmon.models.session import EventMarker, SessionStatus, SessionSummary
from impmon.report.exporter import write_report
from impmon.session.controller import SessionController
from impmon.session.events import LoggingObserver

logger = logging.getLogger(__name__)

INSTRUCTIONS = """
impmon: impedance measurement session monitor

You control a single live measurement session. The device streams one
impedance value per frame; values are only recorded while the session is
running.

AVAILABLE TOOLS:
- toggle_measurement: Start, pause or resume the session
- ingest_value: Feed one stream value (for bridges without a device link)
- mark_event: Mark an event on the timeline (only while running)
- reset_session: Discard the whole session (requires confirm=true)
- configure_alarm: Set the alarm mode and threshold
- get_session_status: Phase, elapsed time, initial/current value, alarm state
- get_session_summary: Statistics over the recorded samples
- export_report: Render the text report, optionally with subject metadata

ALARM MODES:
- absolute: fires when value <= threshold
- percent_of_initial: fires when value <= initial value * threshold / 100
- absolute_difference: fires when value <= initial value - threshold
The alarm fires once per session and is re-armed only by reset_session.
"""

server = FastMCP(name="impmon", instructions=INSTRUCTIONS)

controller = SessionController(
    alarm_config=get_alarm_config(), refresh_interval=get_refresh_interval()
)
controller.register_observer(LoggingObserver())


# ============================================================================
# Resources (Documentation)
# ============================================================================


@server.resource("docs://alarm_modes")
def get_alarm_modes_documentation() -> str:
    """Documentation of the alarm modes."""
    return json.dumps(
        {
            "description": "One-shot threshold alarm modes",
            "modes": {
                AlarmMode.ABSOLUTE.value: "value <= threshold",
                AlarmMode.PERCENT_OF_INITIAL.value: (
                    "value <= initial_value * threshold / 100"
                ),
                AlarmMode.ABSOLUTE_DIFFERENCE.value: (
                    "value <= initial_value - threshold"
                ),
            },
            "note": (
                "The alarm stays fired across pause/resume until the session "
                "is reset"
            ),
        },
        indent=2,
    )


# ============================================================================
# Tools (Actions)
# ============================================================================


@server.tool("toggle_measurement")
def toggle_measurement() -> SessionStatus:
    """
    Start the session when idle, resume it when paused, pause it when running.

    Returns:
        Session status after the toggle
    """
    controller.toggle()
    return controller.status()


@server.tool("ingest_value")
def ingest_value(value: str) -> SessionStatus:
    """
    Feed one raw stream value. Non-numeric values and values received while
    the session is not running are ignored.

    Args:
        value: Raw frame payload

    Returns:
        Session status after the value was processed
    """
    controller.ingest(value)
    return controller.status()


@server.tool("mark_event")
def mark_event() -> EventMarker:
    """
    Mark an event at the current elapsed time.

    Returns:
        The new event marker
    """
    marker = controller.mark_event()
    if marker is None:
        raise ValueError(
            f"Cannot mark an event while the session is {controller.phase.value}"
        )
    return marker


@server.tool("reset_session")
def reset_session(confirm: bool = False) -> SessionStatus:
    """
    Discard all samples, markers and alarm state and return to idle.

    Args:
        confirm: Must be true; the reset cannot be undone

    Returns:
        Session status after the reset
    """
    if not confirm:
        raise ValueError(
            "Reset discards all measurements. Call again with confirm=true."
        )
    controller.reset()
    return controller.status()


@server.tool("configure_alarm")
def configure_alarm(
    enabled: bool,
    mode: str = AlarmMode.ABSOLUTE.value,
    threshold: float | None = None,
) -> SessionStatus:
    """
    Configure the threshold alarm. A fired alarm stays fired until reset.

    Args:
        enabled: Whether the alarm is armed
        mode: absolute, percent_of_initial or absolute_difference
        threshold: Threshold for the selected mode

    Returns:
        Session status after the change
    """
    try:
        config = AlarmConfig(enabled=enabled, mode=mode, threshold=threshold)
    except ValidationError as e:
        raise ValueError(f"Invalid alarm configuration: {e}") from e
    controller.configure_alarm(config)
    return controller.status()


@server.tool("get_session_status")
def get_session_status() -> SessionStatus:
    """
    Get the live session status.

    Returns:
        Phase, elapsed time, initial and current value, counts and alarm state
    """
    return controller.status()


@server.tool("get_session_summary")
def get_session_summary() -> SessionSummary:
    """
    Get statistics over the recorded samples.

    Returns:
        Count, duration, min/max/mean and drop from the initial value
    """
    return controller.summary()


@server.tool("export_report")
def export_report(metadata: ExportMetadata | None = None, save: bool = False) -> str:
    """
    Render the session report.

    Args:
        metadata: Optional subject metadata (name, age, sex, weight, height,
            circumference, last_menstruation for female subjects)
        save: Also write the report to the configured export directory

    Returns:
        Report text, followed by the file path when saved
    """
    try:
        text = controller.export(metadata)
        if not save:
            return text
        path = write_report(text, get_export_directory())
        return f"{text}\nSaved to {path}"
    except OSError as e:
        logger.error(f"Error saving report: {e}", exc_info=True)
        raise ValueError(f"Error saving report: {e}") from e
