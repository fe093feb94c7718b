"""Pydantic models for impmon."""

from impmon.models.alarm import AlarmConfig, AlarmMode, AlarmNotification
from impmon.models.metadata import ExportMetadata, Sex
from impmon.models.session import (
    ControlCommand,
    EventMarker,
    Sample,
    SessionPhase,
    SessionState,
    SessionStatus,
    SessionSummary,
)

__all__ = [
    "AlarmConfig",
    "AlarmMode",
    "AlarmNotification",
    "ControlCommand",
    "EventMarker",
    "ExportMetadata",
    "Sample",
    "SessionPhase",
    "SessionState",
    "SessionStatus",
    "SessionSummary",
    "Sex",
]
