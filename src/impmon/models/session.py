"""Pydantic models for session timeline data."""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class SessionPhase(str, Enum):
    """Lifecycle phase of a measurement session."""

    IDLE = "idle"
    RUNNING = "running"
    PAUSED = "paused"


class ControlCommand(str, Enum):
    """Literal command tokens sent to the measurement device."""

    START = "START"
    STOP = "STOP"
    RESET = "RESET"


class Sample(BaseModel):
    """One stream value accepted while the session was running."""

    model_config = ConfigDict(frozen=True)

    elapsed_time: float = Field(ge=0, description="Active session time (seconds)")
    value: float = Field(description="Measured value")


class EventMarker(BaseModel):
    """Operator-inserted annotation on the session timeline."""

    model_config = ConfigDict(frozen=True)

    sequence_id: int = Field(ge=1, description="Marker number within the session")
    elapsed_time: float = Field(ge=0, description="Active session time (seconds)")

    @property
    def label(self) -> str:
        """Timeline annotation label, e.g. ``#3``."""
        return f"#{self.sequence_id}"


class SessionState(BaseModel):
    """
    Snapshot of the controller's session state.

    Times are in seconds of the controller's time source. Snapshots are
    immutable; the controller owns the live state.
    """

    model_config = ConfigDict(frozen=True)

    phase: SessionPhase = SessionPhase.IDLE
    start_instant: float | None = None
    accumulated_pause_duration: float = Field(default=0.0, ge=0)
    pause_started_at: float | None = None
    initial_value: float | None = None
    current_value: float | None = None
    alarm_fired: bool = False


class SessionStatus(BaseModel):
    """Live status shown to the operator."""

    phase: SessionPhase
    elapsed_seconds: float = Field(ge=0, description="Active session time (seconds)")
    elapsed_display: str = Field(description="Elapsed time as MM:SS")
    initial_value: float | None = None
    current_value: float | None = None
    sample_count: int = Field(ge=0)
    event_count: int = Field(ge=0)
    alarm_enabled: bool = False
    alarm_fired: bool = False

    class Config:
        json_schema_extra = {
            "example": {
                "phase": "running",
                "elapsed_seconds": 754.2,
                "elapsed_display": "12:34",
                "initial_value": 512.4,
                "current_value": 431.0,
                "sample_count": 7542,
                "event_count": 2,
                "alarm_enabled": True,
                "alarm_fired": False,
            }
        }


class SessionSummary(BaseModel):
    """Descriptive statistics over the samples of a session."""

    sample_count: int = Field(ge=0)
    duration_seconds: float = Field(
        ge=0, description="Elapsed time of the last sample (seconds)"
    )
    initial_value: float | None = None
    final_value: float | None = None
    min_value: float | None = None
    max_value: float | None = None
    mean_value: float | None = None
    drop_absolute: float | None = Field(
        default=None, description="initial_value - final_value"
    )
    drop_percent: float | None = Field(
        default=None, description="Drop as a percentage of initial_value"
    )
