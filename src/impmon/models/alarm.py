"""Alarm configuration and notification models."""

import logging
import math

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from impmon.constants import ALARM_MESSAGE

logger = logging.getLogger(__name__)


class AlarmMode(str, Enum):
    """Comparison strategy used to decide the monitored value crossed its threshold."""

    ABSOLUTE = "absolute"  # value <= threshold
    PERCENT_OF_INITIAL = "percent_of_initial"  # value <= initial * threshold / 100
    ABSOLUTE_DIFFERENCE = "absolute_difference"  # value <= initial - threshold


class AlarmConfig(BaseModel):
    """
    Threshold alarm configuration.

    The mode is validated when the config is built; an unknown mode raises a
    ValidationError. The threshold is lenient: anything that is not a finite
    number is stored as None, which leaves the alarm armed but never firing.
    """

    model_config = ConfigDict(frozen=True)

    enabled: bool = Field(default=False, description="Whether the alarm is armed")
    mode: AlarmMode = Field(default=AlarmMode.ABSOLUTE, description="Alarm mode")
    threshold: float | None = Field(
        default=None,
        description="Ohms for absolute, percent for percent_of_initial, "
        "ohms below the initial value for absolute_difference",
    )

    @field_validator("threshold", mode="before")
    @classmethod
    def _coerce_threshold(cls, value: Any) -> float | None:
        if value is None or isinstance(value, bool):
            return None
        try:
            threshold = float(value.strip() if isinstance(value, str) else value)
        except (TypeError, ValueError):
            logger.warning(f"Ignoring non-numeric alarm threshold: {value!r}")
            return None
        if not math.isfinite(threshold):
            logger.warning(f"Ignoring non-finite alarm threshold: {value!r}")
            return None
        return threshold

    @property
    def is_valid(self) -> bool:
        """True when the threshold can be evaluated."""
        return self.threshold is not None


class AlarmNotification(BaseModel):
    """One-time notification emitted when the alarm fires."""

    model_config = ConfigDict(frozen=True)

    mode: AlarmMode
    threshold: float
    value: float = Field(description="Sample value that fired the alarm")
    initial_value: float | None = None
    elapsed_time: float = Field(ge=0, description="Elapsed time of the sample")
    message: str = ALARM_MESSAGE
