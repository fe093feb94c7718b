"""
One-shot threshold alarm over the sample stream.

Each AlarmMode maps to one comparison in ALARM_CONDITIONS. The evaluator
fires at most once per session and stays fired until reset.
"""

import logging

from collections.abc import Callable

from impmon.models.alarm import AlarmConfig, AlarmMode, AlarmNotification
from impmon.models.session import Sample

logger = logging.getLogger(__name__)

# (value, threshold, initial_value) -> fire?
AlarmCondition = Callable[[float, float, float | None], bool]


def _absolute(value: float, threshold: float, initial_value: float | None) -> bool:
    return value <= threshold


def _percent_of_initial(
    value: float, threshold: float, initial_value: float | None
) -> bool:
    if initial_value is None:
        return False
    return value <= initial_value * (threshold / 100)


def _absolute_difference(
    value: float, threshold: float, initial_value: float | None
) -> bool:
    if initial_value is None:
        return False
    return value <= initial_value - threshold


ALARM_CONDITIONS: dict[AlarmMode, AlarmCondition] = {
    AlarmMode.ABSOLUTE: _absolute,
    AlarmMode.PERCENT_OF_INITIAL: _percent_of_initial,
    AlarmMode.ABSOLUTE_DIFFERENCE: _absolute_difference,
}

_missing = set(AlarmMode) - set(ALARM_CONDITIONS)
if _missing:
    raise RuntimeError(f"Alarm modes without a condition: {sorted(_missing)}")


class AlarmEvaluator:
    """
    Evaluates samples against the configured threshold.

    Args:
        config: Initial alarm configuration (disabled by default)
    """

    def __init__(self, config: AlarmConfig | None = None):
        self.config = config or AlarmConfig()
        self.fired = False
        self.notification: AlarmNotification | None = None

    def configure(self, config: AlarmConfig) -> None:
        """Replace the configuration. A fired alarm stays fired until reset."""
        if config.enabled and not config.is_valid:
            logger.warning(
                f"Alarm enabled in {config.mode.value} mode without a usable "
                "threshold; it will not fire"
            )
        self.config = config

    def evaluate(self, sample: Sample, initial_value: float | None) -> bool:
        """
        Check one sample against the alarm condition.

        Args:
            sample: Sample just accepted by ingest
            initial_value: First value of the session, if captured

        Returns:
            True only on the call that fires the alarm
        """
        config = self.config
        if not config.enabled or self.fired or config.threshold is None:
            return False

        condition = ALARM_CONDITIONS[config.mode]
        if not condition(sample.value, config.threshold, initial_value):
            return False

        self.fired = True
        self.notification = AlarmNotification(
            mode=config.mode,
            threshold=config.threshold,
            value=sample.value,
            initial_value=initial_value,
            elapsed_time=sample.elapsed_time,
        )
        logger.info(
            f"Alarm fired at {sample.elapsed_time:.2f}s: value {sample.value:.3f} "
            f"crossed {config.mode.value} threshold {config.threshold}"
        )
        return True

    def reset(self) -> None:
        """Re-arm the alarm for a new session. The configuration is kept."""
        self.fired = False
        self.notification = None
