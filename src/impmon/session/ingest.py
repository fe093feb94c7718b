"""Stream sample ingest: parsing, phase gating, initial-value capture."""

import logging
import math
import re

from dataclasses import dataclass

from impmon.errors import MalformedSampleError
from impmon.models.session import Sample, SessionPhase
from impmon.session.alarm import AlarmEvaluator
from impmon.session.clock import SessionClock
from impmon.session.log import DataLog

logger = logging.getLogger(__name__)


# Leading decimal number; trailing text after it is ignored
_LEADING_FLOAT = re.compile(r"\s*([+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)")


def parse_payload(raw_payload: str | bytes | float | int) -> float:
    """
    Parse one stream frame as a finite float.

    Text payloads are read up to the end of their leading number, so units or
    separators after the value (``"512.3 ohm"``, ``"498.0;"``) are ignored.

    Args:
        raw_payload: Frame payload, text or UTF-8 bytes; numbers pass through

    Returns:
        Parsed value

    Raises:
        MalformedSampleError: If the payload does not start with a finite number
    """
    if isinstance(raw_payload, bool):
        raise MalformedSampleError(f"Not a numeric payload: {raw_payload!r}")
    if isinstance(raw_payload, (int, float)):
        value = float(raw_payload)
    else:
        try:
            text = (
                raw_payload.decode("utf-8")
                if isinstance(raw_payload, bytes)
                else raw_payload
            )
        except UnicodeDecodeError:
            raise MalformedSampleError(
                f"Not a numeric payload: {raw_payload!r}"
            ) from None
        match = _LEADING_FLOAT.match(text) if isinstance(text, str) else None
        if match is None:
            raise MalformedSampleError(f"Not a numeric payload: {raw_payload!r}")
        value = float(match.group(1))

    if not math.isfinite(value):
        raise MalformedSampleError(f"Non-finite payload: {raw_payload!r}")
    return value


@dataclass
class IngestResult:
    """Outcome of an accepted sample."""

    sample: Sample
    alarm_fired: bool


class SampleIngest:
    """
    Gates raw stream values and fans accepted samples out.

    Values arriving while the session is idle or paused are dropped, so the
    timeline only contains running time.
    """

    def __init__(self, clock: SessionClock, log: DataLog, evaluator: AlarmEvaluator):
        self._clock = clock
        self._log = log
        self._evaluator = evaluator
        self.initial_value: float | None = None
        self.current_value: float | None = None

    def ingest(self, raw_payload: str | bytes | float | int) -> IngestResult | None:
        """
        Process one stream frame.

        Args:
            raw_payload: Frame payload

        Returns:
            IngestResult if the sample was accepted, None if it was discarded
        """
        try:
            value = parse_payload(raw_payload)
        except MalformedSampleError as e:
            logger.debug(f"Discarding malformed sample: {e}")
            return None

        if self._clock.phase is not SessionPhase.RUNNING:
            return None

        if self.initial_value is None:
            self.initial_value = value
            logger.info(f"Initial value recorded: {value:.2f}")
        self.current_value = value

        sample = Sample(elapsed_time=self._clock.elapsed(), value=value)
        self._log.append_sample(sample)
        fired = self._evaluator.evaluate(sample, self.initial_value)
        return IngestResult(sample=sample, alarm_fired=fired)

    def reset(self) -> None:
        self.initial_value = None
        self.current_value = None
