"""Descriptive statistics over a session's samples."""

from collections.abc import Sequence

import numpy as np

from impmon.models.session import Sample, SessionSummary


def summarize_samples(
    samples: Sequence[Sample], initial_value: float | None = None
) -> SessionSummary:
    """
    Summarize a session.

    The drop is measured from ``initial_value`` (the first running sample)
    to the last sample, so a falling impedance gives a positive drop.

    Args:
        samples: Samples in log order
        initial_value: Session initial value; defaults to the first sample

    Returns:
        SessionSummary, with value fields None when there are no samples
    """
    if not samples:
        return SessionSummary(
            sample_count=0, duration_seconds=0.0, initial_value=initial_value
        )

    values = np.fromiter((s.value for s in samples), dtype=float, count=len(samples))
    if initial_value is None:
        initial_value = float(values[0])
    final_value = float(values[-1])

    drop_absolute = initial_value - final_value
    drop_percent = (
        drop_absolute / initial_value * 100.0 if initial_value != 0 else None
    )

    return SessionSummary(
        sample_count=len(samples),
        duration_seconds=samples[-1].elapsed_time,
        initial_value=initial_value,
        final_value=final_value,
        min_value=float(np.min(values)),
        max_value=float(np.max(values)),
        mean_value=float(np.mean(values)),
        drop_absolute=drop_absolute,
        drop_percent=drop_percent,
    )
