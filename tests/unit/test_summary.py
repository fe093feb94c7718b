"""Tests for session summary statistics."""

import pytest

from impmon.models.session import Sample
from impmon.report.summary import summarize_samples


def _samples(values, step=0.5):
    return [Sample(elapsed_time=i * step, value=v) for i, v in enumerate(values)]


def test_empty_summary():
    summary = summarize_samples([])

    assert summary.sample_count == 0
    assert summary.duration_seconds == 0.0
    assert summary.min_value is None
    assert summary.drop_percent is None


def test_statistics():
    summary = summarize_samples(_samples([500, 450, 400, 420]), initial_value=500)

    assert summary.sample_count == 4
    assert summary.duration_seconds == pytest.approx(1.5)
    assert summary.initial_value == 500
    assert summary.final_value == 420
    assert summary.min_value == 400
    assert summary.max_value == 500
    assert summary.mean_value == pytest.approx(442.5)
    assert summary.drop_absolute == pytest.approx(80)
    assert summary.drop_percent == pytest.approx(16.0)


def test_initial_value_defaults_to_first_sample():
    summary = summarize_samples(_samples([200, 150]))
    assert summary.initial_value == 200
    assert summary.drop_percent == pytest.approx(25.0)


def test_zero_initial_value_has_no_percent():
    summary = summarize_samples(_samples([0, -5]))
    assert summary.drop_absolute == pytest.approx(5)
    assert summary.drop_percent is None
