"""Tests for payload parsing and sample gating."""

import pytest

from impmon.errors import MalformedSampleError
from impmon.models.alarm import AlarmConfig
from impmon.session.alarm import AlarmEvaluator
from impmon.session.clock import SessionClock
from impmon.session.ingest import SampleIngest, parse_payload
from impmon.session.log import DataLog


@pytest.fixture
def parts(fake_clock, absolute_alarm):
    clock = SessionClock(fake_clock)
    log = DataLog(clock)
    evaluator = AlarmEvaluator(absolute_alarm)
    return clock, log, evaluator, SampleIngest(clock, log, evaluator)


class TestParsePayload:
    @pytest.mark.parametrize(
        "raw,expected",
        [
            ("512.4", 512.4),
            (" 12\n", 12.0),
            (b"7.25", 7.25),
            ("-3e2", -300.0),
            (42, 42.0),
            ("512.3 ohm", 512.3),
            ("498.0;", 498.0),
            ("12ohm", 12.0),
            ("1_000", 1.0),
            (".5e1x", 5.0),
            ("7.", 7.0),
        ],
    )
    def test_valid(self, raw, expected):
        assert parse_payload(raw) == expected

    @pytest.mark.parametrize(
        "raw",
        ["", "abc", "ohm 12", ".", "-", "nan", "inf", "1e999", b"\xff", None, True],
    )
    def test_malformed(self, raw):
        with pytest.raises(MalformedSampleError):
            parse_payload(raw)

    def test_malformed_is_value_error(self):
        with pytest.raises(ValueError):
            parse_payload("x")


class TestGating:
    def test_idle_samples_discarded(self, parts):
        clock, log, _, ingest = parts

        assert ingest.ingest("100") is None
        assert log.sample_count == 0
        assert ingest.initial_value is None
        assert ingest.current_value is None

    def test_paused_samples_discarded(self, parts, fake_clock):
        clock, log, _, ingest = parts
        clock.start()
        ingest.ingest("100")
        clock.pause()

        assert ingest.ingest("90") is None
        assert log.sample_count == 1
        assert ingest.current_value == 100

    def test_malformed_changes_nothing(self, parts):
        clock, log, evaluator, ingest = parts
        clock.start()
        ingest.ingest("100")

        assert ingest.ingest("garbage") is None
        assert ingest.ingest("ohm") is None

        assert log.sample_count == 1
        assert ingest.initial_value == 100
        assert ingest.current_value == 100
        assert evaluator.fired is False


class TestAccepted:
    def test_sample_stamped_with_elapsed_time(self, parts, fake_clock):
        clock, log, _, ingest = parts
        clock.start()
        fake_clock.advance(1.5)

        result = ingest.ingest("99.5")

        assert result is not None
        assert result.sample.elapsed_time == pytest.approx(1.5)
        assert result.sample.value == 99.5
        assert log.samples() == (result.sample,)

    def test_initial_value_fixed_by_first_sample(self, parts, fake_clock):
        clock, _, _, ingest = parts
        clock.start()

        for value in ["120", "110", "130"]:
            fake_clock.advance(0.1)
            ingest.ingest(value)

        assert ingest.initial_value == 120
        assert ingest.current_value == 130

    def test_initial_value_survives_pause(self, parts):
        clock, _, _, ingest = parts
        clock.start()
        ingest.ingest("120")
        clock.pause()
        clock.resume()
        ingest.ingest("80")

        assert ingest.initial_value == 120

    def test_alarm_result_reported(self, parts):
        clock, _, evaluator, ingest = parts
        clock.start()

        assert ingest.ingest("60").alarm_fired is False
        assert ingest.ingest("48").alarm_fired is True
        assert ingest.ingest("40").alarm_fired is False
        assert evaluator.fired is True

    def test_evaluator_receives_initial_value(self, fake_clock):
        clock = SessionClock(fake_clock)
        log = DataLog(clock)
        evaluator = AlarmEvaluator(
            AlarmConfig(enabled=True, mode="percent_of_initial", threshold=50)
        )
        ingest = SampleIngest(clock, log, evaluator)
        clock.start()

        fired = [ingest.ingest(v).alarm_fired for v in ["100", "60", "50"]]

        assert fired == [False, False, True]

    def test_reset_clears_values(self, parts):
        clock, _, _, ingest = parts
        clock.start()
        ingest.ingest("100")

        ingest.reset()

        assert ingest.initial_value is None
        assert ingest.current_value is None
