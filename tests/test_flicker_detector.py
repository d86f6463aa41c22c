from __future__ import annotations

import datetime as dt
import math

import pytest

from conftest import T0, make_samples
from flicker_monitor.core.flicker_detector import FlickerDetector, percent_change
from flicker_monitor.core.models import Sample


def feed(detector: FlickerDetector, samples) -> list:
    events = []
    for sample in samples:
        events.extend(detector.on_sample(sample))
    return events


def test_percent_change_sign_and_zero_baseline() -> None:
    assert percent_change(100.0, 80.0) == pytest.approx(20.0)
    assert percent_change(100.0, 120.0) == pytest.approx(-20.0)
    assert percent_change(0.0, 5.0) is None


def test_dip_and_recovery_produces_one_event(detector, sink) -> None:
    events = feed(detector, make_samples([100, 100, 80, 100]))

    assert len(events) == 1
    event = events[0]
    assert event.sensor == "sensor1"
    assert event.initial_value == pytest.approx(100.0)
    assert event.minimum_value == pytest.approx(80.0)
    assert event.percent_change == pytest.approx(20.0)
    assert event.start_time == T0 + dt.timedelta(milliseconds=200)
    assert event.end_time == T0 + dt.timedelta(milliseconds=300)
    assert event.duration_seconds == pytest.approx(0.1)

    row = event.to_csv_row()
    assert row[4:] == ["100.000", "80.000", "20.00"]
    assert sink.events == [event]
    assert detector.flicker_count("sensor1") == 1
    assert detector.flicker_count("sensor2") == 0


def test_upward_flicker_minimum_includes_recovery(detector) -> None:
    events = feed(detector, make_samples([100, 100, 120, 100]))

    assert len(events) == 1
    assert events[0].initial_value == pytest.approx(100.0)
    assert events[0].minimum_value == pytest.approx(100.0)
    assert events[0].percent_change == pytest.approx(20.0)


def test_change_below_threshold_opens_nothing(detector, sink) -> None:
    events = feed(detector, make_samples([50, 50.3]))

    assert events == []
    assert not detector.has_open_run("sensor1")
    assert sink.events == []


def test_first_sample_only_sets_baseline(detector) -> None:
    detector.on_sample(make_samples([100])[0])

    state = detector.channel_state("sensor1")
    assert state.last_value == 100.0
    assert state.active_flicker is None


def test_run_stays_open_until_back_near_baseline(detector) -> None:
    samples = make_samples([100, 100, 80, 85, 90, 98.5, 99.5])
    open_flags = []
    events = []
    for sample in samples:
        events.extend(detector.on_sample(sample))
        open_flags.append(detector.has_open_run("sensor1"))

    assert open_flags == [False, False, True, True, True, True, False]
    assert len(events) == 1
    assert events[0].minimum_value == pytest.approx(80.0)
    assert events[0].end_time == samples[-1].timestamp


def test_worst_step_change_is_reported(detector) -> None:
    events = feed(detector, make_samples([100, 95, 80, 100]))

    assert len(events) == 1
    assert events[0].initial_value == pytest.approx(100.0)
    assert events[0].minimum_value == pytest.approx(80.0)
    assert events[0].percent_change == pytest.approx(15 / 95 * 100)


def test_only_one_run_per_sensor(detector) -> None:
    samples = make_samples([100, 100, 80, 60, 90, 70, 100])
    for sample in samples[:-1]:
        detector.on_sample(sample)
        state = detector.channel_state("sensor1")
        if state.active_flicker is not None:
            assert state.active_flicker.initial_value == 100.0

    events = detector.on_sample(samples[-1])
    assert len(events) == 1
    assert events[0].minimum_value == pytest.approx(60.0)
    assert detector.flicker_count("sensor1") == 1


def test_count_matches_closed_runs_per_sensor(detector) -> None:
    samples = make_samples(
        [100, 100, 90, 100, 100, 50, 100, 100],
        [20, 20, 20, 20, 30, 20, 20, 20],
    )
    events = feed(detector, samples)

    assert [e.sensor for e in events].count("sensor1") == 2
    assert [e.sensor for e in events].count("sensor2") == 1
    assert detector.flicker_counts == {"sensor1": 2, "sensor2": 1}


def test_inactive_detector_ignores_samples(sink) -> None:
    detector = FlickerDetector(sink=sink)

    events = feed(detector, make_samples([100, 100, 80, 100]))

    assert events == []
    assert sink.rows == []
    assert detector.channel_state("sensor1").last_value is None
    assert detector.flicker_counts == {"sensor1": 0, "sensor2": 0}


def test_reset_clears_channels_and_counts(detector) -> None:
    feed(detector, make_samples([100, 100, 80, 100, 100, 70]))
    assert detector.flicker_count("sensor1") == 1
    assert detector.has_open_run("sensor1")

    detector.reset()

    for sensor_id in ("sensor1", "sensor2"):
        state = detector.channel_state(sensor_id)
        assert state.last_value is None
        assert state.active_flicker is None
    assert detector.flicker_counts == {"sensor1": 0, "sensor2": 0}


def test_stop_discards_open_run(detector, sink) -> None:
    feed(detector, make_samples([100, 100, 80]))
    assert detector.has_open_run("sensor1")

    detector.stop()

    assert not detector.is_active
    assert not detector.has_open_run("sensor1")
    assert sink.events == []

    # Restarting begins from a clean slate; the old run never closes
    detector.start()
    later = [Sample(T0 + dt.timedelta(seconds=5), 100.0, 10.0)]
    assert feed(detector, later) == []
    assert detector.flicker_counts == {"sensor1": 0, "sensor2": 0}


def test_zero_previous_value_skips_evaluation(detector) -> None:
    events = feed(detector, make_samples([0, 5, 5]))

    assert events == []
    assert not detector.has_open_run("sensor1")
    assert detector.channel_state("sensor1").last_value == 5.0


def test_open_run_still_closes_after_zero_reading(detector) -> None:
    events = feed(detector, make_samples([100, 100, 0, 100]))

    assert len(events) == 1
    assert events[0].minimum_value == 0.0


def test_non_finite_sample_is_dropped(detector, sink) -> None:
    detector.on_sample(make_samples([100])[0])
    rows_before = len(sink.rows)

    events = detector.on_sample(Sample(T0, math.nan, 10.0))

    assert events == []
    assert len(sink.rows) == rows_before
    assert detector.channel_state("sensor1").last_value == 100.0


def test_rows_carry_open_run_flags(detector, sink) -> None:
    feed(detector, make_samples([100, 100, 80, 100], [10, 10, 10, 10]))

    assert len(sink.rows) == 4
    assert [r.sensor1_has_open_run for r in sink.rows] == [False, False, True, False]
    assert not any(r.sensor2_has_open_run for r in sink.rows)
    assert sink.rows[2].to_csv_row()[1:] == ["80.000", "10.000", "true", "false"]


def test_threshold_is_configurable(sink) -> None:
    detector = FlickerDetector(sink=sink, threshold=5.0)
    detector.start()

    assert feed(detector, make_samples([100, 97, 100])) == []
    assert len(feed(detector, make_samples([100, 90, 100]))) == 1

    with pytest.raises(ValueError):
        detector.set_threshold(0)
