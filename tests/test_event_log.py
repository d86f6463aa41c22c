from __future__ import annotations

import datetime as dt
import pathlib

from conftest import T0
from flicker_monitor.core.event_log import CsvEventLog, session_stamp
from flicker_monitor.core.models import FlickerEvent, SampleRow


def test_open_writes_headers(tmp_path: pathlib.Path) -> None:
    log = CsvEventLog()
    sensor_path, flicker_path = log.open(tmp_path / "logs", stamp="run1")

    assert sensor_path.name == "sensor_log_run1.csv"
    assert flicker_path.name == "flicker_events_run1.csv"
    assert sensor_path.read_text() == "Time,Sensor1,Sensor2,Active_Flicker_S1,Active_Flicker_S2\n"
    assert flicker_path.read_text() == (
        "Sensor,Start Time,End Time,Duration (seconds),Initial Value,Minimum Value,Percent Change\n"
    )
    log.close()


def test_rows_and_events_are_appended(tmp_path: pathlib.Path) -> None:
    log = CsvEventLog()
    sensor_path, flicker_path = log.open(tmp_path, stamp="run2")

    log.append_sample_row(SampleRow(T0, 101.23456, 9.5, True, False))
    log.append_flicker_event(FlickerEvent(
        sensor="sensor1",
        start_time=T0,
        end_time=T0 + dt.timedelta(milliseconds=350),
        duration_seconds=0.35,
        initial_value=100.0,
        minimum_value=80.0,
        percent_change=20.0,
    ))

    sample_lines = sensor_path.read_text().splitlines()
    event_lines = flicker_path.read_text().splitlines()
    assert sample_lines[1] == "2026-01-05T09:30:00.000,101.235,9.500,true,false"
    assert event_lines[1] == (
        "sensor1,2026-01-05T09:30:00.000,2026-01-05T09:30:00.350,0.350,100.000,80.000,20.00"
    )
    log.close()


def test_appends_after_close_are_ignored(tmp_path: pathlib.Path) -> None:
    log = CsvEventLog()
    sensor_path, _ = log.open(tmp_path, stamp="run3")
    log.close()
    log.close()

    log.append_sample_row(SampleRow(T0, 1.0, 2.0, False, False))

    assert not log.is_open
    assert len(sensor_path.read_text().splitlines()) == 1


def test_session_stamp_is_filename_safe() -> None:
    stamp = session_stamp(dt.datetime(2026, 10, 19, 14, 3, 7, 512000))
    assert stamp == "2026-10-19T14-03-07.512"
