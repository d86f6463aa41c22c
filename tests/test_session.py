from __future__ import annotations

import pathlib

from conftest import FakeLink, make_samples
from flicker_monitor.core.event_log import CsvEventLog
from flicker_monitor.core.flicker_detector import FlickerDetector
from flicker_monitor.core.session import FlickerSession


def build_session(tmp_path: pathlib.Path, connected: bool = True):
    detector = FlickerDetector()
    event_log = CsvEventLog()
    session = FlickerSession(FakeLink(connected), detector, event_log, tmp_path / "logs")
    return session, detector, event_log


def test_start_requires_connection(tmp_path: pathlib.Path) -> None:
    session, detector, event_log = build_session(tmp_path, connected=False)

    result = session.start_session()

    assert not result
    assert result.error == "Serial port is not connected"
    assert not detector.is_active
    assert not event_log.is_open


def test_start_opens_logs_and_resets_detector(tmp_path: pathlib.Path) -> None:
    session, detector, event_log = build_session(tmp_path)
    changes = []
    session.on_state_changed = changes.append

    assert session.start_session()
    for sample in make_samples([100, 100, 80, 100]):
        detector.on_sample(sample)
    assert detector.flicker_count("sensor1") == 1

    session.stop_session()
    result = session.start_session()

    assert result
    assert detector.is_active
    assert detector.flicker_counts == {"sensor1": 0, "sensor2": 0}
    assert pathlib.Path(result.detail["sensor_log_file"]).exists()
    assert changes == [True, False, True]
    session.stop_session()


def test_detector_writes_through_session_log(tmp_path: pathlib.Path) -> None:
    session, detector, event_log = build_session(tmp_path)
    result = session.start_session()

    for sample in make_samples([100, 100, 80, 100]):
        detector.on_sample(sample)
    session.stop_session()

    sample_lines = pathlib.Path(result.detail["sensor_log_file"]).read_text().splitlines()
    event_lines = pathlib.Path(result.detail["flicker_log_file"]).read_text().splitlines()
    assert len(sample_lines) == 5
    assert len(event_lines) == 2
    assert event_lines[1].endswith(",100.000,80.000,20.00")


def test_stop_discards_open_run_and_closes_logs(tmp_path: pathlib.Path) -> None:
    session, detector, event_log = build_session(tmp_path)
    result = session.start_session()
    for sample in make_samples([100, 100, 80]):
        detector.on_sample(sample)

    assert session.stop_session()

    assert not session.is_active
    assert not detector.has_open_run("sensor1")
    assert not event_log.is_open
    event_lines = pathlib.Path(result.detail["flicker_log_file"]).read_text().splitlines()
    assert len(event_lines) == 1


def test_disconnect_ends_session_and_resets(tmp_path: pathlib.Path) -> None:
    session, detector, _ = build_session(tmp_path)
    session.start_session()
    for sample in make_samples([100, 100, 80, 100]):
        detector.on_sample(sample)

    session.handle_disconnect()

    assert not session.is_active
    assert detector.flicker_counts == {"sensor1": 0, "sensor2": 0}
    assert detector.channel_state("sensor1").last_value is None
