from __future__ import annotations

import logging

import pytest
import serial

from flicker_monitor.core import serial_link
from flicker_monitor.core.serial_link import SerialLink, parse_sample_line


class FakeSerial:
    def __init__(self, fail_with: Exception | None = None, incoming: bytes = b"") -> None:
        self.is_open = True
        self.written = []
        self.fail_with = fail_with
        self.incoming = bytearray(incoming)
        self.on_read = None

    @property
    def in_waiting(self) -> int:
        return len(self.incoming)

    def read(self, size: int) -> bytes:
        data = bytes(self.incoming[:size])
        del self.incoming[:size]
        if self.on_read is not None:
            self.on_read()
        return data

    def write(self, data: bytes) -> int:
        if self.fail_with is not None:
            raise self.fail_with
        self.written.append(data)
        return len(data)

    def flush(self) -> None:
        pass

    def close(self) -> None:
        self.is_open = False


@pytest.mark.parametrize(
    "line, expected",
    [
        (b"101.5,9.25", (101.5, 9.25)),
        (b" 12 , -3.5 ", (12.0, -3.5)),
        (b"1e2,0", (100.0, 0.0)),
    ],
)
def test_parse_valid_lines(line, expected) -> None:
    assert parse_sample_line(line) == expected


@pytest.mark.parametrize(
    "line",
    [b"", b"101.5", b"1,2,3", b"abc,1", b"nan,1", b"1,inf", b"\xff\xfe,1"],
)
def test_parse_rejects_malformed_lines(line) -> None:
    assert parse_sample_line(line) is None


def test_extract_lines_keeps_partial_tail() -> None:
    buffer = bytearray(b"1,2\r\n3,4\n5,")

    lines = SerialLink._extract_lines(buffer)

    assert lines == [b"1,2", b"3,4"]
    assert bytes(buffer) == b"5,"


def test_send_command_without_port_fails() -> None:
    link = SerialLink()

    result = link.send_command("c")

    assert not result
    assert result.error == "Serial port is not open"


def test_send_command_writes_line() -> None:
    link = SerialLink()
    link.serial = FakeSerial()

    result = link.send_command("c")

    assert result
    assert link.serial.written == [b"c\n"]


def test_send_command_reports_write_failure() -> None:
    link = SerialLink()
    link.serial = FakeSerial(fail_with=serial.SerialException("device reports readiness to read"))

    result = link.send_command("d")

    assert not result
    assert "readiness" in result.error


def test_send_command_reports_write_timeout() -> None:
    link = SerialLink(write_timeout=0.5)
    link.serial = FakeSerial(fail_with=serial.SerialTimeoutException("Write timeout"))

    result = link.send_command("w")

    assert not result
    assert result.error == "Timed out writing 'w'"


def test_connect_port_failure_is_reported() -> None:
    def refuse(*args, **kwargs):
        raise serial.SerialException("could not open port /dev/ttyFAKE")

    link = SerialLink(serial_factory=refuse)

    result = link.connect_port("/dev/ttyFAKE")

    assert not result
    assert "could not open port" in result.error
    assert not link.is_connected
    assert not link.isRunning()


def test_disconnect_closes_port() -> None:
    link = SerialLink()
    fake = FakeSerial()
    link.serial = fake
    link.port = "/dev/ttyFAKE"

    assert link.disconnect_port()

    assert not fake.is_open
    assert not link.is_connected
    assert link.port is None


class FakeClock:
    def __init__(self, now: float = 1000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now


@pytest.fixture()
def clock(monkeypatch) -> FakeClock:
    fake = FakeClock()
    monkeypatch.setattr(serial_link.time, "monotonic", fake)
    return fake


def test_heartbeat_writes_poll_once_due(clock) -> None:
    link = SerialLink(poll_interval=0.1)
    link.serial = FakeSerial()
    link._next_heartbeat = clock.now

    link._heartbeat()

    assert link.serial.written == [b"s\n"]
    assert link._next_heartbeat == pytest.approx(clock.now + 0.1)


def test_heartbeat_waits_for_deadline(clock) -> None:
    link = SerialLink(poll_interval=0.1)
    link.serial = FakeSerial()
    link._next_heartbeat = clock.now + 0.05

    link._heartbeat()

    assert link.serial.written == []

    clock.now += 0.05
    link._heartbeat()

    assert link.serial.written == [b"s\n"]


def test_command_pushes_next_heartbeat_back(clock) -> None:
    link = SerialLink(poll_interval=0.1)
    link.serial = FakeSerial()
    link._next_heartbeat = clock.now

    assert link.send_command("c")
    link._heartbeat()

    assert link.serial.written == [b"c\n"]
    assert link._next_heartbeat == pytest.approx(clock.now + 0.1)

    clock.now += 0.1
    link._heartbeat()

    assert link.serial.written == [b"c\n", b"s\n"]


def test_heartbeat_write_failure_is_logged(clock, caplog) -> None:
    link = SerialLink(poll_interval=0.1)
    link.serial = FakeSerial(fail_with=serial.SerialException("write failed"))
    link._next_heartbeat = clock.now

    with caplog.at_level(logging.WARNING, logger=serial_link.__name__):
        link._heartbeat()

    assert "Error writing to port: write failed" in caplog.text


def test_read_loop_keeps_reading_after_heartbeat_failure(clock) -> None:
    link = SerialLink(poll_interval=0.1)
    fake = FakeSerial(
        fail_with=serial.SerialException("write failed"),
        incoming=b"100.5,9.75\r\ngarbage\n12,",
    )
    received = []
    link.sample_received.connect(lambda s1, s2: received.append((s1, s2)))

    def stop_after_read() -> None:
        link.running = False

    fake.on_read = stop_after_read
    link.serial = fake
    link.running = True

    link._read_loop()

    assert received == [(100.5, 9.75)]
