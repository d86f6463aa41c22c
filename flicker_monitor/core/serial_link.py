"""
================================================================================
Serial Link - Sensor Stream and Device Commands
================================================================================

This module handles communication with the sensor board over a serial
port. It reads text lines carrying the two sensor readings and writes the
single-character control commands.

Design Philosophy:
    "Real artists ship." - Steve Jobs

This module is the critical link between hardware and software. It must
handle timing variations, garbage on the line, and connection issues
gracefully.

Line Protocol:
    host -> board:  "<cmd>\\n"               (c, d, s, w)
    board -> host:  "<sensor1>,<sensor2>\\r\\n"

    The board reports a reading each time it receives "s", so the reader
    thread writes a heartbeat "s" every poll interval while connected.
"""

import logging
import math
import threading
import time
from typing import Callable, List, Optional, Tuple

import serial
import serial.tools.list_ports
from PyQt6.QtCore import QThread, pyqtSignal

from .errors import CommandError, MonitorError, OperationResult, PortConnectionError
from ..utils.constants import (
    DEFAULT_BAUDRATE, LINE_DELIMITER, FIELD_SEPARATOR,
    HEARTBEAT_COMMAND, POLL_INTERVAL_S,
)

LOGGER = logging.getLogger(__name__)


def list_ports() -> List[str]:
    """
    List the serial ports available on this machine.

    Returns:
        Port paths (e.g. '/dev/ttyUSB0', 'COM3'); empty if listing fails
    """
    try:
        ports = [port.device for port in serial.tools.list_ports.comports()]
    except (OSError, serial.SerialException) as e:
        LOGGER.error("Error listing ports: %s", e)
        return []
    LOGGER.debug("Available ports: %s", ports)
    return ports


def parse_sample_line(line: bytes) -> Optional[Tuple[float, float]]:
    """
    Parse one "<sensor1>,<sensor2>" line.

    Args:
        line: Raw line without the trailing newline

    Returns:
        The two readings, or None for anything malformed or non-finite
    """
    try:
        text = line.decode('ascii').strip()
    except UnicodeDecodeError:
        LOGGER.debug("Skipping undecodable line: %r", line)
        return None

    if not text:
        return None

    parts = text.split(FIELD_SEPARATOR)
    if len(parts) != 2:
        LOGGER.debug("Skipping bad data: %s", text)
        return None

    try:
        sensor1, sensor2 = float(parts[0]), float(parts[1])
    except ValueError:
        LOGGER.debug("Skipping bad data: %s", text)
        return None

    if not (math.isfinite(sensor1) and math.isfinite(sensor2)):
        LOGGER.debug("Skipping non-finite data: %s", text)
        return None

    return sensor1, sensor2


class SerialLink(QThread):
    """
    Background thread for the sensor board's serial port.

    The thread reads lines, parses them into sensor pairs and emits them.
    It also keeps the board polling with a heartbeat. Commands may be sent
    from the GUI thread at any time; writes are serialized by a lock.

    Signals:
        sample_received: Emitted with (sensor1, sensor2) for each valid line
        error_occurred: Emitted with an error message when the link fails

    Example:
        >>> link = SerialLink()
        >>> link.sample_received.connect(self.handle_sample)
        >>> result = link.connect_port('/dev/ttyUSB0')
        >>> link.send_command('c')
        >>> link.disconnect_port()
    """

    sample_received = pyqtSignal(float, float)
    error_occurred = pyqtSignal(str)

    def __init__(self, baudrate: int = DEFAULT_BAUDRATE,
                 poll_interval: float = POLL_INTERVAL_S,
                 write_timeout: Optional[float] = None,
                 serial_factory: Callable = serial.Serial):
        """
        Initialize the serial link.

        Args:
            baudrate: Communication speed (default 115200)
            poll_interval: Seconds between heartbeat polls
            write_timeout: Seconds to wait for a write; None waits forever
            serial_factory: Callable creating the port object (for tests)
        """
        super().__init__()
        self.baudrate = baudrate
        self.poll_interval = poll_interval
        self.write_timeout = write_timeout
        self.port: Optional[str] = None
        self.running = False
        self.serial: Optional[serial.Serial] = None

        self._serial_factory = serial_factory
        self._write_lock = threading.Lock()
        self._next_heartbeat = 0.0

    @property
    def is_connected(self) -> bool:
        return self.serial is not None and self.serial.is_open

    # =========================================================================
    # Connection
    # =========================================================================

    def connect_port(self, port: str) -> OperationResult:
        """
        Open ``port`` and start reading.

        Any previously open port is closed first.

        Returns:
            OperationResult with the failure reason if the port cannot open
        """
        if self.is_connected or self.isRunning():
            self.disconnect_port()

        try:
            self.serial = self._serial_factory(
                port, self.baudrate, timeout=0.1, write_timeout=self.write_timeout
            )
        except (serial.SerialException, OSError, ValueError) as e:
            self.serial = None
            LOGGER.error("Error connecting to port %s: %s", port, e)
            return OperationResult.fail(str(e))

        self.port = port
        self.running = True
        self.start()
        LOGGER.info("Port connected: %s", port)
        return OperationResult.ok(port=port)

    def disconnect_port(self) -> OperationResult:
        """Stop the reader thread and close the port."""
        self.running = False
        if self.isRunning():
            self.wait(1000)  # Wait up to 1 second for thread to finish

        try:
            self._close()
        except (serial.SerialException, OSError) as e:
            LOGGER.error("Error disconnecting port: %s", e)
            return OperationResult.fail(str(e))

        if self.port:
            LOGGER.info("Port disconnected: %s", self.port)
        self.port = None
        return OperationResult.ok()

    def _close(self) -> None:
        with self._write_lock:
            if self.serial is not None and self.serial.is_open:
                self.serial.close()
            self.serial = None

    # =========================================================================
    # Commands
    # =========================================================================

    def send_command(self, command: str) -> OperationResult:
        """
        Write a single command to the board.

        The write completing is the board's acknowledgment. The next
        heartbeat is pushed back one interval so it does not run into the
        command.

        Args:
            command: Command character ('c', 'd', 's' or 'w')

        Returns:
            OperationResult with the failure reason if the write failed
        """
        try:
            self._write_line(command)
        except MonitorError as e:
            LOGGER.error("Error sending command %r: %s", command, e)
            return OperationResult.fail(str(e))

        self._next_heartbeat = time.monotonic() + self.poll_interval
        LOGGER.info("Command sent: %s", command)
        return OperationResult.ok(command=command)

    def _write_line(self, command: str) -> None:
        """Write ``command`` plus newline, raising MonitorError subclasses."""
        with self._write_lock:
            if not self.is_connected:
                raise PortConnectionError("Serial port is not open")
            try:
                self.serial.write(f"{command}\n".encode('ascii'))
                self.serial.flush()
            except serial.SerialTimeoutException as e:
                raise CommandError(f"Timed out writing {command!r}") from e
            except (serial.SerialException, OSError) as e:
                raise CommandError(str(e)) from e

    # =========================================================================
    # Reader Thread
    # =========================================================================

    def run(self) -> None:
        """
        Main thread loop - heartbeat, read, split lines, emit samples.

        The loop ends when disconnect_port() clears ``running`` or the
        port fails. Failures while still running are reported through
        error_occurred.
        """
        try:
            self._read_loop()
        except (serial.SerialException, OSError, PortConnectionError) as e:
            if self.running:
                LOGGER.error("Serial link failed: %s", e)
                self.error_occurred.emit(str(e))
        finally:
            self.running = False

    def _read_loop(self) -> None:
        buffer = bytearray()
        self._next_heartbeat = time.monotonic()

        while self.running:
            self._heartbeat()

            port = self.serial
            if port is None:
                raise PortConnectionError("Serial port is not open")
            waiting = port.in_waiting
            if waiting:
                buffer.extend(port.read(waiting))

            for line in self._extract_lines(buffer):
                parsed = parse_sample_line(line)
                if parsed is not None:
                    self.sample_received.emit(*parsed)

            # Small sleep to prevent CPU spinning
            time.sleep(0.005)

    def _heartbeat(self) -> None:
        now = time.monotonic()
        if now < self._next_heartbeat:
            return
        self._next_heartbeat = now + self.poll_interval
        try:
            self._write_line(HEARTBEAT_COMMAND)
        except CommandError as e:
            LOGGER.warning("Error writing to port: %s", e)

    @staticmethod
    def _extract_lines(buffer: bytearray) -> List[bytes]:
        """Remove and return every complete line in ``buffer``."""
        lines = []
        while True:
            idx = buffer.find(LINE_DELIMITER)
            if idx == -1:
                break
            lines.append(bytes(buffer[:idx]).rstrip(b"\r"))
            del buffer[:idx + len(LINE_DELIMITER)]
        return lines

    def stop(self) -> None:
        """Stop the link gracefully (alias used on window close)."""
        self.disconnect_port()
