"""
================================================================================
Flicker Session - Start/Stop Detection and Logging
================================================================================

A session is the interval during which flicker detection and CSV logging
are active. Starting one opens fresh log files and resets the detector.
Stopping one discards any open flicker and closes the files.
"""

import logging
from pathlib import Path
from typing import Callable, Optional

from .errors import OperationResult, SessionError
from .event_log import CsvEventLog
from .flicker_detector import FlickerDetector

LOGGER = logging.getLogger(__name__)


class FlickerSession:
    """
    Session control over the detector and its event log.

    Args:
        link: Anything with an ``is_connected`` property (the SerialLink)
        detector: The FlickerDetector to start/stop
        event_log: The CsvEventLog receiving rows and events
        log_dir: Directory for new session log files

    Example:
        >>> session = FlickerSession(link, detector, event_log, "logs")
        >>> result = session.start_session()
        >>> result.detail['sensor_log_file']
    """

    def __init__(self, link, detector: FlickerDetector, event_log: CsvEventLog, log_dir):
        self.link = link
        self.detector = detector
        self.event_log = event_log
        self.log_dir = Path(log_dir)

        # Called with the new active flag after a successful start/stop
        self.on_state_changed: Optional[Callable[[bool], None]] = None

        if self.detector.sink is None:
            self.detector.sink = event_log

    @property
    def is_active(self) -> bool:
        return self.detector.is_active

    def start_session(self) -> OperationResult:
        """
        Start flicker detection with fresh log files.

        Returns:
            OperationResult; on success ``detail`` holds both log paths
        """
        try:
            if not self.link.is_connected:
                raise SessionError("Serial port is not connected")
            try:
                sensor_path, flicker_path = self.event_log.open(self.log_dir)
            except OSError as e:
                raise SessionError(f"Cannot create log files: {e}") from e
        except SessionError as e:
            LOGGER.error("Error starting flicker detection: %s", e)
            return OperationResult.fail(str(e))

        self.detector.start()
        self._notify()
        return OperationResult.ok(
            sensor_log_file=str(sensor_path), flicker_log_file=str(flicker_path)
        )

    def stop_session(self) -> OperationResult:
        """Stop flicker detection and close the log files."""
        self.detector.stop()
        self._notify()
        try:
            self.event_log.close()
        except OSError as e:
            LOGGER.error("Error stopping flicker detection: %s", e)
            return OperationResult.fail(str(e))
        return OperationResult.ok()

    def handle_disconnect(self) -> None:
        """The sensor stream went away: end the session and forget all state."""
        if self.is_active:
            self.stop_session()
        self.detector.reset()

    def _notify(self) -> None:
        if self.on_state_changed is not None:
            self.on_state_changed(self.is_active)
