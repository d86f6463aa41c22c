"""
================================================================================
Event Log - CSV Output for Samples and Flicker Events
================================================================================

Each detection session writes two CSV files into the log directory:

    sensor_log_<stamp>.csv       one row per sample while detection runs
    flicker_events_<stamp>.csv   one row per closed flicker

Rows are appended and flushed one at a time so a crash never loses more
than the line being written.
"""

import csv
import logging
from datetime import datetime
from pathlib import Path
from typing import Optional, Tuple

from .models import FlickerEvent, SampleRow
from ..utils.constants import (
    SAMPLE_LOG_HEADER, EVENT_LOG_HEADER, SAMPLE_LOG_PREFIX, EVENT_LOG_PREFIX,
)

LOGGER = logging.getLogger(__name__)


def session_stamp(now: Optional[datetime] = None) -> str:
    """File-name-safe timestamp, e.g. '2026-10-19T14-03-07.512'."""
    now = now or datetime.now()
    return now.isoformat(timespec="milliseconds").replace(":", "-")


class CsvEventLog:
    """
    Append-only CSV writer for one detection session.

    Example:
        >>> log = CsvEventLog()
        >>> sensor_path, flicker_path = log.open("logs")
        >>> log.append_sample_row(row)
        >>> log.close()
    """

    def __init__(self):
        self.sensor_log_path: Optional[Path] = None
        self.flicker_log_path: Optional[Path] = None
        self._sample_file = None
        self._event_file = None
        self._sample_writer = None
        self._event_writer = None

    @property
    def is_open(self) -> bool:
        return self._sample_file is not None

    def open(self, log_dir, stamp: Optional[str] = None) -> Tuple[Path, Path]:
        """
        Create fresh log files with their headers.

        Args:
            log_dir: Directory for the log files (created if missing)
            stamp: Timestamp used in the file names (defaults to now)

        Returns:
            Paths of the sample log and the flicker event log

        Raises:
            OSError: If the directory or files cannot be created
        """
        self.close()

        directory = Path(log_dir)
        directory.mkdir(parents=True, exist_ok=True)
        stamp = stamp or session_stamp()

        self.sensor_log_path = directory / f"{SAMPLE_LOG_PREFIX}_{stamp}.csv"
        self.flicker_log_path = directory / f"{EVENT_LOG_PREFIX}_{stamp}.csv"

        self._sample_file = open(self.sensor_log_path, 'w', newline='')
        try:
            self._event_file = open(self.flicker_log_path, 'w', newline='')
        except OSError:
            self._sample_file.close()
            self._sample_file = None
            raise

        self._sample_writer = csv.writer(self._sample_file, lineterminator='\n')
        self._event_writer = csv.writer(self._event_file, lineterminator='\n')
        self._write(self._sample_file, self._sample_writer, SAMPLE_LOG_HEADER)
        self._write(self._event_file, self._event_writer, EVENT_LOG_HEADER)

        LOGGER.info("Logging samples to %s", self.sensor_log_path)
        LOGGER.info("Logging flicker events to %s", self.flicker_log_path)
        return self.sensor_log_path, self.flicker_log_path

    def append_sample_row(self, row: SampleRow) -> None:
        """Append one raw sample row."""
        if not self.is_open:
            LOGGER.debug("Sample log closed, row dropped")
            return
        self._write(self._sample_file, self._sample_writer, row.to_csv_row())

    def append_flicker_event(self, event: FlickerEvent) -> None:
        """Append one closed flicker event."""
        if self._event_file is None:
            LOGGER.debug("Flicker log closed, event dropped")
            return
        self._write(self._event_file, self._event_writer, event.to_csv_row())

    def close(self) -> None:
        """Close both files. Safe to call more than once."""
        for handle in (self._sample_file, self._event_file):
            if handle is not None:
                handle.close()
        self._sample_file = None
        self._event_file = None
        self._sample_writer = None
        self._event_writer = None

    @staticmethod
    def _write(handle, writer, row) -> None:
        writer.writerow(row)
        handle.flush()
