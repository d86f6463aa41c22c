"""
================================================================================
Flicker Detector - Transient Deviation Detection
================================================================================

This module watches the two sensor channels for flickers: short excursions
away from the previous reading that later recover to the pre-excursion
baseline.

Design Philosophy:
    "Innovation distinguishes between a leader and a follower." - Steve Jobs

Algorithm (per sensor, per sample):
    1. The first sample after a reset only records a baseline
    2. percent change = (previous - current) / previous * 100
    3. No run open and |percent change| > threshold  ->  open a run
    4. Run open: close it when the value is back within threshold of the
       run's initial value, otherwise track the lowest value and the
       largest percent change seen so far
    5. Remember the current value for the next sample

A run opens relative to the immediately preceding sample but only closes
relative to its own baseline, so a slow drift back does not split one
flicker into several.
"""

import logging
import math
from typing import Dict, List, Optional

from .models import (
    FlickerEvent, FlickerRun, Sample, SampleRow, SensorChannelState,
)
from .ports import EventSink
from ..utils.constants import FLICKER_THRESHOLD_PCT, SENSOR_IDS

LOGGER = logging.getLogger(__name__)


def percent_change(previous: float, current: float) -> Optional[float]:
    """
    Relative change from ``previous`` to ``current`` in percent.

    A drop gives a positive value. Returns None when ``previous`` is zero,
    since no relative change can be computed from a zero baseline.
    """
    if previous == 0:
        return None
    return (previous - current) / previous * 100


class FlickerDetector:
    """
    Streaming flicker detector for the two sensor channels.

    The detector only evaluates samples while a detection session is
    active. Each closed run becomes a FlickerEvent which is returned from
    on_sample() and, when a sink is attached, written to the event log
    together with one raw row per sample.

    Attributes:
        threshold: Relative change in percent that opens/closes a run
        sink: Optional EventSink receiving raw rows and closed events

    Example:
        >>> detector = FlickerDetector(sink=event_log)
        >>> detector.start()
        >>> for sample in stream:
        ...     for event in detector.on_sample(sample):
        ...         print(f"{event.sensor}: {event.percent_change:.2f}%")
    """

    def __init__(self, sink: Optional[EventSink] = None,
                 threshold: float = FLICKER_THRESHOLD_PCT):
        """
        Initialize the detector.

        Args:
            sink: Receives raw rows and closed events while active
            threshold: Flicker threshold in percent (default 1.0)
        """
        self.sink = sink
        self.threshold = threshold
        self._active = False

        # One fixed slot per sensor
        self._channels: Dict[str, SensorChannelState] = {
            sensor_id: SensorChannelState() for sensor_id in SENSOR_IDS
        }
        self._counts: Dict[str, int] = {sensor_id: 0 for sensor_id in SENSOR_IDS}

    # =========================================================================
    # Session Control
    # =========================================================================

    @property
    def is_active(self) -> bool:
        """True while a detection session is running."""
        return self._active

    def start(self) -> None:
        """Begin a detection session from a clean state."""
        self.reset()
        self._active = True
        LOGGER.info("Flicker detection started (threshold %.2f%%)", self.threshold)

    def stop(self) -> None:
        """
        End the detection session.

        Any run still open is discarded without producing an event.
        Flicker counts are kept so the last session stays visible.
        """
        for sensor_id, state in self._channels.items():
            if state.active_flicker is not None:
                LOGGER.info("Discarding open flicker on %s", sensor_id)
            state.active_flicker = None
        self._active = False
        LOGGER.info("Flicker detection stopped")

    def reset(self) -> None:
        """
        Reset both channels and both flicker counts.

        Call this when a session starts or restarts, and whenever the
        connection to the sensors drops.
        """
        for state in self._channels.values():
            state.reset()
        for sensor_id in self._counts:
            self._counts[sensor_id] = 0

    def set_threshold(self, threshold: float) -> None:
        """
        Adjust the flicker threshold.

        Args:
            threshold: New threshold in percent (must be positive)
        """
        if threshold <= 0:
            raise ValueError("Threshold must be positive")
        self.threshold = threshold

    # =========================================================================
    # Live State
    # =========================================================================

    @property
    def flicker_counts(self) -> Dict[str, int]:
        """Closed runs per sensor since the last reset."""
        return dict(self._counts)

    def flicker_count(self, sensor_id: str) -> int:
        return self._counts[sensor_id]

    def has_open_run(self, sensor_id: str) -> bool:
        return self._channels[sensor_id].active_flicker is not None

    def channel_state(self, sensor_id: str) -> SensorChannelState:
        """Return a copy of a channel's state for display or inspection."""
        state = self._channels[sensor_id]
        run = state.active_flicker
        run_copy = None
        if run is not None:
            run_copy = FlickerRun(
                run.start_time, run.initial_value, run.min_value, run.max_percent_change
            )
        return SensorChannelState(state.last_value, run_copy)

    # =========================================================================
    # Sample Processing
    # =========================================================================

    def on_sample(self, sample: Sample) -> List[FlickerEvent]:
        """
        Process one paired reading.

        Args:
            sample: The new reading for both sensors

        Returns:
            Flicker events closed by this sample (usually empty)
        """
        if not self._active:
            return []

        if not (math.isfinite(sample.sensor1) and math.isfinite(sample.sensor2)):
            LOGGER.debug("Dropping non-finite sample: %s, %s", sample.sensor1, sample.sensor2)
            return []

        events = []
        for sensor_id in SENSOR_IDS:
            event = self._process_channel(sensor_id, sample.value(sensor_id), sample)
            if event is not None:
                events.append(event)

        for event in events:
            self._counts[event.sensor] += 1
            LOGGER.info(
                "Flicker on %s: %.3fs, min %.3f, %.2f%%",
                event.sensor, event.duration_seconds, event.minimum_value, event.percent_change
            )
            if self.sink is not None:
                self.sink.append_flicker_event(event)

        if self.sink is not None:
            self.sink.append_sample_row(SampleRow(
                timestamp=sample.timestamp,
                sensor1=sample.sensor1,
                sensor2=sample.sensor2,
                sensor1_has_open_run=self.has_open_run("sensor1"),
                sensor2_has_open_run=self.has_open_run("sensor2"),
            ))

        return events

    def _process_channel(self, sensor_id: str, value: float,
                         sample: Sample) -> Optional[FlickerEvent]:
        """Advance one channel's state machine by one reading."""
        state = self._channels[sensor_id]
        previous = state.last_value
        state.last_value = value

        # First reading since reset only establishes the baseline
        if previous is None:
            return None

        change = percent_change(previous, value)
        run = state.active_flicker

        # Rising edge: excursion away from the previous reading
        if run is None and change is not None and abs(change) > self.threshold:
            run = FlickerRun(
                start_time=sample.timestamp,
                initial_value=previous,
                min_value=value,
                max_percent_change=abs(change),
            )
            state.active_flicker = run
            LOGGER.debug("Flicker opened on %s at %.3f (%.2f%%)", sensor_id, value, change)

        if run is None:
            return None

        run.min_value = min(run.min_value, value)

        # The recovering step does not count toward the reported change
        if self._has_recovered(run, value):
            state.active_flicker = None
            return FlickerEvent(
                sensor=sensor_id,
                start_time=run.start_time,
                end_time=sample.timestamp,
                duration_seconds=(sample.timestamp - run.start_time).total_seconds(),
                initial_value=run.initial_value,
                minimum_value=run.min_value,
                percent_change=run.max_percent_change,
            )

        if change is not None:
            run.max_percent_change = max(run.max_percent_change, abs(change))
        return None

    def _has_recovered(self, run: FlickerRun, value: float) -> bool:
        """True when ``value`` is back within threshold of the run's baseline."""
        # A zero baseline can never be recovered to in relative terms
        if run.initial_value == 0:
            return False
        return_change = abs((value - run.initial_value) / run.initial_value) * 100
        return return_change < self.threshold
