"""
================================================================================
Models - Samples, Flicker Runs and Recipe Actions
================================================================================

Plain data types shared by the detector, the recipe executor and the log
writers. None of these types know about Qt or the serial port.

Lifecycle:
    Sample          created on arrival, never modified
    FlickerRun      opened on a threshold crossing, updated while open
    FlickerEvent    produced once when a run closes
    Action          one step of a recipe
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import List, Optional

from ..utils.constants import (
    SENSOR_IDS,
    CMD_CONNECT_DEVICE, CMD_DISCONNECT_DEVICE, CMD_SLEEP, CMD_WAKE,
)


def format_timestamp(ts: datetime) -> str:
    """Render a timestamp the way both CSV logs store it."""
    return ts.isoformat(timespec="milliseconds")


def _format_bool(value: bool) -> str:
    return "true" if value else "false"


# =============================================================================
# Sensor Data
# =============================================================================

@dataclass(frozen=True)
class Sample:
    """
    One paired reading from the two sensors.

    Attributes:
        timestamp: Arrival time of the reading
        sensor1: Value of the first sensor
        sensor2: Value of the second sensor
    """

    timestamp: datetime
    sensor1: float
    sensor2: float

    @classmethod
    def now(cls, sensor1: float, sensor2: float) -> 'Sample':
        """Create a sample stamped with the current local time."""
        return cls(datetime.now(), float(sensor1), float(sensor2))

    def value(self, sensor_id: str) -> float:
        """Return the reading for ``sensor_id`` ('sensor1' or 'sensor2')."""
        if sensor_id not in SENSOR_IDS:
            raise KeyError(f"Unknown sensor: {sensor_id}")
        return getattr(self, sensor_id)


@dataclass
class FlickerRun:
    """An open flicker, from the threshold crossing until recovery."""

    start_time: datetime
    initial_value: float
    min_value: float
    max_percent_change: float


@dataclass
class SensorChannelState:
    """Per-sensor detector memory."""

    last_value: Optional[float] = None
    active_flicker: Optional[FlickerRun] = None

    def reset(self) -> None:
        self.last_value = None
        self.active_flicker = None


@dataclass(frozen=True)
class FlickerEvent:
    """
    A closed flicker run, ready to be written to the event log.

    Attributes:
        sensor: Sensor id the flicker was seen on
        start_time: Time of the sample that opened the run
        end_time: Time of the sample that closed the run
        duration_seconds: end_time - start_time
        initial_value: Baseline value just before the excursion
        minimum_value: Lowest value seen while the run was open
        percent_change: Largest relative change seen while the run was open
    """

    sensor: str
    start_time: datetime
    end_time: datetime
    duration_seconds: float
    initial_value: float
    minimum_value: float
    percent_change: float

    def to_csv_row(self) -> List[str]:
        """Format as one row of the flicker event log."""
        return [
            self.sensor,
            format_timestamp(self.start_time),
            format_timestamp(self.end_time),
            f"{self.duration_seconds:.3f}",
            f"{self.initial_value:.3f}",
            f"{self.minimum_value:.3f}",
            f"{self.percent_change:.2f}",
        ]


@dataclass(frozen=True)
class SampleRow:
    """One row of the raw sample log."""

    timestamp: datetime
    sensor1: float
    sensor2: float
    sensor1_has_open_run: bool
    sensor2_has_open_run: bool

    def to_csv_row(self) -> List[str]:
        """Format as one row of the sample log."""
        return [
            format_timestamp(self.timestamp),
            f"{self.sensor1:.3f}",
            f"{self.sensor2:.3f}",
            _format_bool(self.sensor1_has_open_run),
            _format_bool(self.sensor2_has_open_run),
        ]


# =============================================================================
# Recipes
# =============================================================================

class ActionType(Enum):
    """Kinds of recipe steps."""

    START_FLICKER = "startFlicker"
    END_FLICKER = "endFlicker"
    CONNECT_DEVICE = "connectUSB"
    DISCONNECT_DEVICE = "disconnectUSB"
    SLEEP = "sleep"
    WAKE = "wake"
    DELAY = "delay"


# Device actions map onto a single command character
COMMAND_BYTES = {
    ActionType.CONNECT_DEVICE: CMD_CONNECT_DEVICE,
    ActionType.DISCONNECT_DEVICE: CMD_DISCONNECT_DEVICE,
    ActionType.SLEEP: CMD_SLEEP,
    ActionType.WAKE: CMD_WAKE,
}


@dataclass(frozen=True)
class Action:
    """
    One recipe step.

    ``duration`` is only meaningful (and required) for DELAY steps.

    Example:
        >>> Action(ActionType.CONNECT_DEVICE)
        >>> Action.delay(5)
    """

    type: ActionType
    duration: Optional[float] = None

    def __post_init__(self):
        if self.type is ActionType.DELAY:
            if self.duration is None or self.duration < 0:
                raise ValueError("Delay steps need a non-negative duration")
        elif self.duration is not None:
            raise ValueError(f"{self.type.value} steps take no duration")

    @classmethod
    def delay(cls, seconds: float) -> 'Action':
        return cls(ActionType.DELAY, float(seconds))

    @property
    def command(self) -> Optional[str]:
        """Command character for device actions, None otherwise."""
        return COMMAND_BYTES.get(self.type)

    @property
    def label(self) -> str:
        """Short text used by the recipe list, e.g. 'delay (5s)'."""
        if self.type is ActionType.DELAY:
            return f"{self.type.value} ({self.duration:g}s)"
        return self.type.value


@dataclass
class RecipeRunState:
    """Progress of the recipe executor."""

    running: bool = False
    current_index: Optional[int] = None
