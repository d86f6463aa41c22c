"""
================================================================================
Core Package - Detection, Recipes and Hardware Communication
================================================================================

This package contains the core functionality of the application: the
flicker detection state machine, the recipe executor, session control,
CSV logging and the serial link to the sensor board.

Design Philosophy:
    "The people who are crazy enough to think they can change the world
     are the ones who do." - Steve Jobs

Only serial_link depends on Qt (for its reader thread); everything else is
plain Python and can be driven directly from tests or scripts.

Modules:
    models: Samples, flicker runs/events and recipe actions
    errors: Failure types and OperationResult
    flicker_detector: Streaming flicker detection
    recipe: Recipe builder and sequential executor
    session: Detection session start/stop
    event_log: CSV sample and event logs
    serial_link: Serial port communication with the sensor board
"""

from .models import (
    Action, ActionType, FlickerEvent, FlickerRun, RecipeRunState,
    Sample, SampleRow, SensorChannelState,
)
from .errors import (
    CommandError, MonitorError, OperationResult, PortConnectionError,
    RecipeAbort, SessionError,
)
from .flicker_detector import FlickerDetector
from .recipe import Recipe, RecipeExecutor, RecipeResult
from .session import FlickerSession
from .event_log import CsvEventLog
from .serial_link import SerialLink, list_ports, parse_sample_line

__all__ = [
    'Action',
    'ActionType',
    'FlickerEvent',
    'FlickerRun',
    'RecipeRunState',
    'Sample',
    'SampleRow',
    'SensorChannelState',
    'CommandError',
    'MonitorError',
    'OperationResult',
    'PortConnectionError',
    'RecipeAbort',
    'SessionError',
    'FlickerDetector',
    'Recipe',
    'RecipeExecutor',
    'RecipeResult',
    'FlickerSession',
    'CsvEventLog',
    'SerialLink',
    'list_ports',
    'parse_sample_line',
]
