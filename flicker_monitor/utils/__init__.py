"""
================================================================================
Utils Package - Core Constants and Utilities
================================================================================

This package contains fundamental constants used throughout the application.
Keeping these centralized ensures consistency and makes the codebase easier
to maintain.

Modules:
    constants: Sensor ids, serial protocol, thresholds and timing constants
"""

from .constants import (
    # Sensors
    SENSOR_IDS,
    # Serial link
    DEFAULT_BAUDRATE,
    LINE_DELIMITER,
    FIELD_SEPARATOR,
    HEARTBEAT_COMMAND,
    POLL_INTERVAL_S,
    CMD_CONNECT_DEVICE,
    CMD_DISCONNECT_DEVICE,
    CMD_SLEEP,
    CMD_WAKE,
    # Detection and recipes
    FLICKER_THRESHOLD_PCT,
    SETTLE_INTERVAL_S,
    DEFAULT_DELAY_S,
    # Log files
    SAMPLE_LOG_HEADER,
    EVENT_LOG_HEADER,
    SAMPLE_LOG_PREFIX,
    EVENT_LOG_PREFIX,
    # Display
    PLOT_HISTORY_SIZE,
    DEBUG_HISTORY_SIZE,
)

__all__ = [
    'SENSOR_IDS',
    'DEFAULT_BAUDRATE',
    'LINE_DELIMITER',
    'FIELD_SEPARATOR',
    'HEARTBEAT_COMMAND',
    'POLL_INTERVAL_S',
    'CMD_CONNECT_DEVICE',
    'CMD_DISCONNECT_DEVICE',
    'CMD_SLEEP',
    'CMD_WAKE',
    'FLICKER_THRESHOLD_PCT',
    'SETTLE_INTERVAL_S',
    'DEFAULT_DELAY_S',
    'SAMPLE_LOG_HEADER',
    'EVENT_LOG_HEADER',
    'SAMPLE_LOG_PREFIX',
    'EVENT_LOG_PREFIX',
    'PLOT_HISTORY_SIZE',
    'DEBUG_HISTORY_SIZE',
]
