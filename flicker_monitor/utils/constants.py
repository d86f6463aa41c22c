"""
================================================================================
Constants - Application-Wide Configuration Values
================================================================================

This module defines all constants used throughout the flicker monitor.
Centralizing these values ensures consistency and simplifies configuration
changes.

Design Philosophy:
    "The details are not the details. They make the design." - Charles Eames
"""

# =============================================================================
# Sensor Channels
# =============================================================================

# The monitor always reads exactly two sensors, delivered as one pair per line
SENSOR_IDS: tuple = ("sensor1", "sensor2")

# =============================================================================
# Serial Link
# =============================================================================

DEFAULT_BAUDRATE: int = 115200

# Lines from the firmware look like "123.45,678.90\r\n" (the \r is stripped)
LINE_DELIMITER: bytes = b"\n"
FIELD_SEPARATOR: str = ","

# Heartbeat poll - the firmware only reports a reading after receiving "s"
HEARTBEAT_COMMAND: str = "s"
POLL_INTERVAL_S: float = 0.1

# Single-character device commands
CMD_CONNECT_DEVICE: str = "c"
CMD_DISCONNECT_DEVICE: str = "d"
CMD_SLEEP: str = "s"
CMD_WAKE: str = "w"

# =============================================================================
# Flicker Detection
# =============================================================================

# Relative change (percent) that opens and closes a flicker run
FLICKER_THRESHOLD_PCT: float = 1.0

# =============================================================================
# Recipes
# =============================================================================

# Pause after every recipe step so device/state changes can propagate
SETTLE_INTERVAL_S: float = 0.1

# Duration used by the "Add Delay" button
DEFAULT_DELAY_S: float = 5.0

# =============================================================================
# Logging Files
# =============================================================================

SAMPLE_LOG_HEADER: list = [
    "Time", "Sensor1", "Sensor2", "Active_Flicker_S1", "Active_Flicker_S2",
]
EVENT_LOG_HEADER: list = [
    "Sensor", "Start Time", "End Time", "Duration (seconds)",
    "Initial Value", "Minimum Value", "Percent Change",
]

SAMPLE_LOG_PREFIX: str = "sensor_log"
EVENT_LOG_PREFIX: str = "flicker_events"

# =============================================================================
# Display
# =============================================================================

# 300 points at ~10 samples/sec gives roughly 30 seconds of visible history
PLOT_HISTORY_SIZE: int = 300

# Debug panel keeps only the most recent messages
DEBUG_HISTORY_SIZE: int = 100
