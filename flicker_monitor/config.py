"""
================================================================================
Monitor Configuration Module
================================================================================

Manages the user-adjustable settings of the flicker monitor.

Features:
- Serial link settings (baud rate, heartbeat poll interval, write timeout)
- Detection threshold and recipe timing
- Log directory for session CSV files
- Configuration save/load to JSON
- Validation
================================================================================
"""

import json
import logging
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import List, Optional

from .utils.constants import (
    DEFAULT_BAUDRATE, POLL_INTERVAL_S, SETTLE_INTERVAL_S,
    FLICKER_THRESHOLD_PCT, DEFAULT_DELAY_S, DEBUG_HISTORY_SIZE,
)

LOGGER = logging.getLogger(__name__)


def _default_log_dir() -> str:
    return str(Path.home() / ".flicker_monitor" / "logs")


@dataclass
class MonitorConfig:
    """
    Complete settings for one monitor installation.

    Attributes:
        baudrate: Serial speed
        poll_interval_s: Seconds between heartbeat polls
        write_timeout_s: Seconds to wait for a command write (None = no limit)
        flicker_threshold_pct: Relative change that opens/closes a flicker
        settle_interval_s: Pause after each recipe step
        default_delay_s: Duration of the "Add Delay" recipe step
        log_dir: Directory for session CSV files
        debug_history: Number of messages kept in the debug panel
        log_level: Logging level name
        last_modified: Timestamp of last modification
    """

    baudrate: int = DEFAULT_BAUDRATE
    poll_interval_s: float = POLL_INTERVAL_S
    write_timeout_s: Optional[float] = None
    flicker_threshold_pct: float = FLICKER_THRESHOLD_PCT
    settle_interval_s: float = SETTLE_INTERVAL_S
    default_delay_s: float = DEFAULT_DELAY_S
    log_dir: str = field(default_factory=_default_log_dir)
    debug_history: int = DEBUG_HISTORY_SIZE
    log_level: str = "INFO"
    last_modified: str = field(default_factory=lambda: datetime.now().isoformat())

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "baudrate": self.baudrate,
            "poll_interval_s": self.poll_interval_s,
            "write_timeout_s": self.write_timeout_s,
            "flicker_threshold_pct": self.flicker_threshold_pct,
            "settle_interval_s": self.settle_interval_s,
            "default_delay_s": self.default_delay_s,
            "log_dir": self.log_dir,
            "debug_history": self.debug_history,
            "log_level": self.log_level,
            "last_modified": self.last_modified,
        }

    @classmethod
    def from_dict(cls, data: dict) -> 'MonitorConfig':
        """Create from dictionary, falling back to defaults for missing keys."""
        defaults = cls()
        write_timeout = data.get("write_timeout_s", defaults.write_timeout_s)
        return cls(
            baudrate=int(data.get("baudrate", defaults.baudrate)),
            poll_interval_s=float(data.get("poll_interval_s", defaults.poll_interval_s)),
            write_timeout_s=float(write_timeout) if write_timeout is not None else None,
            flicker_threshold_pct=float(
                data.get("flicker_threshold_pct", defaults.flicker_threshold_pct)
            ),
            settle_interval_s=float(data.get("settle_interval_s", defaults.settle_interval_s)),
            default_delay_s=float(data.get("default_delay_s", defaults.default_delay_s)),
            log_dir=str(data.get("log_dir", defaults.log_dir)),
            debug_history=int(data.get("debug_history", defaults.debug_history)),
            log_level=str(data.get("log_level", defaults.log_level)),
            last_modified=data.get("last_modified", defaults.last_modified),
        )

    def save(self, filepath: str):
        """Save configuration to JSON file."""
        self.last_modified = datetime.now().isoformat()
        Path(filepath).parent.mkdir(parents=True, exist_ok=True)
        with open(filepath, 'w') as f:
            json.dump(self.to_dict(), f, indent=2)

    @classmethod
    def load(cls, filepath: str) -> 'MonitorConfig':
        """Load configuration from JSON file."""
        with open(filepath, 'r') as f:
            data = json.load(f)
        return cls.from_dict(data)

    def validate(self) -> List[str]:
        """
        Validate configuration and return list of issues.

        Returns:
            List of validation error messages (empty if valid)
        """
        issues = []

        if self.baudrate <= 0:
            issues.append(f"Baud rate must be positive, got {self.baudrate}")
        if self.poll_interval_s <= 0:
            issues.append("Poll interval must be positive")
        if self.write_timeout_s is not None and self.write_timeout_s <= 0:
            issues.append("Write timeout must be positive or unset")
        if self.flicker_threshold_pct <= 0:
            issues.append("Flicker threshold must be positive")
        if self.settle_interval_s < 0:
            issues.append("Settle interval cannot be negative")
        if self.default_delay_s < 0:
            issues.append("Default delay cannot be negative")
        if self.debug_history < 1:
            issues.append("Debug history must keep at least one message")

        return issues


# Default configuration file location
DEFAULT_CONFIG_PATH = Path.home() / ".flicker_monitor" / "config.json"


def get_default_config() -> MonitorConfig:
    """Get default configuration (loads from file if exists, otherwise creates new)."""
    if DEFAULT_CONFIG_PATH.exists():
        try:
            return MonitorConfig.load(str(DEFAULT_CONFIG_PATH))
        except (OSError, ValueError) as e:
            LOGGER.warning("Error loading default config: %s", e)

    return MonitorConfig()


def save_default_config(config: MonitorConfig):
    """Save as default configuration."""
    config.save(str(DEFAULT_CONFIG_PATH))
