"""
================================================================================
Flicker Monitor - Dual Sensor Flicker Detection
================================================================================

A desktop tool for a two-sensor board on a serial link. It shows both
readings live, detects transient dips and spikes ("flickers") against a
relative-change threshold, logs samples and flicker events to CSV, and
replays recipes of device actions (connect, disconnect, sleep, wake,
start/stop detection, delays).

Package Structure:
    flicker_monitor/
    ├── __init__.py          # This file - package entry point
    ├── app.py               # Application launcher (CLI arguments)
    ├── config.py            # MonitorConfig (JSON settings)
    ├── logging_setup.py     # Logging configuration + GUI log handler
    ├── main_window.py       # Main application window
    ├── core/                # Business logic
    │   ├── models.py            # Samples, events, recipe actions
    │   ├── errors.py            # Failure types, OperationResult
    │   ├── flicker_detector.py  # Flicker state machine
    │   ├── recipe.py            # Recipe builder and executor
    │   ├── session.py           # Detection session control
    │   ├── event_log.py         # CSV logs
    │   └── serial_link.py       # Hardware communication
    ├── styles/              # Visual design system
    ├── utils/               # Constants
    └── widgets/             # Custom UI components

Design Philosophy:
    "Simplicity is the ultimate sophistication." - Leonardo da Vinci

Usage:
    # Launch the application
    python -m flicker_monitor.app

    # Or from Python
    from flicker_monitor import main
    main()
"""

__version__ = "1.0.0"


def main(argv=None) -> int:
    """Launch the GUI (imported lazily so the core works without a display)."""
    from .app import main as _main
    return _main(argv)


__all__ = [
    'main',
]
