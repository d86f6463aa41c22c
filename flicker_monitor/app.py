"""
================================================================================
Application Entry Point
================================================================================

This module provides the main entry point for the flicker monitor.

Usage:
    python -m flicker_monitor.app [--config PATH] [--log-level DEBUG]

Or:
    from flicker_monitor.app import main
    main()
"""

import argparse
import logging
import sys
from typing import List, Optional

from PyQt6.QtWidgets import QApplication
from PyQt6.QtGui import QFont

from .config import MonitorConfig, get_default_config
from .logging_setup import QtLogHandler, configure_logging
from .main_window import MonitorWindow
from .styles.theme import FONT_NAME

LOGGER = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="flicker-monitor")
    parser.add_argument("--config", help="Path to a JSON config file.")
    parser.add_argument("--log-level", help="Logging level (overrides config).")
    parser.add_argument(
        "--json-logs", action="store_true", help="Emit console logs in JSON format."
    )
    parser.add_argument("--log-dir", help="Directory for session CSV logs.")
    return parser


def load_config(args: argparse.Namespace) -> MonitorConfig:
    """Resolve settings from the config file and command-line overrides."""
    if args.config:
        config = MonitorConfig.load(args.config)
    else:
        config = get_default_config()

    if args.log_level:
        config.log_level = args.log_level
    if args.log_dir:
        config.log_dir = args.log_dir
    return config


def main(argv: Optional[List[str]] = None) -> int:
    """
    Launch the flicker monitor.

    Returns:
        Exit code (0 for success)

    Example:
        >>> import sys
        >>> sys.exit(main())
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        config = load_config(args)
    except (OSError, ValueError) as exc:
        parser.error(f"Cannot load config: {exc}")

    issues = config.validate()
    if issues:
        parser.error("; ".join(issues))

    configure_logging(level=config.log_level, json_format=args.json_logs)

    # Debug panel receives the same records as the console
    log_handler = QtLogHandler(level=logging.getLogger().level)
    logging.getLogger().addHandler(log_handler)

    app = QApplication(sys.argv[:1])
    app.setStyle('Fusion')
    app.setFont(QFont(FONT_NAME, 10))

    window = MonitorWindow(config, log_handler=log_handler)
    window.show()
    LOGGER.info("Flicker monitor ready (logs in %s)", config.log_dir)

    return app.exec()


if __name__ == '__main__':
    sys.exit(main())
