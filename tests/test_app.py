from __future__ import annotations

import json
import logging
import pathlib

from flicker_monitor.app import build_parser, load_config
from flicker_monitor.config import MonitorConfig
from flicker_monitor.logging_setup import _JsonFormatter


def test_cli_overrides_config_file(tmp_path: pathlib.Path) -> None:
    config_path = tmp_path / "config.json"
    MonitorConfig(baudrate=57600, log_level="WARNING").save(str(config_path))

    args = build_parser().parse_args([
        "--config", str(config_path),
        "--log-level", "DEBUG",
        "--log-dir", str(tmp_path / "logs"),
    ])
    config = load_config(args)

    assert config.baudrate == 57600
    assert config.log_level == "DEBUG"
    assert config.log_dir == str(tmp_path / "logs")


def test_json_formatter_emits_one_object_per_record() -> None:
    record = logging.LogRecord(
        "flicker_monitor.core", logging.INFO, __file__, 1, "Command sent: %s", ("c",), None
    )

    payload = json.loads(_JsonFormatter().format(record))

    assert payload["level"] == "INFO"
    assert payload["name"] == "flicker_monitor.core"
    assert payload["msg"] == "Command sent: c"
