from __future__ import annotations

import os
import pathlib

import pytest

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from PyQt6.QtWidgets import QApplication  # noqa: E402

from flicker_monitor.config import MonitorConfig  # noqa: E402
from flicker_monitor.core.models import Action  # noqa: E402
from flicker_monitor.main_window import MonitorWindow  # noqa: E402


@pytest.fixture(scope="module")
def qapp() -> QApplication:
    return QApplication.instance() or QApplication([])


@pytest.fixture()
def window(qapp, tmp_path: pathlib.Path):
    win = MonitorWindow(MonitorConfig(log_dir=str(tmp_path)))
    win.recipe_executor._sleep = lambda seconds: None
    yield win
    win.close()


def test_port_controls_locked_while_recipe_runs(window) -> None:
    seen = []
    window.recipe_executor.on_step = lambda index, action: seen.append(
        (window.connect_btn.isEnabled(), window.refresh_btn.isEnabled())
    )
    window._add_recipe_step(Action.delay(1))
    window._add_recipe_step(Action.delay(2))

    window._run_recipe()

    assert seen == [(False, False), (False, False)]
    assert window.connect_btn.isEnabled()
    assert window.refresh_btn.isEnabled()
    assert window.status_bar.currentMessage() == "Recipe complete"
