from __future__ import annotations

import datetime as dt
from typing import Iterable, List, Optional

import pytest

from flicker_monitor.core.errors import OperationResult
from flicker_monitor.core.flicker_detector import FlickerDetector
from flicker_monitor.core.models import Sample
from flicker_monitor.core.recipe import RecipeExecutor

T0 = dt.datetime(2026, 1, 5, 9, 30, 0)
SAMPLE_PERIOD = dt.timedelta(milliseconds=100)


def make_samples(sensor1: Iterable[float], sensor2: Optional[Iterable[float]] = None) -> List[Sample]:
    """Samples 100 ms apart; sensor2 defaults to a flat 10.0."""
    values1 = list(sensor1)
    values2 = list(sensor2) if sensor2 is not None else [10.0] * len(values1)
    return [
        Sample(T0 + i * SAMPLE_PERIOD, float(a), float(b))
        for i, (a, b) in enumerate(zip(values1, values2))
    ]


class RecordingSink:
    def __init__(self) -> None:
        self.rows = []
        self.events = []

    def append_sample_row(self, row) -> None:
        self.rows.append(row)

    def append_flicker_event(self, event) -> None:
        self.events.append(event)


class FakeActuator:
    """Records commands; fails or raises for selected command characters."""

    def __init__(self, journal: Optional[list] = None) -> None:
        self.commands: List[str] = []
        self.failures = {}
        self.raises = {}
        self.journal = journal if journal is not None else []

    def send_command(self, command: str) -> OperationResult:
        self.journal.append(f"cmd:{command}")
        if command in self.raises:
            raise self.raises[command]
        if command in self.failures:
            return OperationResult.fail(self.failures[command])
        self.commands.append(command)
        return OperationResult.ok(command=command)


class FakeSession:
    def __init__(self, journal: Optional[list] = None) -> None:
        self.active = False
        self.start_calls = 0
        self.stop_calls = 0
        self.start_result = OperationResult.ok()
        self.stop_result = OperationResult.ok()
        self.journal = journal if journal is not None else []

    @property
    def is_active(self) -> bool:
        return self.active

    def start_session(self) -> OperationResult:
        self.journal.append("start")
        self.start_calls += 1
        if self.start_result:
            self.active = True
        return self.start_result

    def stop_session(self) -> OperationResult:
        self.journal.append("stop")
        self.stop_calls += 1
        if self.stop_result:
            self.active = False
        return self.stop_result


class RecordingSleep:
    def __init__(self, journal: Optional[list] = None) -> None:
        self.calls: List[float] = []
        self.journal = journal if journal is not None else []

    def __call__(self, seconds: float) -> None:
        self.journal.append(f"sleep:{seconds:g}")
        self.calls.append(seconds)


class FakeLink:
    def __init__(self, connected: bool = True) -> None:
        self.is_connected = connected


@pytest.fixture()
def sink() -> RecordingSink:
    return RecordingSink()


@pytest.fixture()
def detector(sink: RecordingSink) -> FlickerDetector:
    detector = FlickerDetector(sink=sink)
    detector.start()
    return detector


@pytest.fixture()
def journal() -> list:
    return []


@pytest.fixture()
def actuator(journal: list) -> FakeActuator:
    return FakeActuator(journal)


@pytest.fixture()
def session(journal: list) -> FakeSession:
    return FakeSession(journal)


@pytest.fixture()
def sleeper(journal: list) -> RecordingSleep:
    return RecordingSleep(journal)


@pytest.fixture()
def executor(actuator: FakeActuator, session: FakeSession, sleeper: RecordingSleep) -> RecipeExecutor:
    return RecipeExecutor(actuator, session, sleep=sleeper, settle_interval=0.1)
