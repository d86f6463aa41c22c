"""
Collaborator interfaces used by the detector and the recipe executor.

The concrete implementations are SerialLink (actuator), FlickerSession
(session control) and CsvEventLog (event sink). Tests substitute fakes.
"""

from typing import Protocol

from .errors import OperationResult
from .models import FlickerEvent, SampleRow


class EventSink(Protocol):
    def append_sample_row(self, row: SampleRow) -> None: ...
    def append_flicker_event(self, event: FlickerEvent) -> None: ...


class ActuatorPort(Protocol):
    def send_command(self, command: str) -> OperationResult: ...


class SessionControl(Protocol):
    @property
    def is_active(self) -> bool: ...
    def start_session(self) -> OperationResult: ...
    def stop_session(self) -> OperationResult: ...
