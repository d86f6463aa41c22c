"""
================================================================================
Errors - Failure Types and Boundary Results
================================================================================

Operations that touch the outside world (serial port, device commands, log
files) never raise at their boundary. They return an OperationResult that the
caller can show to the user. The exception types below are used inside those
operations and by the recipe executor to abort a recipe.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Type


class MonitorError(RuntimeError):
    """Base class for recoverable monitor failures."""


class PortConnectionError(MonitorError):
    """Serial port unavailable, closed, or failed to open."""


class CommandError(MonitorError):
    """Writing a command to the device failed."""


class SessionError(MonitorError):
    """Starting or stopping a detection session failed."""


class RecipeAbort(MonitorError):
    """A recipe step failed and the rest of the recipe was skipped."""

    def __init__(self, reason: str, index: Optional[int] = None, action=None):
        super().__init__(reason)
        self.reason = reason
        self.index = index
        self.action = action


@dataclass(frozen=True)
class OperationResult:
    """
    Outcome of a boundary operation.

    Attributes:
        success: True when the operation took effect
        error: Human-readable reason when it did not
        detail: Extra values for the caller (e.g. log file paths)

    Example:
        >>> result = link.send_command('c')
        >>> if not result:
        ...     print(result.error)
    """

    success: bool
    error: Optional[str] = None
    detail: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def ok(cls, **detail) -> 'OperationResult':
        return cls(True, None, detail)

    @classmethod
    def fail(cls, reason: str) -> 'OperationResult':
        return cls(False, str(reason) or "Unknown error")

    def __bool__(self) -> bool:
        return self.success

    def raise_for_failure(self, exc_type: Type[MonitorError] = MonitorError) -> None:
        """Raise ``exc_type`` carrying the reason if the operation failed."""
        if not self.success:
            raise exc_type(self.error)
