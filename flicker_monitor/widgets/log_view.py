"""
================================================================================
Debug Log View
================================================================================

Read-only console showing the most recent log messages. Older lines are
dropped once the history limit is reached.
"""

from PyQt6.QtWidgets import QPlainTextEdit
from PyQt6.QtGui import QTextCursor

from ..styles.theme import get_console_style
from ..utils.constants import DEBUG_HISTORY_SIZE


class DebugLogView(QPlainTextEdit):
    """
    Bounded, auto-scrolling log console.

    Example:
        >>> view = DebugLogView(max_entries=100)
        >>> qt_log_handler.emitter.message.connect(view.append_message)
    """

    def __init__(self, max_entries: int = DEBUG_HISTORY_SIZE, parent=None):
        super().__init__(parent)
        self.setReadOnly(True)
        self.setMaximumBlockCount(max_entries)
        self.setStyleSheet(get_console_style())
        self.setMinimumHeight(140)

    def append_message(self, message: str) -> None:
        """Append one line and keep the newest line visible."""
        self.appendPlainText(message)
        self.moveCursor(QTextCursor.MoveOperation.End)
