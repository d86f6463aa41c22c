"""
================================================================================
Indicator Widgets - Status Display
================================================================================

A small dot that pulses while something is running (flicker detection,
a recipe) and sits still otherwise.

Design Philosophy:
    "Make it simple. Make it memorable." - Leo Burnett
"""

from PyQt6.QtWidgets import QWidget
from PyQt6.QtCore import Qt, QPropertyAnimation, QEasingCurve, pyqtProperty
from PyQt6.QtGui import QPainter, QColor, QBrush

from ..styles.theme import COLORS


class PulsingDot(QWidget):
    """
    A pulsing dot indicator for active status display.

    Example:
        >>> dot = PulsingDot(COLORS['success'])
        >>> dot.start()               # Begin pulsing
        >>> dot.set_color("#d63031")  # e.g. flicker in progress
        >>> dot.stop()                # Stop and dim
    """

    def __init__(self, color: str = COLORS['success'], parent=None):
        """
        Initialize the pulsing dot.

        Args:
            color: The dot color while active (hex string)
            parent: Parent widget (optional)
        """
        super().__init__(parent)
        self.color = color
        self._pulse = 1.0
        self._active = False

        self.setFixedSize(20, 20)

        self._pulse_anim = QPropertyAnimation(self, b"pulse")
        self._pulse_anim.setDuration(800)
        self._pulse_anim.setStartValue(0.5)
        self._pulse_anim.setEndValue(1.0)
        self._pulse_anim.setEasingCurve(QEasingCurve.Type.InOutSine)
        self._pulse_anim.setLoopCount(-1)  # Loop indefinitely

    @pyqtProperty(float)
    def pulse(self) -> float:
        """Get the current pulse value (0.5 to 1.0)."""
        return self._pulse

    @pulse.setter
    def pulse(self, value: float) -> None:
        """Set the pulse value and trigger repaint."""
        self._pulse = value
        self.update()

    def set_color(self, color: str) -> None:
        self.color = color
        self.update()

    def start(self) -> None:
        """Start the pulsing animation."""
        self._active = True
        self._pulse_anim.start()

    def stop(self) -> None:
        """Stop the animation and show the dot as idle."""
        self._active = False
        self._pulse_anim.stop()
        self._pulse = 1.0
        self.update()

    def paintEvent(self, event) -> None:
        """Paint the dot, with a glow while active."""
        painter = QPainter(self)
        painter.setRenderHint(QPainter.RenderHint.Antialiasing)
        painter.setPen(Qt.PenStyle.NoPen)

        if not self._active:
            painter.setBrush(QBrush(QColor(COLORS['text_muted'])))
            painter.drawEllipse(6, 6, 8, 8)
            return

        # Outer glow (size and opacity vary with pulse)
        glow = QColor(self.color)
        glow.setAlpha(int(100 * self._pulse))
        painter.setBrush(QBrush(glow))
        size = 8 + int(6 * self._pulse)
        x = (self.width() - size) // 2
        y = (self.height() - size) // 2
        painter.drawEllipse(x, y, size, size)

        # Center dot (constant size)
        painter.setBrush(QBrush(QColor(self.color)))
        painter.drawEllipse(7, 7, 6, 6)
