"""
================================================================================
Animated Button Widget
================================================================================

A push button that fades between its base and hover colors, and can switch
color scheme at runtime (e.g. "Connect" in teal becomes "Disconnect" in red).

Design Philosophy:
    "Details matter, it's worth waiting to get it right." - Steve Jobs
"""

from PyQt6.QtWidgets import QPushButton, QGraphicsDropShadowEffect
from PyQt6.QtCore import Qt, QEvent, QPropertyAnimation, QEasingCurve, pyqtProperty
from PyQt6.QtGui import QFont, QColor

from ..styles.theme import COLORS, FONT_FAMILY, FONT_NAME


class AnimatedButton(QPushButton):
    """
    A button with a smooth hover color transition.

    Attributes:
        color_scheme: The color scheme ('primary', 'success', 'danger', 'secondary')

    Example:
        >>> btn = AnimatedButton("Connect", "success")
        >>> btn.clicked.connect(my_handler)
        >>> btn.set_color_scheme("danger")
    """

    def __init__(self, text: str, color_scheme: str = "primary", parent=None):
        """
        Initialize the animated button.

        Args:
            text: Button label text
            color_scheme: One of 'primary', 'success', 'danger', 'secondary'
            parent: Parent widget (optional)
        """
        super().__init__(text, parent)

        self.color_scheme = color_scheme
        self._bg_color = QColor(COLORS[f'btn_{color_scheme}'])

        self.setFont(QFont(FONT_NAME, 10, QFont.Weight.Bold))
        self.setCursor(Qt.CursorShape.PointingHandCursor)
        self.setMinimumHeight(38)

        shadow = QGraphicsDropShadowEffect()
        shadow.setBlurRadius(12)
        shadow.setColor(QColor(0, 0, 0, 40))
        shadow.setOffset(0, 3)
        self.setGraphicsEffect(shadow)

        self._color_anim = QPropertyAnimation(self, b"bgColor")
        self._color_anim.setDuration(150)
        self._color_anim.setEasingCurve(QEasingCurve.Type.OutCubic)

        self._update_style()

    def _update_style(self) -> None:
        """Update the stylesheet from the current background color."""
        if self.isEnabled():
            bg = self._bg_color.name()
            text_color = COLORS['text_white'] if self.color_scheme != 'secondary' else COLORS['text_dark']
        else:
            bg = COLORS['border']
            text_color = COLORS['text_muted']

        self.setStyleSheet(f"""
            QPushButton {{
                background-color: {bg};
                color: {text_color};
                border: none;
                border-radius: 10px;
                padding: 8px 16px;
                font-family: {FONT_FAMILY};
                font-weight: bold;
                font-size: 12px;
            }}
        """)

    @pyqtProperty(QColor)
    def bgColor(self) -> QColor:
        """Get the current background color."""
        return self._bg_color

    @bgColor.setter
    def bgColor(self, value: QColor) -> None:
        """Set the background color and update style."""
        self._bg_color = value
        self._update_style()

    def _fade_to(self, color_key: str) -> None:
        self._color_anim.stop()
        self._color_anim.setStartValue(self._bg_color)
        self._color_anim.setEndValue(QColor(COLORS[color_key]))
        self._color_anim.start()

    def enterEvent(self, event) -> None:
        """Handle mouse enter - transition to hover color."""
        self._fade_to(f'btn_{self.color_scheme}_hover')
        super().enterEvent(event)

    def leaveEvent(self, event) -> None:
        """Handle mouse leave - transition back to base color."""
        self._fade_to(f'btn_{self.color_scheme}')
        super().leaveEvent(event)

    def changeEvent(self, event) -> None:
        """Restyle when the button is enabled or disabled."""
        super().changeEvent(event)
        if event.type() == QEvent.Type.EnabledChange:
            self._update_style()

    def set_color_scheme(self, scheme: str) -> None:
        """
        Change the button's color scheme.

        Args:
            scheme: New color scheme ('primary', 'success', 'danger', 'secondary')
        """
        self._color_anim.stop()
        self.color_scheme = scheme
        self._bg_color = QColor(COLORS[f'btn_{scheme}'])
        self._update_style()
