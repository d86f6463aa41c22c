"""
================================================================================
Card Widgets - Container Components
================================================================================

Card widgets provide visual grouping for related UI elements: one card per
control area, and one SensorCard per sensor channel.
"""

from PyQt6.QtWidgets import (
    QFrame, QWidget, QVBoxLayout, QLabel, QGraphicsDropShadowEffect
)
from PyQt6.QtCore import Qt
from PyQt6.QtGui import QFont, QColor

from ..styles.theme import COLORS, FONT_NAME, get_label_style


class FriendlyCard(QFrame):
    """
    A card widget with shadow and rounded corners.

    Example:
        >>> card = FriendlyCard("Connection")
        >>> card.add_widget(my_button)
        >>> card.add_layout(my_horizontal_layout)
    """

    def __init__(self, title: str = "", parent=None):
        """
        Initialize the card widget.

        Args:
            title: Optional title displayed at the top of the card
            parent: Parent widget (optional)
        """
        super().__init__(parent)
        self.title = title

        self.setStyleSheet(f"""
            FriendlyCard {{
                background-color: {COLORS['bg_card']};
                border-radius: 14px;
                border: 1px solid {COLORS['border']};
            }}
        """)

        # Drop shadow for depth perception
        shadow = QGraphicsDropShadowEffect()
        shadow.setBlurRadius(20)
        shadow.setColor(QColor(0, 0, 0, 25))
        shadow.setOffset(0, 4)
        self.setGraphicsEffect(shadow)

        self.main_layout = QVBoxLayout(self)
        self.main_layout.setContentsMargins(16, 16, 16, 16)
        self.main_layout.setSpacing(12)

        if title:
            title_label = QLabel(title)
            title_label.setFont(QFont(FONT_NAME, 13, QFont.Weight.Bold))
            title_label.setStyleSheet(get_label_style('text_dark'))
            self.main_layout.addWidget(title_label)

    def add_widget(self, widget: QWidget, stretch: int = 0) -> None:
        """Add a widget to the card's layout."""
        self.main_layout.addWidget(widget, stretch)

    def add_layout(self, layout) -> None:
        """Add a layout (QHBoxLayout, QVBoxLayout, ...) to the card's layout."""
        self.main_layout.addLayout(layout)


class SensorCard(FriendlyCard):
    """
    Live display for one sensor channel.

    Shows the latest reading, the detection status and the number of
    flickers seen since the session started.

    Example:
        >>> card = SensorCard("Sensor 1", "#0984e3")
        >>> card.set_value(101.25)
        >>> card.set_status("Flicker Detected", flicker=True)
        >>> card.set_count(3)
    """

    def __init__(self, title: str, color: str, parent=None):
        """
        Initialize the sensor card.

        Args:
            title: Header text, e.g. "Sensor 1"
            color: Accent color for the live value
            parent: Parent widget (optional)
        """
        super().__init__(title, parent)
        self.color = color

        self.value_label = QLabel("0.00")
        self.value_label.setFont(QFont(FONT_NAME, 28, QFont.Weight.Bold))
        self.value_label.setStyleSheet(f"color: {color}; background: transparent; border: none;")
        self.value_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self.add_widget(self.value_label)

        self.status_label = QLabel("Idle")
        self.status_label.setFont(QFont(FONT_NAME, 11))
        self.status_label.setStyleSheet(get_label_style('text_light'))
        self.status_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self.add_widget(self.status_label)

        self.count_label = QLabel("Flicker Count: 0")
        self.count_label.setFont(QFont(FONT_NAME, 11, QFont.Weight.Bold))
        self.count_label.setStyleSheet(get_label_style('text_dark'))
        self.count_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self.add_widget(self.count_label)

    def set_value(self, value: float) -> None:
        self.value_label.setText(f"{value:.2f}")

    def set_status(self, text: str, flicker: bool = False) -> None:
        self.status_label.setText(text)
        self.status_label.setStyleSheet(get_label_style('danger' if flicker else 'text_light'))

    def set_count(self, count: int) -> None:
        self.count_label.setText(f"Flicker Count: {count}")
