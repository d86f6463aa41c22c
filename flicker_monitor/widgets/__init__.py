"""
================================================================================
Widgets Package - Custom UI Components
================================================================================

This package contains all custom widgets used in the application.

Modules:
    animated_button: Buttons with hover animations and switchable colors
    cards: Container cards and the per-sensor live card
    indicators: Pulsing activity dot
    log_view: Bounded debug log console
"""

from .animated_button import AnimatedButton
from .cards import FriendlyCard, SensorCard
from .indicators import PulsingDot
from .log_view import DebugLogView

__all__ = [
    'AnimatedButton',
    'FriendlyCard',
    'SensorCard',
    'PulsingDot',
    'DebugLogView',
]
