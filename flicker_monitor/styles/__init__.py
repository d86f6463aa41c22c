"""
================================================================================
Styles Package - Visual Design System
================================================================================

This package defines the visual language of the application, including
colors, typography, and component styles.

Modules:
    theme: Color palette, fonts, and sensor trace colors
"""

from .theme import (
    # Color palette
    COLORS,
    SENSOR_COLORS,
    # Typography
    FONT_FAMILY,
    FONT_NAME,
    MONO_FONT_FAMILY,
    # Helper functions
    get_label_style,
    get_console_style,
)

__all__ = [
    'COLORS',
    'SENSOR_COLORS',
    'FONT_FAMILY',
    'FONT_NAME',
    'MONO_FONT_FAMILY',
    'get_label_style',
    'get_console_style',
]
