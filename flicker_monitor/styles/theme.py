"""
================================================================================
Theme - Application Visual Design System
================================================================================

This module defines the visual design system for the flicker monitor. The
design prioritizes clarity: two sensors, two colors, one glance.

Design Philosophy:
    "Simplicity is the ultimate sophistication." - Leonardo da Vinci

Color Usage:
    - Purple (Primary): Actions and highlights
    - Teal (Success): Connected / monitoring
    - Red (Danger): Disconnect, stop, flicker detected
    - Blue and orange: Sensor 1 and sensor 2 traces
"""

from typing import Dict, Tuple

# =============================================================================
# Color Palette
# =============================================================================

COLORS: Dict[str, str] = {
    # -------------------------------------------------------------------------
    # Background Colors
    # -------------------------------------------------------------------------
    'bg_main': '#f5f7fa',           # Light gray-blue - main background
    'bg_card': '#ffffff',           # Pure white - card backgrounds
    'bg_console': '#2d3436',        # Dark charcoal - debug log

    # -------------------------------------------------------------------------
    # Text Colors
    # -------------------------------------------------------------------------
    'text_dark': '#2d3436',         # Near-black - primary text
    'text_light': '#636e72',        # Medium gray - secondary text
    'text_white': '#ffffff',        # White - text on dark backgrounds
    'text_muted': '#b2bec3',        # Light gray - disabled/placeholder

    # -------------------------------------------------------------------------
    # Accent Colors
    # -------------------------------------------------------------------------
    'primary': '#6c5ce7',           # Purple - primary actions
    'success': '#00b894',           # Teal - success states
    'warning': '#fdcb6e',           # Yellow - warnings
    'danger': '#d63031',            # Red - errors/flicker
    'info': '#0984e3',              # Blue - information

    # -------------------------------------------------------------------------
    # Button States
    # -------------------------------------------------------------------------
    'btn_primary': '#6c5ce7',
    'btn_primary_hover': '#5b4cdb',
    'btn_success': '#00b894',
    'btn_success_hover': '#00a187',
    'btn_danger': '#d63031',
    'btn_danger_hover': '#c0392b',
    'btn_secondary': '#dfe6e9',
    'btn_secondary_hover': '#b2bec3',

    # -------------------------------------------------------------------------
    # Utility Colors
    # -------------------------------------------------------------------------
    'border': '#dfe6e9',
}

# =============================================================================
# Sensor Trace Colors
# =============================================================================

SENSOR_COLORS: Dict[str, Tuple[int, int, int]] = {
    'sensor1': (9, 132, 227),       # Blue
    'sensor2': (225, 112, 85),      # Orange
}

# =============================================================================
# Typography
# =============================================================================

FONT_FAMILY: str = "Segoe UI, Helvetica Neue, Arial, sans-serif"
FONT_NAME: str = "Segoe UI"
MONO_FONT_FAMILY: str = "Consolas, Menlo, monospace"


# =============================================================================
# Style Helper Functions
# =============================================================================

def get_label_style(color_key: str = 'text_dark') -> str:
    """
    Generate CSS for a plain label sitting on a card.

    Args:
        color_key: Key into COLORS for the text color

    Returns:
        CSS stylesheet string for QLabel

    Example:
        >>> label.setStyleSheet(get_label_style('text_light'))
    """
    return f"color: {COLORS[color_key]}; background: transparent; border: none;"


def get_console_style() -> str:
    """Generate CSS for the debug log panel."""
    return f"""
        QPlainTextEdit {{
            background-color: {COLORS['bg_console']};
            color: {COLORS['text_white']};
            border-radius: 8px;
            padding: 8px;
            font-family: {MONO_FONT_FAMILY};
            font-size: 11px;
        }}
    """
