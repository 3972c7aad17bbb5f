"""
oledash Configuration Package

Modular configuration split by concern:
- display: panel geometry, refresh rate, transitions, hardware sink pins
- widgets: defaults applied to widget configurations
- system: logging, threading and external service settings

Typed records (WidgetConfig, DisplayConfig, ...) live in model and are
built from JSON by load_config().

    from oledash.config import display, widgets
    print(display.WIDTH, widgets.GRAPH_HISTORY)
"""

from . import display
from . import widgets
from . import system
from .model import (
    PositionConfig, StyleConfig, ColorSettings, TextSettings, BarSettings,
    GraphSettings, GaugeSettings, ScrollSettings, AutoHideSettings,
    WidgetConfig, TransitionSettings, DisplayConfig, DashboardConfig,
)
from .loader import load_config

# =============================================================================
# Flat Exports
# =============================================================================
DISPLAY_WIDTH = display.WIDTH
DISPLAY_HEIGHT = display.HEIGHT
DISPLAY_REFRESH_RATE_MS = display.REFRESH_RATE_MS
LOG_LEVEL = system.LOG_LEVEL
