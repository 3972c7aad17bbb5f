"""
Rendering pipelines: format tokens, metric strategies and the composite
token renderer.
"""

from .tokens import Token, TokenType, parse_format_tokens, join_tokens, find_blink_target
from .formatter import TokenFormatter
from .display_mode import (
    DisplayMode, BarConfig, GraphConfig, GaugeConfig, TextConfig, MetricRenderer, MetricData,
    DualBarConfig, DualGraphConfig, DualGaugeConfig, DualMetricRenderer, DualMetricData,
)
from .strategies import get_strategy, get_dual_strategy, format_value
from .config_helper import ConfigHelper
from .composite import CompositeTokenRenderer, TokenResolver, ICON_GAP, align_offset
from .scrolling import draw_scrolling_text
