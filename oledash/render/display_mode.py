"""
Display modes and the renderer records shared by metric widgets.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from PIL import Image

from ..bitmap import draw, text as bitmap_text
from ..bitmap.canvas import Rect
from ..bitmap.text import FontFace
from ..config import widgets as widget_defaults
from ..errors import ConfigurationError


class DisplayMode(Enum):
    TEXT = "text"
    BAR = "bar"
    GRAPH = "graph"
    GAUGE = "gauge"

    @classmethod
    def parse(cls, value: Optional[str]) -> 'DisplayMode':
        """Mode from its config name; empty means text, anything unknown is an error."""
        if not value:
            return cls.TEXT
        try:
            return cls(value)
        except ValueError:
            raise ConfigurationError(f"unknown display mode '{value}'") from None


@dataclass
class BarConfig:
    direction: str = widget_defaults.BAR_DIRECTION
    border: bool = widget_defaults.BAR_BORDER
    color: int = widget_defaults.BAR_FILL


@dataclass
class GraphConfig:
    fill_color: int = widget_defaults.GRAPH_FILL  # -1 = no fill
    line_color: int = widget_defaults.GRAPH_LINE
    history_len: int = widget_defaults.GRAPH_HISTORY


@dataclass
class GaugeConfig:
    arc_color: int = widget_defaults.GAUGE_ARC
    needle_color: int = widget_defaults.GAUGE_NEEDLE
    show_ticks: bool = widget_defaults.GAUGE_SHOW_TICKS
    ticks_color: int = widget_defaults.GAUGE_TICKS


@dataclass
class TextConfig:
    font: Optional[FontFace] = None
    h_align: str = widget_defaults.TEXT_H_ALIGN
    v_align: str = widget_defaults.TEXT_V_ALIGN
    padding: int = widget_defaults.PADDING
    color: int = 255


@dataclass
class MetricRenderer:
    """Drawing settings for single-value widgets, one record per mode."""
    bar: BarConfig = field(default_factory=BarConfig)
    graph: GraphConfig = field(default_factory=GraphConfig)
    gauge: GaugeConfig = field(default_factory=GaugeConfig)
    text: TextConfig = field(default_factory=TextConfig)

    def render_bar(self, img: Image.Image, rect: Rect, value: float):
        x, y, w, h = rect
        if self.bar.direction == 'vertical':
            draw.draw_vertical_bar(img, x, y, w, h, value, self.bar.color, self.bar.border)
        else:
            draw.draw_horizontal_bar(img, x, y, w, h, value, self.bar.color, self.bar.border)

    def render_graph(self, img: Image.Image, rect: Rect, history: List[float]):
        x, y, w, h = rect
        draw.draw_graph(img, x, y, w, h, history, self.graph.history_len,
                        self.graph.fill_color, self.graph.line_color)

    def render_gauge(self, img: Image.Image, rect: Rect, value: float):
        x, y, w, h = rect
        draw.draw_gauge(img, x, y, w, h, value, self.gauge.arc_color, self.gauge.needle_color,
                        self.gauge.show_ticks, self.gauge.ticks_color)

    def render_text(self, img: Image.Image, text: str):
        if self.text.font is None:
            return
        bitmap_text.draw_aligned_text(img, text, self.text.font, self.text.h_align,
                                      self.text.v_align, self.text.padding, self.text.color)


@dataclass
class DualBarConfig:
    direction: str = widget_defaults.BAR_DIRECTION
    border: bool = widget_defaults.BAR_BORDER
    primary_color: int = widget_defaults.DUAL_PRIMARY_COLOR
    secondary_color: int = widget_defaults.DUAL_SECONDARY_COLOR


@dataclass
class DualGraphConfig:
    history_len: int = widget_defaults.GRAPH_HISTORY
    primary_fill: int = -1
    primary_line: int = widget_defaults.DUAL_PRIMARY_COLOR
    secondary_fill: int = -1
    secondary_line: int = widget_defaults.DUAL_SECONDARY_COLOR


@dataclass
class DualGaugeConfig:
    primary_arc: int = widget_defaults.DUAL_PRIMARY_COLOR
    primary_needle: int = widget_defaults.DUAL_PRIMARY_NEEDLE
    secondary_arc: int = widget_defaults.DUAL_SECONDARY_COLOR
    secondary_needle: int = widget_defaults.DUAL_SECONDARY_NEEDLE


@dataclass
class DualMetricRenderer:
    """Drawing settings for two-value (I/O) widgets."""
    bar: DualBarConfig = field(default_factory=DualBarConfig)
    graph: DualGraphConfig = field(default_factory=DualGraphConfig)
    gauge: DualGaugeConfig = field(default_factory=DualGaugeConfig)
    text: TextConfig = field(default_factory=TextConfig)

    def render_bar(self, img: Image.Image, rect: Rect, primary: float, secondary: float):
        x, y, w, h = rect
        if self.bar.direction == 'vertical':
            draw.draw_dual_vertical_bar(img, x, y, w, h, primary, secondary,
                                        self.bar.primary_color, self.bar.secondary_color, self.bar.border)
        else:
            draw.draw_dual_horizontal_bar(img, x, y, w, h, primary, secondary,
                                          self.bar.primary_color, self.bar.secondary_color, self.bar.border)

    def render_graph(self, img: Image.Image, rect: Rect, primary: List[float], secondary: List[float]):
        x, y, w, h = rect
        g = self.graph
        draw.draw_dual_graph(img, x, y, w, h, primary, secondary, g.history_len,
                             g.primary_fill, g.primary_line, g.secondary_fill, g.secondary_line)

    def render_gauge(self, img: Image.Image, rect: Rect, primary: float, secondary: float):
        x, y, w, h = rect
        g = self.gauge
        draw.draw_dual_gauge(img, x, y, w, h, primary, secondary,
                             g.primary_arc, g.primary_needle, g.secondary_arc, g.secondary_needle)

    def render_text(self, img: Image.Image, text: str):
        if self.text.font is None:
            return
        bitmap_text.draw_aligned_text(img, text, self.text.font, self.text.h_align,
                                      self.text.v_align, self.text.padding, self.text.color)


@dataclass
class MetricData:
    value: float
    content_rect: Rect
    gauge_rect: Rect
    history: List[float] = field(default_factory=list)
    text_format: str = widget_defaults.TEXT_FORMAT


@dataclass
class DualMetricData:
    """
    Values are already normalised to 0..100 for bar, graph and gauge;
    formatted_text, when set, replaces text_format in text mode.
    """
    primary: float
    secondary: float
    content_rect: Rect
    gauge_rect: Rect
    primary_history: List[float] = field(default_factory=list)
    secondary_history: List[float] = field(default_factory=list)
    text_format: str = widget_defaults.DUAL_TEXT_FORMAT
    formatted_text: str = ''
    supports_gauge: bool = True
