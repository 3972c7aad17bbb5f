"""
Builds renderers from a widget configuration, applying the defaults in
oledash.config.widgets so that individual widget kinds don't repeat the
same wiring.
"""

from typing import Optional

from ..bitmap import text as bitmap_text
from ..bitmap.text import FontFace
from ..config import widgets as widget_defaults
from ..config.model import WidgetConfig, ColorSettings
from .display_mode import (
    DisplayMode, BarConfig, GraphConfig, GaugeConfig, TextConfig, MetricRenderer,
    DualBarConfig, DualGraphConfig, DualGaugeConfig, DualMetricRenderer,
)


def _color(colors: ColorSettings, name: str, default: int) -> int:
    value = getattr(colors, name, None)
    return default if value is None else int(value)


class ConfigHelper:
    """
    Read-side view over a WidgetConfig.

    Args:
        cfg: Widget configuration
        default_text_size: Text size used when the config leaves it out
    """

    def __init__(self, cfg: WidgetConfig, default_text_size: int = widget_defaults.TEXT_SIZE):
        self.cfg = cfg
        self.default_text_size = default_text_size

    def display_mode(self, default: str = widget_defaults.DISPLAY_MODE) -> DisplayMode:
        return DisplayMode.parse(self.cfg.mode or default)

    @property
    def padding(self) -> int:
        return self.cfg.style.padding

    def text_size(self) -> int:
        size = self.cfg.text.size
        return int(size) if size and int(size) > 0 else self.default_text_size

    def text_format(self, default: str = widget_defaults.TEXT_FORMAT) -> str:
        return self.cfg.text.format or default

    def load_font(self) -> FontFace:
        return bitmap_text.load_font(self.cfg.text.font, self.text_size())

    def text_config(self, font: Optional[FontFace] = None, color: int = 255) -> TextConfig:
        return TextConfig(
            font=font if font is not None else self.load_font(),
            h_align=self.cfg.text.h_align or widget_defaults.TEXT_H_ALIGN,
            v_align=self.cfg.text.v_align or widget_defaults.TEXT_V_ALIGN,
            padding=self.padding,
            color=color,
        )

    def bar_config(self) -> BarConfig:
        bar = self.cfg.bar
        return BarConfig(
            direction=bar.direction or widget_defaults.BAR_DIRECTION,
            border=bar.border,
            color=_color(bar.colors, 'fill', widget_defaults.BAR_FILL),
        )

    def graph_config(self) -> GraphConfig:
        graph = self.cfg.graph
        return GraphConfig(
            fill_color=_color(graph.colors, 'fill', widget_defaults.GRAPH_FILL),
            line_color=_color(graph.colors, 'line', widget_defaults.GRAPH_LINE),
            history_len=graph.history if graph.history > 0 else widget_defaults.GRAPH_HISTORY,
        )

    def gauge_config(self) -> GaugeConfig:
        gauge = self.cfg.gauge
        return GaugeConfig(
            arc_color=_color(gauge.colors, 'arc', widget_defaults.GAUGE_ARC),
            needle_color=_color(gauge.colors, 'needle', widget_defaults.GAUGE_NEEDLE),
            show_ticks=gauge.show_ticks,
            ticks_color=_color(gauge.colors, 'ticks', widget_defaults.GAUGE_TICKS),
        )

    def metric_renderer(self) -> MetricRenderer:
        """Renderer for single-value widgets. The font is loaded only in text mode."""
        font = self.load_font() if self.display_mode() == DisplayMode.TEXT else None
        return MetricRenderer(
            bar=self.bar_config(),
            graph=self.graph_config(),
            gauge=self.gauge_config(),
            text=self.text_config(font=font) if font else TextConfig(padding=self.padding),
        )

    def dual_metric_renderer(self, primary: str, secondary: str) -> DualMetricRenderer:
        """
        Renderer for two-value widgets.

        Args:
            primary: Colour key of the first value ('rx' or 'read')
            secondary: Colour key of the second value ('tx' or 'write')
        """
        bar, graph, gauge = self.cfg.bar, self.cfg.graph, self.cfg.gauge
        graph_history = graph.history if graph.history > 0 else widget_defaults.GRAPH_HISTORY
        font = self.load_font() if self.display_mode() == DisplayMode.TEXT else None

        return DualMetricRenderer(
            bar=DualBarConfig(
                direction=bar.direction or widget_defaults.BAR_DIRECTION,
                border=bar.border,
                primary_color=_color(bar.colors, primary, widget_defaults.DUAL_PRIMARY_COLOR),
                secondary_color=_color(bar.colors, secondary, widget_defaults.DUAL_SECONDARY_COLOR),
            ),
            graph=DualGraphConfig(
                history_len=graph_history,
                primary_fill=_color(graph.colors, 'fill', -1),
                primary_line=_color(graph.colors, primary, widget_defaults.DUAL_PRIMARY_COLOR),
                secondary_fill=-1,
                secondary_line=_color(graph.colors, secondary, widget_defaults.DUAL_SECONDARY_COLOR),
            ),
            gauge=DualGaugeConfig(
                primary_arc=_color(gauge.colors, primary, widget_defaults.DUAL_PRIMARY_COLOR),
                primary_needle=_color(gauge.colors, f'{primary}_needle', widget_defaults.DUAL_PRIMARY_NEEDLE),
                secondary_arc=_color(gauge.colors, secondary, widget_defaults.DUAL_SECONDARY_COLOR),
                secondary_needle=_color(gauge.colors, f'{secondary}_needle', widget_defaults.DUAL_SECONDARY_NEEDLE),
            ),
            text=self.text_config(font=font) if font else TextConfig(padding=self.padding),
        )

    def param(self, name: str, default=None):
        """Type-specific parameter from cfg.params."""
        value = self.cfg.params.get(name)
        return default if value is None else value

    def section(self, name: str) -> dict:
        """Nested per-type section ("bluetooth": {...}); empty dict when missing."""
        value = self.cfg.params.get(name)
        return value if isinstance(value, dict) else {}
