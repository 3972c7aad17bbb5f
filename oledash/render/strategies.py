"""
Display strategies

One stateless strategy per display mode. The same instance is shared by
every widget using that mode; get_strategy() / get_dual_strategy() look
them up, defaulting to text.
"""

import logging

from PIL import Image

from ..config import widgets as widget_defaults
from .display_mode import DisplayMode, MetricData, MetricRenderer, DualMetricData, DualMetricRenderer

logger = logging.getLogger(__name__)


def format_value(fmt: str, *values: float) -> str:
    """printf-style formatting, falling back to the default format on a bad pattern."""
    try:
        return (fmt or '') % values
    except (TypeError, ValueError):
        default = widget_defaults.TEXT_FORMAT if len(values) == 1 else widget_defaults.DUAL_TEXT_FORMAT
        logger.debug(f"Bad text format {fmt!r}, using {default!r}")
        return default % values


class TextStrategy:
    def render(self, img: Image.Image, data: MetricData, renderer: MetricRenderer):
        renderer.render_text(img, format_value(data.text_format or widget_defaults.TEXT_FORMAT, data.value))


class BarStrategy:
    def render(self, img: Image.Image, data: MetricData, renderer: MetricRenderer):
        renderer.render_bar(img, data.content_rect, data.value)


class GraphStrategy:
    def render(self, img: Image.Image, data: MetricData, renderer: MetricRenderer):
        if data.history:
            renderer.render_graph(img, data.content_rect, data.history)


class GaugeStrategy:
    def render(self, img: Image.Image, data: MetricData, renderer: MetricRenderer):
        renderer.render_gauge(img, data.gauge_rect, data.value)


_STRATEGIES = {
    DisplayMode.TEXT: TextStrategy(),
    DisplayMode.BAR: BarStrategy(),
    DisplayMode.GRAPH: GraphStrategy(),
    DisplayMode.GAUGE: GaugeStrategy(),
}


def get_strategy(mode: DisplayMode):
    return _STRATEGIES.get(mode, _STRATEGIES[DisplayMode.TEXT])


class DualTextStrategy:
    def render(self, img: Image.Image, data: DualMetricData, renderer: DualMetricRenderer):
        text = data.formatted_text
        if not text:
            text = format_value(data.text_format or widget_defaults.DUAL_TEXT_FORMAT,
                                data.primary, data.secondary)
        renderer.render_text(img, text)


class DualBarStrategy:
    def render(self, img: Image.Image, data: DualMetricData, renderer: DualMetricRenderer):
        renderer.render_bar(img, data.content_rect, data.primary, data.secondary)


class DualGraphStrategy:
    def render(self, img: Image.Image, data: DualMetricData, renderer: DualMetricRenderer):
        if data.primary_history or data.secondary_history:
            renderer.render_graph(img, data.content_rect, data.primary_history, data.secondary_history)


class DualGaugeStrategy:
    def render(self, img: Image.Image, data: DualMetricData, renderer: DualMetricRenderer):
        if data.supports_gauge:
            renderer.render_gauge(img, data.gauge_rect, data.primary, data.secondary)


_DUAL_STRATEGIES = {
    DisplayMode.TEXT: DualTextStrategy(),
    DisplayMode.BAR: DualBarStrategy(),
    DisplayMode.GRAPH: DualGraphStrategy(),
    DisplayMode.GAUGE: DualGaugeStrategy(),
}


def get_dual_strategy(mode: DisplayMode):
    return _DUAL_STRATEGIES.get(mode, _DUAL_STRATEGIES[DisplayMode.TEXT])
