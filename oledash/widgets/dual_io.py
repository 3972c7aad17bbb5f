"""
Dual-value I/O widgets (network rx/tx, disk read/write)

Readers return cumulative byte counters; the widget turns the deltas
between two samples into bytes per second. Bar, graph and gauge show the
rates as a percentage of max_speed (or of the larger of the two values
when max_speed is auto), text shows them in the configured unit.
"""

import logging
import time
from typing import List, Optional, Tuple

from PIL import Image

from ..config import widgets as widget_defaults
from ..readers.system import NetworkReader, DiskReader
from ..render.config_helper import ConfigHelper
from ..render.display_mode import DisplayMode, DualMetricData
from ..render.strategies import get_dual_strategy
from ..util.byte_units import ByteRateConverter, is_valid_unit
from ..util.ring_buffer import RingBuffer
from .base_widget import BaseWidget
from .registry import register

logger = logging.getLogger(__name__)

AUTO = 'auto'


def format_io_value(value: float) -> str:
    """Fewer decimals for bigger numbers: 123, 12.3, 1.23."""
    if value >= 100:
        return f"{value:.0f}"
    if value >= 10:
        return f"{value:.1f}"
    return f"{value:.2f}"


def _clamp(value: float) -> float:
    return min(100.0, max(0.0, value))


class DualIOWidget(BaseWidget):
    """
    Shared implementation of the two-value widgets.

    Class attributes set by subclasses:
        primary_key, secondary_key: colour keys in the bar/graph/gauge colour maps
        primary_prefix, secondary_prefix: text mode labels
        default_unit: unit used when the configuration names none (or an unknown one)
        bytes_per_max_unit: bytes/s per unit of max_speed_mbps
    """

    primary_key = 'rx'
    secondary_key = 'tx'
    primary_prefix = ''
    secondary_prefix = ''
    default_unit = 'MB/s'
    bytes_per_max_unit = 1e6
    supports_gauge = True

    def __init__(self, cfg, reader=None, clock=time.monotonic):
        super().__init__(cfg)
        helper = ConfigHelper(cfg)
        self.mode = helper.display_mode()
        self.renderer = helper.dual_metric_renderer(self.primary_key, self.secondary_key)
        self.strategy = get_dual_strategy(self.mode)

        self.max_speed = cfg.max_value * self.bytes_per_max_unit if cfg.max_value > 0 else -1.0

        unit = helper.param('unit') or self.default_unit
        if unit != AUTO and not is_valid_unit(unit):
            logger.warning(f"Widget {cfg.id}: unknown unit '{unit}', using {self.default_unit}")
            unit = self.default_unit
        self.unit = unit
        self.show_unit = cfg.text.show_unit
        self.converter = ByteRateConverter(self.default_unit if unit == AUTO else unit)

        history_len = self.renderer.graph.history_len
        self.primary_history = RingBuffer(history_len)
        self.secondary_history = RingBuffer(history_len)

        self._clock = clock
        self.reader = reader if reader is not None else self.create_reader(helper)
        self._last_counters: Optional[Tuple[int, int]] = None
        self._last_time: Optional[float] = None
        self.primary_value = 0.0  # bytes per second
        self.secondary_value = 0.0

    def create_reader(self, helper: ConfigHelper):
        raise NotImplementedError

    def update(self, now: Optional[float] = None):
        counters = self.reader.sample()
        now = self._clock() if now is None else now

        with self._lock:
            last, last_time = self._last_counters, self._last_time
            self._last_counters, self._last_time = counters, now
            if last is None or now <= last_time:
                return

            elapsed = now - last_time
            # Counters can go backwards when an interface resets
            primary = max(0, counters[0] - last[0]) / elapsed
            secondary = max(0, counters[1] - last[1]) / elapsed

            self.primary_value = primary
            self.secondary_value = secondary
            if self.mode == DisplayMode.GRAPH:
                self.primary_history.push(primary)
                self.secondary_history.push(secondary)

    def percentages(self) -> Tuple[float, float]:
        max_speed = self.max_speed
        if max_speed < 0:
            max_speed = max(self.primary_value, self.secondary_value, 1.0)
        return (_clamp(self.primary_value / max_speed * 100),
                _clamp(self.secondary_value / max_speed * 100))

    def normalized_history(self) -> Tuple[List[float], List[float]]:
        """Graph histories as percentages; empty until two samples exist."""
        if len(self.primary_history) < 2:
            return [], []
        primary = self.primary_history.to_list()
        secondary = self.secondary_history.to_list()
        max_speed = self.max_speed
        if max_speed < 0:
            max_speed = max([1.0] + primary + secondary)
        return ([v / max_speed * 100 for v in primary],
                [v / max_speed * 100 for v in secondary])

    def format_text(self) -> str:
        p_pre, s_pre = self.primary_prefix, self.secondary_prefix
        if self.unit == AUTO:
            p_val, p_unit = self.converter.auto_scale(self.primary_value)
            s_val, s_unit = self.converter.auto_scale(self.secondary_value)
            return f"{p_pre}{format_io_value(p_val)}{p_unit} {s_pre}{format_io_value(s_val)}{s_unit}"

        p_val, unit_name = self.converter.convert(self.primary_value, self.unit)
        s_val, _ = self.converter.convert(self.secondary_value, self.unit)
        text = f"{p_pre}{format_io_value(p_val)} {s_pre}{format_io_value(s_val)}"
        if self.show_unit:
            text += f" {unit_name}"
        return text

    def render(self) -> Image.Image:
        with self._lock:
            primary, secondary = self.percentages()
            p_hist, s_hist = self.normalized_history() if self.mode == DisplayMode.GRAPH else ([], [])
            text = self.format_text() if self.mode == DisplayMode.TEXT else ''

        img = self.create_canvas()
        self.apply_border(img)
        data = DualMetricData(
            primary=primary,
            secondary=secondary,
            content_rect=self.get_content_area(),
            gauge_rect=(0, 0, self.position.w, self.position.h),
            primary_history=p_hist,
            secondary_history=s_hist,
            formatted_text=text,
            supports_gauge=self.supports_gauge,
        )
        self.strategy.render(img, data, self.renderer)
        return img

    def close(self):
        self.reader.close()


@register('network')
class NetworkWidget(DualIOWidget):
    """Receive/transmit rates; params.interface picks one interface."""

    primary_key = 'rx'
    secondary_key = 'tx'
    primary_prefix = '↓'
    secondary_prefix = '↑'
    default_unit = widget_defaults.NETWORK_UNIT
    bytes_per_max_unit = 1e6 / 8  # max_speed_mbps is in megabits

    def create_reader(self, helper: ConfigHelper):
        return NetworkReader(helper.param('interface'))


@register('disk')
class DiskWidget(DualIOWidget):
    """Read/write rates; params.disk picks one disk."""

    primary_key = 'read'
    secondary_key = 'write'
    primary_prefix = 'R'
    secondary_prefix = 'W'
    default_unit = widget_defaults.DISK_UNIT
    bytes_per_max_unit = 1e6  # max_speed_mbps is in megabytes
    supports_gauge = False  # gauge mode draws only the background and border

    def create_reader(self, helper: ConfigHelper):
        return DiskReader(helper.param('disk'))
