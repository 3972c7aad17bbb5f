"""
Single-value metric widgets (CPU, memory, GPU)
"""

import logging

from PIL import Image

from ..bitmap.canvas import clamp_percent
from ..bitmap.text import draw_aligned_text
from ..config import widgets as widget_defaults
from ..errors import DataUnavailableError
from ..readers.gpu import GpuReader
from ..readers.system import CpuReader, MemoryReader
from ..render.config_helper import ConfigHelper
from ..render.display_mode import DisplayMode, MetricData
from ..render.strategies import get_strategy
from ..util.ring_buffer import RingBuffer
from .base_widget import BaseWidget
from .registry import register

logger = logging.getLogger(__name__)


class MetricWidget(BaseWidget):
    """
    Percentage metric drawn as text, bar, graph or gauge.

    Subclasses supply create_reader(); tests pass a reader with a sample()
    method directly.
    """

    def __init__(self, cfg, reader=None):
        super().__init__(cfg)
        helper = ConfigHelper(cfg)
        self.mode = helper.display_mode()
        self.renderer = helper.metric_renderer()
        self.strategy = get_strategy(self.mode)
        self.text_format = helper.text_format()
        self.history = RingBuffer(self.renderer.graph.history_len)
        self.reader = reader if reader is not None else self.create_reader(helper)
        self._value = 0.0

    def create_reader(self, helper: ConfigHelper):
        raise NotImplementedError

    @property
    def value(self) -> float:
        with self._lock:
            return self._value

    def update(self):
        value = clamp_percent(self.reader.sample())
        with self._lock:
            self._value = value
            if self.mode == DisplayMode.GRAPH:
                self.history.push(value)

    def render(self) -> Image.Image:
        with self._lock:
            value = self._value
            history = self.history.to_list() if self.mode == DisplayMode.GRAPH else []

        img = self.create_canvas()
        self.apply_border(img)
        data = MetricData(
            value=value,
            content_rect=self.get_content_area(),
            gauge_rect=(0, 0, self.position.w, self.position.h),
            history=history,
            text_format=self.text_format,
        )
        self.strategy.render(img, data, self.renderer)
        return img

    def close(self):
        self.reader.close()


@register('cpu')
class CpuWidget(MetricWidget):
    """CPU usage; params.core selects a single core."""

    def create_reader(self, helper: ConfigHelper):
        core = helper.param('core')
        return CpuReader(None if core is None else int(core))


@register('memory')
class MemoryWidget(MetricWidget):
    def create_reader(self, helper: ConfigHelper):
        return MemoryReader()


@register('gpu')
class GpuWidget(MetricWidget):
    """
    Configuration (params):
        gpu: {adapter, metric}

    Draws "GPU N/A" until a first sample arrives when the machine has no
    usable counter; after that the last good value stays on screen.
    """

    def __init__(self, cfg, reader=None):
        self.reader_failed = False
        self._has_data = False
        self._unavailable = False
        super().__init__(cfg, reader)
        self.placeholder_font = ConfigHelper(cfg).load_font()

    def create_reader(self, helper: ConfigHelper):
        gpu = helper.section('gpu')
        try:
            return GpuReader(int(gpu.get('adapter', widget_defaults.GPU_ADAPTER)),
                             gpu.get('metric') or widget_defaults.GPU_METRIC)
        except DataUnavailableError as e:
            logger.warning(f"GPU widget {self.cfg.id}: {e}")
            self.reader_failed = True
            return None

    @property
    def unavailable(self) -> bool:
        with self._lock:
            return self.reader_failed or (self._unavailable and not self._has_data)

    def update(self):
        if self.reader is None:
            raise DataUnavailableError("GPU reader not available")
        try:
            super().update()
        except DataUnavailableError:
            with self._lock:
                self._unavailable = True
            raise
        with self._lock:
            self._has_data = True
            self._unavailable = False

    def render(self) -> Image.Image:
        if not self.unavailable:
            return super().render()
        img = self.create_canvas()
        self.apply_border(img)
        draw_aligned_text(img, widget_defaults.GPU_PLACEHOLDER_TEXT, self.placeholder_font,
                          padding=self.padding)
        return img

    def close(self):
        if self.reader is not None:
            self.reader.close()
