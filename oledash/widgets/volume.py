"""
Volume widget

Shows the master volume as text, a bar, a gauge or a rising wedge, with an
X over it while muted. With auto_hide enabled it pops up for timeout_s
after every volume or mute change and is hidden otherwise.
"""

import logging
from typing import Optional

from PIL import Image

from ..bitmap.canvas import clamp_percent
from ..bitmap.draw import draw_mute_overlay, draw_triangle_meter
from ..config import widgets as widget_defaults
from ..errors import ConfigurationError
from ..readers.volume import VolumeReader
from ..render.config_helper import ConfigHelper
from ..render.display_mode import MetricRenderer, TextConfig
from ..render.strategies import format_value
from .base_widget import BaseWidget
from .registry import register

logger = logging.getLogger(__name__)

VOLUME_MODES = ('text', 'bar', 'gauge', 'triangle')


@register('volume')
class VolumeWidget(BaseWidget):
    """
    Configuration:
        mode: text | bar | gauge | triangle (bar.direction picks a vertical bar)
        text.format: printf pattern for the level (default "%.0f%%")
        params.volume: {tool, poll_interval_ms, triangle_border}
    """

    def __init__(self, cfg, reader=None):
        super().__init__(cfg)
        helper = ConfigHelper(cfg)
        self.mode = cfg.mode or widget_defaults.VOLUME_MODE
        if self.mode not in VOLUME_MODES:
            raise ConfigurationError(f"volume widget '{cfg.id}': unknown mode '{self.mode}'")

        volume = helper.section('volume')
        poll_ms = int(volume.get('poll_interval_ms') or widget_defaults.VOLUME_POLL_INTERVAL_MS)
        self.update_interval = poll_ms / 1000.0
        self.triangle_border = bool(volume.get('triangle_border', False))
        self.text_format = helper.text_format(widget_defaults.VOLUME_FORMAT)

        text = helper.text_config() if self.mode == 'text' else TextConfig(padding=self.padding)
        self.renderer = MetricRenderer(bar=helper.bar_config(), gauge=helper.gauge_config(), text=text)

        self.reader = reader if reader is not None else VolumeReader(volume.get('tool'))

        self._volume = 0.0
        self._muted = False
        self._has_sample = False

    @property
    def volume(self) -> float:
        with self._lock:
            return self._volume

    @property
    def muted(self) -> bool:
        with self._lock:
            return self._muted

    def update(self, now: Optional[float] = None):
        level, muted = self.reader.sample()
        level = clamp_percent(level)
        with self._lock:
            changed = self._has_sample and (level != self._volume or muted != self._muted)
            self._volume = level
            self._muted = bool(muted)
            self._has_sample = True
        if changed:
            logger.debug(f"Volume {self.id}: {level:.0f}% (muted={muted})")
            self.trigger_auto_hide(now)

    def render(self, now: Optional[float] = None) -> Optional[Image.Image]:
        if self.should_hide(now):
            return None
        with self._lock:
            level = self._volume
            muted = self._muted

        img = self.create_canvas()
        self.apply_border(img)
        rect = self.get_content_area()

        if self.mode == 'text':
            text = widget_defaults.VOLUME_MUTE_TEXT if muted else format_value(self.text_format, level)
            self.renderer.render_text(img, text)
            return img

        if self.mode == 'bar':
            self.renderer.render_bar(img, rect, level)
        elif self.mode == 'gauge':
            self.renderer.render_gauge(img, (0, 0, self.position.w, self.position.h), level)
        else:
            draw_triangle_meter(img, *rect, level, self.renderer.bar.color, self.triangle_border)

        if muted:
            draw_mute_overlay(img, widget_defaults.VOLUME_MUTE_COLOR)
        return img

    def close(self):
        self.reader.close()
