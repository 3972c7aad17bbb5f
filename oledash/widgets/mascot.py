"""
Mascot widget: a pair of eyes that fall asleep when the machine is idle.
"""

import logging
import time
from typing import Optional

from PIL import Image

from ..anim.sleepy import SleepyAnimator, FRAME_OPEN, FRAME_HALF, FRAME_CLOSED
from ..bitmap.glyphs import MASCOT_SPRITES, draw_glyph, select_icon_set
from ..config import widgets as widget_defaults
from ..errors import ConfigurationError
from ..readers.system import CpuReader, MemoryReader
from ..render.composite import align_offset
from ..render.config_helper import ConfigHelper
from .base_widget import BaseWidget
from .registry import register

logger = logging.getLogger(__name__)

FRAME_SPRITES = {
    FRAME_OPEN: 'eyes_open',
    FRAME_HALF: 'eyes_half',
    FRAME_CLOSED: 'eyes_closed',
}

ACTIVITY_SOURCES = {
    'cpu': CpuReader,
    'memory': MemoryReader,
}


@register('mascot')
class MascotWidget(BaseWidget):
    """
    Configuration (params):
        mascot: {source: cpu|memory, idle_threshold (percent), color}

    Awake while the source reads at or above idle_threshold.
    """

    def __init__(self, cfg, reader=None, rng=None):
        super().__init__(cfg)
        helper = ConfigHelper(cfg)
        mascot = helper.section('mascot')

        self.idle_threshold = float(mascot.get('idle_threshold', widget_defaults.MASCOT_IDLE_THRESHOLD))
        self.color = int(mascot.get('color', 255))
        self.h_align = cfg.text.h_align
        self.v_align = cfg.text.v_align
        self.sprites = select_icon_set(MASCOT_SPRITES, self.get_content_area()[3])

        if reader is None:
            source = mascot.get('source', 'cpu')
            reader_cls = ACTIVITY_SOURCES.get(source)
            if reader_cls is None:
                raise ConfigurationError(f"mascot widget '{cfg.id}': unknown activity source '{source}'")
            reader = reader_cls()
        self.reader = reader
        self.animator = SleepyAnimator(awake=True, rng=rng)

    def update(self, now: Optional[float] = None):
        awake = self.reader.sample() >= self.idle_threshold
        with self._lock:
            if awake != self.animator.awake:
                logger.debug(f"Mascot {self.id} {'waking up' if awake else 'falling asleep'}")
            self.animator.set_awake(awake, now)

    def render(self, now: Optional[float] = None) -> Image.Image:
        now = time.monotonic() if now is None else now
        with self._lock:
            frame = self.animator.frame(now)
            sleeping = self.animator.sleeping

        img = self.create_canvas()
        self.apply_border(img)
        x, y, w, h = self.get_content_area()

        eyes = self.sprites.get(FRAME_SPRITES[frame])
        ex = x + align_offset(w, eyes.width, self.h_align)
        ey = y + align_offset(h, eyes.height, self.v_align)
        draw_glyph(img, eyes, ex, ey, self.color)

        if sleeping and frame == FRAME_CLOSED:
            zzz = self.sprites.get('zzz')
            draw_glyph(img, zzz, min(ex + eyes.width, x + w - zzz.width), y, self.color)
        return img

    def close(self):
        self.reader.close()
