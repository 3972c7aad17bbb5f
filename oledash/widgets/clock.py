"""
Clock widget: strftime text or an analog face.
"""

import logging
import math
from datetime import datetime

from PIL import Image

from ..bitmap.canvas import Painter
from ..bitmap.draw import draw_circle, draw_line
from ..bitmap.text import draw_text_in_rect
from ..config import widgets as widget_defaults
from ..errors import ConfigurationError
from ..render.config_helper import ConfigHelper
from .base_widget import BaseWidget
from .registry import register

logger = logging.getLogger(__name__)

TEXT = 'text'
ANALOG = 'analog'
CLOCK_MODES = (TEXT, ANALOG)


def hand_end(cx: int, cy: int, length: float, angle_deg: float):
    """End point of a hand at angle_deg clockwise from 12 o'clock."""
    rad = math.radians(angle_deg - 90.0)
    return cx + int(length * math.cos(rad)), cy + int(length * math.sin(rad))


def hand_angles(t: datetime):
    """(hour, minute, second) hand angles in degrees clockwise from 12."""
    hour = (t.hour % 12) * 30.0 + t.minute * 0.5
    minute = t.minute * 6.0 + t.second * 0.1
    second = t.second * 6.0
    return hour, minute, second


@register('clock')
class ClockWidget(BaseWidget):
    """
    Modes:
        text: text.format is an strftime pattern (default %H:%M:%S)
        analog: face with 12 ticks plus hour, minute and optional second
            hands; colours come from params.analog ({face, hour, minute,
            second}), -1 leaves a part out

    Args:
        cfg: Widget configuration
        clock: Returns the current datetime (injectable for tests)
    """

    def __init__(self, cfg, clock=datetime.now):
        super().__init__(cfg)
        helper = ConfigHelper(cfg, default_text_size=widget_defaults.CLOCK_TEXT_SIZE)

        self.mode = cfg.mode or TEXT
        if self.mode not in CLOCK_MODES:
            raise ConfigurationError(f"clock widget '{cfg.id}': unknown mode '{self.mode}'")

        self._clock = clock
        self.time_format = helper.text_format(widget_defaults.CLOCK_FORMAT)
        self.text = helper.text_config() if self.mode == TEXT else None

        analog = helper.section('analog')
        self.face_color = int(analog.get('face', 255))
        self.hour_color = int(analog.get('hour', 255))
        self.minute_color = int(analog.get('minute', 255))
        self.second_color = int(analog.get('second', 150))
        self.show_seconds = bool(analog.get('show_seconds', True))
        self.show_ticks = bool(analog.get('show_ticks', True))

        self._now: datetime = clock()

    def update(self):
        now = self._clock()
        with self._lock:
            self._now = now

    def render(self) -> Image.Image:
        with self._lock:
            now = self._now

        img = self.create_canvas()
        self.apply_border(img)
        rect = self.get_content_area()

        if self.mode == ANALOG:
            self.draw_face(img, rect, now)
        else:
            draw_text_in_rect(img, now.strftime(self.time_format), self.text.font, rect,
                              self.text.h_align, self.text.v_align, self.text.color)
        return img

    def draw_face(self, img: Image.Image, rect, now: datetime):
        x, y, w, h = rect
        radius = min(w, h) // 2 - 2
        if radius < 5:
            return
        cx, cy = x + w // 2, y + h // 2

        if self.face_color >= 0:
            draw_circle(img, cx, cy, radius, self.face_color)
            if self.show_ticks:
                for hour in range(12):
                    tick = 4 if hour % 3 == 0 else 2
                    x1, y1 = hand_end(cx, cy, radius, hour * 30.0)
                    x2, y2 = hand_end(cx, cy, radius - tick, hour * 30.0)
                    draw_line(img, x1, y1, x2, y2, self.face_color)
            Painter(img).fill(cx - 1, cy - 1, 3, 3, self.face_color)

        hour_deg, minute_deg, second_deg = hand_angles(now)
        hands = [(self.hour_color, 0.5, hour_deg), (self.minute_color, 0.75, minute_deg)]
        if self.show_seconds:
            hands.append((self.second_color, 0.9, second_deg))
        for color, scale, angle in hands:
            if color < 0:
                continue
            ex, ey = hand_end(cx, cy, int(radius * scale), angle)
            draw_line(img, cx, cy, ex, ey, color)
