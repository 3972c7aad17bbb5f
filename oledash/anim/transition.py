"""
Frame transitions

Blends two equal-sized gray frames at a progress p in [0, 1]. Every
transition returns the old frame exactly at p = 0 and the new frame
exactly at p = 1.

    manager = TransitionManager(128, 40)
    manager.start('clock_wipe', 0.5, last_frame)
    frame = manager.apply(next_frame)    # blended at live progress
"""

import logging
import math
import random
import threading
import time
from typing import List, Optional

from PIL import Image

from ..bitmap.canvas import CANVAS_MODE

logger = logging.getLogger(__name__)

NONE = 'none'
RANDOM = 'random'

ALL_TRANSITIONS = (
    'push_left', 'push_right', 'push_up', 'push_down',
    'slide_left', 'slide_right', 'slide_up', 'slide_down',
    'dissolve_fade', 'dissolve_pixel', 'dissolve_dither',
    'box_in', 'box_out', 'clock_wipe',
)

TRANSITION_TYPES = (NONE,) + ALL_TRANSITIONS + (RANDOM,)

BAYER_8X8 = (
    (0, 32, 8, 40, 2, 34, 10, 42),
    (48, 16, 56, 24, 50, 18, 58, 26),
    (12, 44, 4, 36, 14, 46, 6, 38),
    (60, 28, 52, 20, 62, 30, 54, 22),
    (3, 35, 11, 43, 1, 33, 9, 41),
    (51, 19, 59, 27, 49, 17, 57, 25),
    (15, 47, 7, 39, 13, 45, 5, 37),
    (63, 31, 55, 23, 61, 29, 53, 21),
)

_DIRECTIONS = {
    'left': (-1, 0),
    'right': (1, 0),
    'up': (0, -1),
    'down': (0, 1),
}


def select_transition(requested: str, rng: Optional[random.Random] = None) -> str:
    """Resolve 'random' to one concrete transition; other names pass through."""
    if requested != RANDOM:
        return requested
    return (rng or random).choice(ALL_TRANSITIONS)


def generate_pixel_order(width: int, height: int, rng: Optional[random.Random] = None) -> List[int]:
    """Fisher-Yates permutation of all pixel indices (row-major)."""
    order = list(range(width * height))
    (rng or random).shuffle(order)
    return order


def clock_angle(x: int, y: int, width: int, height: int) -> float:
    """Angle of pixel (x, y) around the frame centre, clockwise from 12 o'clock, in [0, 2pi)."""
    angle = math.atan2(x - width / 2.0, height / 2.0 - y)
    if angle < 0:
        angle += 2 * math.pi
    return angle


def _mask(width: int, height: int, take_new) -> Image.Image:
    """'L' mask, 255 where take_new(x, y) holds."""
    data = bytearray(width * height)
    i = 0
    for y in range(height):
        for x in range(width):
            if take_new(x, y):
                data[i] = 255
            i += 1
    return Image.frombytes('L', (width, height), bytes(data))


def _push(old: Image.Image, new: Image.Image, p: float, direction: str, background: int) -> Image.Image:
    w, h = old.size
    dx, dy = _DIRECTIONS[direction]
    off_x = int(w * p) * dx
    off_y = int(h * p) * dy
    dst = Image.new(CANVAS_MODE, (w, h), background)
    dst.paste(old, (off_x, off_y))
    dst.paste(new, (off_x - w * dx, off_y - h * dy))
    return dst


def _slide(old: Image.Image, new: Image.Image, p: float, direction: str) -> Image.Image:
    w, h = old.size
    dx, dy = _DIRECTIONS[direction]
    # new enters from the side it travels away from
    start_x = -dx * (w - int(w * p))
    start_y = -dy * (h - int(h * p))
    dst = old.copy()
    dst.paste(new, (start_x, start_y))
    return dst


def _fade(old: Image.Image, new: Image.Image, p: float) -> Image.Image:
    q = 1.0 - p
    data = bytes(min(255, max(0, round(a * q + b * p)))
                 for a, b in zip(old.tobytes(), new.tobytes()))
    return Image.frombytes(CANVAS_MODE, old.size, data)


def _pixel(old: Image.Image, new: Image.Image, p: float, order: List[int]) -> Image.Image:
    w, h = old.size
    buf = bytearray(old.tobytes())
    src = new.tobytes()
    for idx in order[:int(p * w * h)]:
        buf[idx] = src[idx]
    return Image.frombytes(CANVAS_MODE, old.size, bytes(buf))


def apply_transition(old: Image.Image, new: Image.Image, progress: float, transition: str,
                     pixel_order: Optional[List[int]] = None, background: int = 0) -> Image.Image:
    """
    Compose old and new at progress.

    Args:
        old: Frame being replaced
        new: Incoming frame, same size as old
        progress: 0..1 (clamped)
        transition: One of TRANSITION_TYPES except 'random'
        pixel_order: Permutation for dissolve_pixel; generated when missing
        background: Fill for pixels neither frame covers (push)

    Returns:
        A new image; old and new are not modified
    """
    p = min(1.0, max(0.0, progress))
    w, h = new.size

    if transition == NONE:
        return (old if p < 0.5 else new).copy()

    if transition.startswith('push_'):
        return _push(old, new, p, transition[5:], background)
    if transition.startswith('slide_'):
        return _slide(old, new, p, transition[6:])

    if transition == 'dissolve_fade':
        return _fade(old, new, p)
    if transition == 'dissolve_pixel':
        if pixel_order is None:
            pixel_order = generate_pixel_order(w, h)
        return _pixel(old, new, p, pixel_order)
    if transition == 'dissolve_dither':
        threshold = p * 64.0
        mask = _mask(w, h, lambda x, y: BAYER_8X8[y % 8][x % 8] < threshold)
        return Image.composite(new, old, mask)

    if transition in ('box_in', 'box_out'):
        half = (1.0 - p) if transition == 'box_in' else p
        half_w, half_h = half * w / 2.0, half * h / 2.0
        cx, cy = w / 2.0, h / 2.0

        def in_box(x, y):
            return abs(x + 0.5 - cx) < half_w and abs(y + 0.5 - cy) < half_h

        if transition == 'box_in':
            mask = _mask(w, h, lambda x, y: not in_box(x, y))
        else:
            mask = _mask(w, h, in_box)
        return Image.composite(new, old, mask)

    if transition == 'clock_wipe':
        sweep = p * 2 * math.pi
        mask = _mask(w, h, lambda x, y: clock_angle(x, y, w, h) < sweep)
        return Image.composite(new, old, mask)

    logger.warning(f"Unknown transition '{transition}', showing new frame")
    return new.copy()


class TransitionManager:
    """
    Tracks one running transition.

    Progress is recomputed from the clock on every read, never stored, so
    the blend stays smooth however irregularly frames are produced. The old
    frame and the pixel order are released once progress reaches 1.

    Args:
        width, height: Frame size
        background: Display background used by push transitions
        rng: random.Random for 'random' selection and dissolve_pixel
        clock: Time source in seconds
    """

    def __init__(self, width: int, height: int, background: int = 0,
                 rng: Optional[random.Random] = None, clock=time.monotonic):
        self.width = width
        self.height = height
        self.background = background
        self._rng = rng or random.Random()
        self._clock = clock
        self._lock = threading.Lock()

        self.type = NONE
        self.duration = 0.0
        self.start_time = 0.0
        self.old_frame: Optional[Image.Image] = None
        self.pixel_order: Optional[List[int]] = None

    @property
    def active(self) -> bool:
        return self.old_frame is not None

    def start(self, transition: str, duration: float, old_frame: Optional[Image.Image],
              now: Optional[float] = None):
        """Begin a transition away from old_frame. 'none' or a zero duration does nothing."""
        if transition == NONE or duration <= 0 or old_frame is None:
            self.cancel()
            return
        if transition not in TRANSITION_TYPES:
            logger.warning(f"Unknown transition '{transition}', ignoring")
            self.cancel()
            return

        chosen = select_transition(transition, self._rng)
        with self._lock:
            self.type = chosen
            self.duration = float(duration)
            self.start_time = self._clock() if now is None else now
            self.old_frame = old_frame.copy()
            self.pixel_order = None
            if chosen == 'dissolve_pixel':
                self.pixel_order = generate_pixel_order(self.width, self.height, self._rng)
        logger.debug(f"Transition '{chosen}' started ({duration}s)")

    def live_progress(self, now: Optional[float] = None) -> float:
        if not self.active:
            return 1.0
        now = self._clock() if now is None else now
        return min(1.0, max(0.0, (now - self.start_time) / self.duration))

    def apply(self, new_frame: Image.Image, now: Optional[float] = None) -> Image.Image:
        """Blend the stored old frame with new_frame at live progress."""
        with self._lock:
            if self.old_frame is None:
                return new_frame
            progress = self.live_progress(now)
            if progress >= 1.0:
                self._release()
                return new_frame
            return apply_transition(self.old_frame, new_frame, progress, self.type,
                                    self.pixel_order, self.background)

    def cancel(self):
        with self._lock:
            self._release()

    def _release(self):
        self.old_frame = None
        self.pixel_order = None
