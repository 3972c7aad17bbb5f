"""
Gray canvas helpers

A canvas is a PIL image in mode 'L': one byte per pixel, 0 = panel off,
255 = fully lit. There is no alpha channel.
"""

import logging
from typing import List, Tuple

from PIL import Image

logger = logging.getLogger(__name__)

CANVAS_MODE = 'L'

Rect = Tuple[int, int, int, int]  # x, y, w, h


def new_canvas(width: int, height: int, background: int = 0) -> Image.Image:
    """Allocate a gray canvas filled with background (clamped to 0..255)."""
    return Image.new(CANVAS_MODE, (max(1, width), max(1, height)), clamp_color(background))


def clamp_color(value) -> int:
    value = int(value)
    if value < 0:
        return 0
    if value > 255:
        return 255
    return value


def clamp_percent(value: float) -> float:
    if value < 0:
        return 0.0
    if value > 100:
        return 100.0
    return float(value)


def set_pixel(img: Image.Image, x: int, y: int, color: int):
    """Single clipped pixel write. Prefer Painter for loops."""
    w, h = img.size
    if 0 <= x < w and 0 <= y < h:
        img.putpixel((x, y), color)


class Painter:
    """
    Clipped pixel writer around a canvas' pixel-access object.

    All draw primitives funnel their writes through put(), so out-of-range
    coordinates are silently ignored everywhere.
    """

    __slots__ = ('img', 'px', 'width', 'height')

    def __init__(self, img: Image.Image):
        self.img = img
        self.px = img.load()
        self.width, self.height = img.size

    def put(self, x: int, y: int, color: int):
        if 0 <= x < self.width and 0 <= y < self.height:
            self.px[x, y] = color

    def get(self, x: int, y: int) -> int:
        if 0 <= x < self.width and 0 <= y < self.height:
            return self.px[x, y]
        return 0

    def fill(self, x: int, y: int, w: int, h: int, color: int):
        x0 = max(0, x)
        y0 = max(0, y)
        x1 = min(self.width, x + w)
        y1 = min(self.height, y + h)
        if x0 >= x1 or y0 >= y1:
            return
        self.img.paste(color, (x0, y0, x1, y1))


def canvas_rows(img: Image.Image) -> List[List[int]]:
    """Canvas as a list of rows, indexed [y][x]. Used by tests and ASCII dumps."""
    w, h = img.size
    data = img.tobytes()
    return [list(data[y * w:(y + 1) * w]) for y in range(h)]


def pack_1bit(img: Image.Image, dither: bool = False, threshold: int = 128) -> bytes:
    """
    Pack a gray canvas into row-major, MSB-first 1-bit bytes.

    Each row is padded to a whole byte. With dither, Floyd-Steinberg error
    diffusion is applied before thresholding.

    Args:
        img: Canvas in mode 'L'
        dither: Apply Floyd-Steinberg error diffusion
        threshold: Pixel value at or above which a bit is set

    Returns:
        Packed bytes, ceil(width/8) * height long
    """
    w, h = img.size
    src = img.tobytes()
    if dither:
        src = _floyd_steinberg(src, w, h, threshold)

    row_bytes = (w + 7) // 8
    out = bytearray(row_bytes * h)
    for y in range(h):
        row = y * w
        for x in range(w):
            if src[row + x] >= threshold:
                out[y * row_bytes + (x >> 3)] |= 0x80 >> (x & 7)
    return bytes(out)


def _floyd_steinberg(src: bytes, w: int, h: int, threshold: int) -> bytes:
    buf = [float(v) for v in src]
    for y in range(h):
        for x in range(w):
            i = y * w + x
            old = buf[i]
            new = 255.0 if old >= threshold else 0.0
            buf[i] = new
            err = old - new
            if x + 1 < w:
                buf[i + 1] += err * 7 / 16
            if y + 1 < h:
                if x > 0:
                    buf[i + w - 1] += err * 3 / 16
                buf[i + w] += err * 5 / 16
                if x + 1 < w:
                    buf[i + w + 1] += err * 1 / 16
    return bytes(255 if v >= threshold else 0 for v in buf)
