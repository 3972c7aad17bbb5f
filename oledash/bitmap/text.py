"""
Text facility: font loading, measurement and clipped drawing

Text is rasterised without antialiasing (fontmode "1") into a mask and
pasted onto the canvas in a single gray level, which keeps glyph pixels
crisp on a monochrome panel.
"""

import logging
import threading
from typing import Dict, Optional, Tuple

from PIL import Image, ImageDraw, ImageFont

from ..config import widgets as widget_defaults
from .canvas import Rect

logger = logging.getLogger(__name__)

H_ALIGNS = ('left', 'center', 'right')
V_ALIGNS = ('top', 'center', 'bottom')


class FontFace:
    """
    A loaded font plus the metrics the layout code needs.

    Subclasses may override measure() and render_mask() to provide
    synthetic fonts (tests use a fixed-width block font).
    """

    def __init__(self, font, name: str = '', size: int = 0):
        self.font = font
        self.name = name
        self.size = size
        if hasattr(font, 'getmetrics'):
            self.ascent, self.descent = font.getmetrics()
        else:
            # Bitmap fonts have no metrics; treat the box as all ascent
            _, top, _, bottom = font.getbbox('Ay')
            self.ascent, self.descent = bottom, 0

    @property
    def height(self) -> int:
        return self.ascent + self.descent

    def measure(self, text: str) -> Tuple[int, int]:
        """
        Pixel size of text.

        Returns:
            (width, height) where height is ascent + descent, independent
            of the actual glyphs so that lines stay aligned.
        """
        if not text:
            return 0, self.height
        return int(round(self.font.getlength(text))), self.height

    def render_mask(self, text: str) -> Image.Image:
        """Rasterise text into an 'L' mask whose top row is the ascent line."""
        w, h = self.measure(text)
        mask = Image.new('L', (max(1, w), max(1, h)), 0)
        if text:
            draw = ImageDraw.Draw(mask)
            draw.fontmode = '1'
            draw.text((0, 0), text, fill=255, font=self.font)
        return mask

    def __repr__(self):
        return f"FontFace({self.name!r}, {self.size})"


_font_cache: Dict[Tuple[str, int], FontFace] = {}
_font_lock = threading.Lock()


def load_font(name: str = '', size: int = widget_defaults.TEXT_SIZE) -> FontFace:
    """
    Load a TrueType font by file name or path, cached per (name, size).

    Falls back to PIL's built-in font at the requested size when the file
    cannot be found.
    """
    name = name or widget_defaults.FONT_NAME
    size = int(size) if size else widget_defaults.TEXT_SIZE
    key = (name, size)

    with _font_lock:
        face = _font_cache.get(key)
        if face is not None:
            return face

        try:
            font = ImageFont.truetype(name, size)
            logger.debug(f"Loaded font '{name}' at {size}px")
        except (OSError, IOError) as e:
            logger.warning(f"Font '{name}' not available ({e}), using default font")
            font = ImageFont.load_default(size)

        face = FontFace(font, name, size)
        _font_cache[key] = face
        return face


def clear_font_cache():
    with _font_lock:
        _font_cache.clear()


def draw_text_at(img: Image.Image, text: str, font: FontFace, x: int, y: int,
                 clip: Optional[Rect] = None, color: int = 255):
    """
    Draw text with its top-left corner (ascent line) at (x, y).

    Args:
        img: Target canvas
        text: Text to draw
        font: Font to draw with
        x, y: Top-left of the text box in canvas coordinates
        clip: Optional (x, y, w, h) rectangle; pixels outside it are not written
        color: Gray level for the glyph pixels
    """
    if not text:
        return
    mask = font.render_mask(text)
    mw, mh = mask.size

    cw, ch = img.size
    x0, y0, x1, y1 = max(0, x), max(0, y), min(cw, x + mw), min(ch, y + mh)
    if clip is not None:
        cx, cy, cwid, chei = clip
        x0, y0 = max(x0, cx), max(y0, cy)
        x1, y1 = min(x1, cx + cwid), min(y1, cy + chei)
    if x0 >= x1 or y0 >= y1:
        return

    sub = mask.crop((x0 - x, y0 - y, x1 - x, y1 - y))
    img.paste(color, (x0, y0, x1, y1), sub)


def aligned_origin(box: Rect, text_size: Tuple[int, int], h_align: str, v_align: str) -> Tuple[int, int]:
    """Top-left corner for a text box of text_size aligned inside box."""
    bx, by, bw, bh = box
    tw, th = text_size

    if h_align == 'left':
        x = bx
    elif h_align == 'right':
        x = bx + bw - tw
    else:
        x = bx + (bw - tw) // 2

    if v_align == 'top':
        y = by
    elif v_align == 'bottom':
        y = by + bh - th
    else:
        y = by + (bh - th) // 2

    return x, y


def draw_aligned_text(img: Image.Image, text: str, font: FontFace, h_align: str = 'center',
                      v_align: str = 'center', padding: int = 0, color: int = 255):
    """
    Draw text aligned inside the canvas minus padding on all sides.

    Text wider than the content area is clipped to it.
    """
    w, h = img.size
    box = (padding, padding, w - 2 * padding, h - 2 * padding)
    if box[2] <= 0 or box[3] <= 0:
        return
    x, y = aligned_origin(box, font.measure(text), h_align, v_align)
    draw_text_at(img, text, font, x, y, clip=box, color=color)


def draw_text_in_rect(img: Image.Image, text: str, font: FontFace, rect: Rect,
                      h_align: str = 'center', v_align: str = 'center', color: int = 255):
    """Like draw_aligned_text, for an arbitrary content rectangle."""
    if rect[2] <= 0 or rect[3] <= 0:
        return
    x, y = aligned_origin(rect, font.measure(text), h_align, v_align)
    draw_text_at(img, text, font, x, y, clip=rect, color=color)
