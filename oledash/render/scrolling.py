"""
Drawing a single line of text through a TextScroller.
"""

from PIL import Image

from ..anim.scroller import TextScroller, CONTINUOUS
from ..bitmap.canvas import Rect
from ..bitmap.text import FontFace, aligned_origin, draw_text_at


def draw_scrolling_text(img: Image.Image, text: str, font: FontFace, rect: Rect,
                        scroller: TextScroller, offset: float, h_align: str = 'center',
                        v_align: str = 'center', color: int = 255):
    """
    Draw text shifted by offset inside rect.

    Text that fits is drawn aligned and unshifted. Overflowing text is
    anchored at the start of rect so that offset 0 shows its first pixel
    and the bounce maximum shows its last. In continuous mode a second
    copy follows gap pixels behind the first so the loop has no hole.
    """
    if not text or rect[2] <= 0 or rect[3] <= 0:
        return
    x, y, w, h = rect
    text_w, text_h = font.measure(text)
    tx, ty = aligned_origin(rect, (text_w, text_h), h_align, v_align)

    if scroller.horizontal:
        if text_w <= w:
            draw_text_at(img, text, font, tx, ty, clip=rect, color=color)
            return
        sx = x - int(offset)
        draw_text_at(img, text, font, sx, ty, clip=rect, color=color)
        if scroller.config.mode == CONTINUOUS:
            if scroller.config.direction == 'left':
                second = sx + text_w + scroller.config.gap
                if second < x + w:
                    draw_text_at(img, text, font, second, ty, clip=rect, color=color)
            else:
                second = sx - text_w - scroller.config.gap
                if second + text_w > x:
                    draw_text_at(img, text, font, second, ty, clip=rect, color=color)
    else:
        if text_h > h:
            ty = y
        draw_text_at(img, text, font, tx, ty - int(offset), clip=rect, color=color)
