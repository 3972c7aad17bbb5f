"""
Battery and level-bar shapes used by indicator widgets.
"""

from PIL import Image

from .canvas import Painter, clamp_percent
from .draw import draw_rectangle, fill_rectangle

BATTERY_NUB = 4
BATTERY_FILL_MARGIN = 2


def draw_battery(img: Image.Image, x: int, y: int, w: int, h: int, pct: float,
                 fill_color: int = 255, border_color: int = 255,
                 vertical: bool = False, padding: int = 0):
    """
    Battery outline with a terminal nub and a proportional fill.

    Horizontal batteries carry the nub on the right and fill left to right;
    vertical ones carry it on top and fill bottom-up. The body never shrinks
    below 8x6 (6x8 vertical), so very small regions overflow rather than
    vanish.

    Args:
        img: Target canvas
        x, y, w, h: Region to draw into
        pct: Charge level, clamped to 0..100
        fill_color: Gray level for the fill
        border_color: Gray level for the outline and nub
        vertical: Nub on top instead of on the right
        padding: Inset between the region edge and the outline
    """
    pct = int(clamp_percent(pct))
    if vertical:
        _battery_vertical(img, x, y, w, h, pct, fill_color, border_color, padding)
    else:
        _battery_horizontal(img, x, y, w, h, pct, fill_color, border_color, padding)


def _battery_horizontal(img, x, y, w, h, pct, fill_color, border_color, padding):
    bx = x + padding
    by = y + padding
    bw = max(8, w - padding * 2 - BATTERY_NUB - 1)
    bh = max(6, h - padding * 2)

    draw_rectangle(img, bx, by, bw, bh, border_color)

    nub_h = max(4, bh // 3)
    fill_rectangle(img, bx + bw, by + (bh - nub_h) // 2, BATTERY_NUB, nub_h, border_color)

    max_w = bw - 2 * BATTERY_FILL_MARGIN
    fill_w = int(max_w * pct / 100.0)
    if fill_w > 0:
        fill_rectangle(img, bx + BATTERY_FILL_MARGIN, by + BATTERY_FILL_MARGIN,
                       fill_w, bh - 2 * BATTERY_FILL_MARGIN, fill_color)


def _battery_vertical(img, x, y, w, h, pct, fill_color, border_color, padding):
    bx = x + padding
    by = y + padding + BATTERY_NUB + 1
    bw = max(6, w - padding * 2)
    bh = max(8, h - padding * 2 - BATTERY_NUB - 1)

    draw_rectangle(img, bx, by, bw, bh, border_color)

    nub_w = max(4, bw // 3)
    fill_rectangle(img, bx + (bw - nub_w) // 2, y + padding, nub_w, BATTERY_NUB, border_color)

    max_h = bh - 2 * BATTERY_FILL_MARGIN
    fill_h = int(max_h * pct / 100.0)
    if fill_h > 0:
        fill_rectangle(img, bx + BATTERY_FILL_MARGIN,
                       by + BATTERY_FILL_MARGIN + max_h - fill_h,
                       bw - 2 * BATTERY_FILL_MARGIN, fill_h, fill_color)


def draw_battery_token(img: Image.Image, x: int, y: int, shape_w: int, avail_h: int,
                       level: float, color: int, vertical: bool = False):
    """
    Battery sized for an inline token: shape_w wide, vertically centred in
    avail_h. Horizontal batteries are flattened to keep a sane aspect ratio.
    """
    if shape_w < 4 or avail_h < 4:
        return
    batt_h = avail_h
    if not vertical and batt_h > shape_w:
        batt_h = shape_w // 2
        if batt_h < 6:
            batt_h = min(avail_h, 6)
    batt_y = y + (avail_h - batt_h) // 2
    draw_battery(img, x, batt_y, shape_w, batt_h, level, color, color, vertical=vertical)


def draw_level_bar(img: Image.Image, x: int, y: int, bar_w: int, avail_h: int,
                   level: float, color: int, vertical: bool = False):
    """
    Outlined level bar sized for an inline token, two pixels shorter than
    avail_h at top and bottom. The fill only appears once it clears the
    outline.
    """
    if bar_w < 3 or avail_h < 3:
        return
    level = int(clamp_percent(level))
    bar_h = max(3, avail_h - 4)
    bar_y = y + (avail_h - bar_h) // 2

    draw_rectangle(img, x, bar_y, bar_w, bar_h, color)
    p = Painter(img)
    if vertical:
        fill_h = bar_h * level // 100
        if fill_h > 2:
            p.fill(x + 1, bar_y + bar_h - fill_h, bar_w - 2, fill_h - 1, color)
    else:
        fill_w = bar_w * level // 100
        if fill_w > 2:
            p.fill(x + 1, bar_y + 1, fill_w - 2, bar_h - 2, color)
