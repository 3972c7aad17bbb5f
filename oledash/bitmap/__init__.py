"""
Drawing on 8-bit gray canvases: primitives, text, shapes and icons.
"""

from .canvas import (
    CANVAS_MODE, Rect, new_canvas, clamp_color, clamp_percent, set_pixel,
    Painter, canvas_rows, pack_1bit,
)
from .draw import (
    draw_rectangle, fill_rectangle, draw_border, draw_line, draw_circle,
    draw_horizontal_bar, draw_vertical_bar, draw_dual_horizontal_bar, draw_dual_vertical_bar,
    draw_graph, draw_dual_graph, draw_gauge, draw_dual_gauge, gauge_angle,
)
from .text import FontFace, load_font, draw_text_at, draw_aligned_text, draw_text_in_rect, aligned_origin
from .shapes import draw_battery, draw_battery_token, draw_level_bar
from .glyphs import (
    Glyph, GlyphSet, draw_glyph, get_icon, select_icon_set, icon_size_for_height,
    BLUETOOTH_ICONS, KEYBOARD_ICONS, MASCOT_SPRITES,
)
