"""
Pixel-level draw primitives on gray canvases

Every function takes the canvas first and clips to its bounds. Percentages
are clamped to 0..100 before use, so callers may pass raw values.
"""

import math
from typing import Sequence

from PIL import Image

from .canvas import Painter, clamp_percent

# Gauge geometry: the arc runs from GAUGE_START_DEG (left) to
# GAUGE_START_DEG + GAUGE_SWEEP_DEG (right) across the top of the rect.
GAUGE_START_DEG = 180.0
GAUGE_SWEEP_DEG = -180.0
GAUGE_ARC_STEP_DEG = 2.0
GAUGE_TICKS = 10
DUAL_GAUGE_INNER_RATIO = 0.6


def draw_rectangle(img: Image.Image, x: int, y: int, w: int, h: int, color: int):
    """Rectangle outline."""
    if w <= 0 or h <= 0:
        return
    p = Painter(img)
    for i in range(x, x + w):
        p.put(i, y, color)
        p.put(i, y + h - 1, color)
    for i in range(y, y + h):
        p.put(x, i, color)
        p.put(x + w - 1, i, color)


def fill_rectangle(img: Image.Image, x: int, y: int, w: int, h: int, color: int):
    if w <= 0 or h <= 0:
        return
    Painter(img).fill(x, y, w, h, color)


def draw_border(img: Image.Image, color: int):
    """Outline along the canvas perimeter."""
    w, h = img.size
    draw_rectangle(img, 0, 0, w, h, color)


def draw_line(img: Image.Image, x0: int, y0: int, x1: int, y1: int, color: int):
    """Bresenham line, both endpoints inclusive."""
    _line(Painter(img), x0, y0, x1, y1, color)


def _line(p: Painter, x0: int, y0: int, x1: int, y1: int, color: int):
    dx = abs(x1 - x0)
    dy = abs(y1 - y0)
    sx = 1 if x0 < x1 else -1
    sy = 1 if y0 < y1 else -1
    err = dx - dy

    while True:
        p.put(x0, y0, color)
        if x0 == x1 and y0 == y1:
            break
        e2 = 2 * err
        if e2 > -dy:
            err -= dy
            x0 += sx
        if e2 < dx:
            err += dx
            y0 += sy


def draw_circle(img: Image.Image, cx: int, cy: int, r: int, color: int):
    """Midpoint circle outline."""
    if r < 0:
        return
    p = Painter(img)
    x = 0
    y = r
    d = 1 - r
    while x <= y:
        for px, py in ((x, y), (-x, y), (x, -y), (-x, -y),
                       (y, x), (-y, x), (y, -x), (-y, -x)):
            p.put(cx + px, cy + py, color)
        x += 1
        if d < 0:
            d += 2 * x + 1
        else:
            y -= 1
            d += 2 * (x - y) + 1


def draw_triangle_meter(img: Image.Image, x: int, y: int, w: int, h: int,
                        pct: float, fill: int, border: bool = False):
    """
    Right-angled wedge rising from bottom-left to top-right, filled left to
    right up to pct. With border the unfilled part keeps a half-bright outline.
    """
    if w <= 0 or h <= 0:
        return
    pct = clamp_percent(pct)
    fill_w = int(w * pct / 100.0)
    outline = fill // 2
    p = Painter(img)
    for col in range(w):
        col_h = max(1, (col + 1) * h // w)
        top = y + h - col_h
        if col < fill_w:
            p.fill(x + col, top, 1, col_h, fill)
        elif border:
            p.put(x + col, top, outline)
            p.put(x + col, y + h - 1, outline)


def draw_mute_overlay(img: Image.Image, color: int = 128, thickness: int = 2):
    """Thick X across the whole canvas."""
    w, h = img.size
    p = Painter(img)
    for t in range(-thickness, thickness + 1):
        _line(p, 0, t, w - 1, h - 1 + t, color)
        _line(p, 0, h - 1 + t, w - 1, t, color)


def draw_horizontal_bar(img: Image.Image, x: int, y: int, w: int, h: int,
                        pct: float, fill: int, border: bool = False):
    """Fill left to right; with border the fill stays inside the outline."""
    if w <= 0 or h <= 0:
        return
    pct = clamp_percent(pct)
    p = Painter(img)
    if border:
        draw_rectangle(img, x, y, w, h, fill)
        fill_w = int((w - 2) * pct / 100.0)
        if fill_w > 0:
            p.fill(x + 1, y + 1, fill_w, h - 2, fill)
    else:
        fill_w = int(w * pct / 100.0)
        if fill_w > 0:
            p.fill(x, y, fill_w, h, fill)


def draw_vertical_bar(img: Image.Image, x: int, y: int, w: int, h: int,
                      pct: float, fill: int, border: bool = False):
    """Fill bottom to top; with border the fill stays inside the outline."""
    if w <= 0 or h <= 0:
        return
    pct = clamp_percent(pct)
    p = Painter(img)
    if border:
        draw_rectangle(img, x, y, w, h, fill)
        fill_h = int((h - 2) * pct / 100.0)
        if fill_h > 0:
            p.fill(x + 1, y + h - 1 - fill_h, w - 2, fill_h, fill)
    else:
        fill_h = int(h * pct / 100.0)
        if fill_h > 0:
            p.fill(x, y + h - fill_h, w, fill_h, fill)


def draw_dual_horizontal_bar(img: Image.Image, x: int, y: int, w: int, h: int,
                             primary: float, secondary: float,
                             primary_color: int, secondary_color: int, border: bool = False):
    """Left half shows primary, right half secondary."""
    half = w // 2
    draw_horizontal_bar(img, x, y, half, h, primary, primary_color, border)
    draw_horizontal_bar(img, x + half, y, w - half, h, secondary, secondary_color, border)


def draw_dual_vertical_bar(img: Image.Image, x: int, y: int, w: int, h: int,
                           primary: float, secondary: float,
                           primary_color: int, secondary_color: int, border: bool = False):
    """Top half shows primary, bottom half secondary; each fills bottom-up."""
    half = h // 2
    draw_vertical_bar(img, x, y, w, half, primary, primary_color, border)
    draw_vertical_bar(img, x, y + half, w, h - half, secondary, secondary_color, border)


def _graph_points(x: int, y: int, w: int, h: int, history: Sequence[float], history_len: int):
    if history_len < 1:
        history_len = len(history)
    samples = list(history)[-history_len:]
    if not samples:
        return []

    bottom = y + h - 1
    offset = history_len - len(samples)
    points = []
    for i, value in enumerate(samples):
        if history_len > 1:
            px = x + round((offset + i) * (w - 1) / (history_len - 1))
        else:
            px = x + w - 1
        py = bottom - round(clamp_percent(value) / 100.0 * (h - 1))
        points.append((px, py))
    return points


def _graph(p: Painter, points, bottom: int, fill: int, line: int):
    if fill >= 0:
        for i, (px, py) in enumerate(points):
            if i + 1 < len(points):
                nx, ny = points[i + 1]
            else:
                nx, ny = px, py
            span = nx - px
            for cx in range(px, nx + 1):
                cy = py if span == 0 else py + round((ny - py) * (cx - px) / span)
                for fy in range(cy, bottom + 1):
                    p.put(cx, fy, fill)
    if len(points) == 1:
        p.put(points[0][0], points[0][1], line)
    for (ax, ay), (bx, by) in zip(points, points[1:]):
        _line(p, ax, ay, bx, by, line)


def draw_graph(img: Image.Image, x: int, y: int, w: int, h: int,
               history: Sequence[float], history_len: int, fill: int, line: int):
    """
    Line graph of 0..100 samples, latest on the right.

    Sample i of a full history sits at column x + i*(w-1)/(history_len-1);
    value v maps to row bottom - round(v/100 * (h-1)). With fill >= 0 the
    area under the polyline is filled first and the line drawn over it.
    """
    if w <= 0 or h <= 0:
        return
    points = _graph_points(x, y, w, h, history, history_len)
    if points:
        _graph(Painter(img), points, y + h - 1, fill, line)


def draw_dual_graph(img: Image.Image, x: int, y: int, w: int, h: int,
                    primary: Sequence[float], secondary: Sequence[float], history_len: int,
                    primary_fill: int, primary_line: int, secondary_fill: int, secondary_line: int):
    """Two overlapping graphs; secondary is drawn on top of primary."""
    if w <= 0 or h <= 0:
        return
    p = Painter(img)
    for history, fill, line in ((primary, primary_fill, primary_line),
                                (secondary, secondary_fill, secondary_line)):
        points = _graph_points(x, y, w, h, history, history_len)
        if points:
            _graph(p, points, y + h - 1, fill, line)


def gauge_angle(pct: float) -> float:
    """Needle angle in degrees for a percentage (0% left, 100% right)."""
    return GAUGE_START_DEG + clamp_percent(pct) / 100.0 * GAUGE_SWEEP_DEG


def _polar(cx: int, cy: int, radius: float, angle_deg: float):
    rad = math.radians(angle_deg)
    return cx + int(radius * math.cos(rad)), cy - int(radius * math.sin(rad))


def _gauge_geometry(x: int, y: int, w: int, h: int):
    cx = x + w // 2
    cy = y + h - 3
    radius = h - 6
    if w // 2 < radius:
        radius = w // 2 - 3
    return cx, cy, radius


def _arc(p: Painter, cx: int, cy: int, radius: int, color: int):
    steps = int(abs(GAUGE_SWEEP_DEG) / GAUGE_ARC_STEP_DEG)
    direction = 1 if GAUGE_SWEEP_DEG > 0 else -1
    for i in range(steps + 1):
        px, py = _polar(cx, cy, radius, GAUGE_START_DEG + direction * i * GAUGE_ARC_STEP_DEG)
        p.put(px, py, color)


def _ticks(p: Painter, cx: int, cy: int, radius: int, color: int, every: int = 1,
           long_len: int = 5, short_len: int = 3):
    for tick in range(0, GAUGE_TICKS + 1, every):
        angle = GAUGE_START_DEG + tick * GAUGE_SWEEP_DEG / GAUGE_TICKS
        length = long_len if tick % 5 == 0 else short_len
        x1, y1 = _polar(cx, cy, radius, angle)
        x2, y2 = _polar(cx, cy, radius - length, angle)
        _line(p, x1, y1, x2, y2, color)


def _hub(p: Painter, cx: int, cy: int, color: int):
    for dy in (-1, 0, 1):
        for dx in (-1, 0, 1):
            p.put(cx + dx, cy + dy, color)


def draw_gauge(img: Image.Image, x: int, y: int, w: int, h: int, pct: float,
               arc_color: int, needle_color: int, show_ticks: bool = True, ticks_color: int = 150):
    """Semicircular gauge with optional ticks and a needle from the hub."""
    cx, cy, radius = _gauge_geometry(x, y, w, h)
    if radius <= 0:
        return
    p = Painter(img)
    _arc(p, cx, cy, radius, arc_color)
    if show_ticks:
        _ticks(p, cx, cy, radius, ticks_color)
    nx, ny = _polar(cx, cy, radius - 2, gauge_angle(pct))
    _line(p, cx, cy, nx, ny, needle_color)
    _hub(p, cx, cy, needle_color)


def draw_dual_gauge(img: Image.Image, x: int, y: int, w: int, h: int,
                    outer_pct: float, inner_pct: float,
                    outer_arc: int, outer_needle: int, inner_arc: int, inner_needle: int):
    """
    Concentric gauges: outer arc for the primary value, inner arc (60% of
    the outer radius) for the secondary one. The outer needle spans only the
    ring between the two arcs.
    """
    cx, cy, outer_r = _gauge_geometry(x, y, w, h)
    inner_r = int(outer_r * DUAL_GAUGE_INNER_RATIO)
    if outer_r <= 0 or inner_r <= 0:
        return
    p = Painter(img)
    _arc(p, cx, cy, outer_r, outer_arc)
    _arc(p, cx, cy, inner_r, inner_arc)
    _ticks(p, cx, cy, outer_r, outer_arc)
    _ticks(p, cx, cy, inner_r, inner_arc, every=2, long_len=2, short_len=2)

    angle = gauge_angle(outer_pct)
    sx, sy = _polar(cx, cy, inner_r, angle)
    ex, ey = _polar(cx, cy, outer_r - 2, angle)
    _line(p, sx, sy, ex, ey, outer_needle)

    ix, iy = _polar(cx, cy, inner_r - 2, gauge_angle(inner_pct))
    _line(p, cx, cy, ix, iy, inner_needle)
    _hub(p, cx, cy, inner_needle)
