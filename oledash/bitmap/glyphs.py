"""
Bitmap icon sets

Icons are drawn as string art ('#' = lit pixel) at 8 pixels high and
scaled nearest-neighbour to the 12 and 16 pixel sets. Widgets pick a set
from their content height:

    height >= ICON_SIZE_LARGE (16)  -> 16 pixel icons
    height >= ICON_SIZE_MEDIUM (12) -> 12 pixel icons
    otherwise                       ->  8 pixel icons
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence

from PIL import Image

from ..config import widgets as widget_defaults

BASE_SIZE = 8


@dataclass
class Glyph:
    """A single icon. mask is an 'L' image, 255 where the pixel is lit."""
    name: str
    mask: Image.Image

    @property
    def width(self) -> int:
        return self.mask.size[0]

    @property
    def height(self) -> int:
        return self.mask.size[1]

    @classmethod
    def from_art(cls, name: str, rows: Sequence[str]) -> 'Glyph':
        width = max(len(r) for r in rows)
        mask = Image.new('L', (width, len(rows)), 0)
        px = mask.load()
        for y, row in enumerate(rows):
            for x, ch in enumerate(row):
                if ch == '#':
                    px[x, y] = 255
        return cls(name, mask)

    def scaled(self, size: int) -> 'Glyph':
        """Nearest-neighbour copy scaled so that an 8 px glyph becomes size px."""
        if size == BASE_SIZE:
            return self
        w = max(1, round(self.width * size / BASE_SIZE))
        h = max(1, round(self.height * size / BASE_SIZE))
        return Glyph(self.name, self.mask.resize((w, h), Image.NEAREST))


@dataclass
class GlyphSet:
    name: str
    size: int
    icons: Dict[str, Glyph] = field(default_factory=dict)

    def get(self, name: str) -> Optional[Glyph]:
        return self.icons.get(name)

    def names(self) -> List[str]:
        return sorted(self.icons)


def draw_glyph(img: Image.Image, glyph: Optional[Glyph], x: int, y: int, color: int = 255):
    """Draw a glyph with its top-left at (x, y), clipped to the canvas."""
    if glyph is None:
        return
    cw, ch = img.size
    x0, y0 = max(0, x), max(0, y)
    x1, y1 = min(cw, x + glyph.width), min(ch, y + glyph.height)
    if x0 >= x1 or y0 >= y1:
        return
    sub = glyph.mask.crop((x0 - x, y0 - y, x1 - x, y1 - y))
    img.paste(color, (x0, y0, x1, y1), sub)


def get_icon(icon_set: Optional[GlyphSet], name: str) -> Optional[Glyph]:
    if icon_set is None:
        return None
    return icon_set.get(name)


# =============================================================================
# Art
# =============================================================================
_BLUETOOTH_ART = {
    'bt_generic': [
        "..#...",
        "..##..",
        "#.#.#.",
        ".###..",
        ".###..",
        "#.#.#.",
        "..##..",
        "..#...",
    ],
    'bt_off': [
        "..#.....",
        "..##....",
        "#.#.#...",
        ".###.#.#",
        ".###..#.",
        "#.#.##.#",
        "..##....",
        "..#.....",
    ],
    'bt_unknown': [
        ".###.",
        "#...#",
        "....#",
        "...#.",
        "..#..",
        "..#..",
        ".....",
        "..#..",
    ],
    'bt_headphones': [
        ".####.",
        "#....#",
        "#....#",
        "#....#",
        "##..##",
        "##..##",
        "##..##",
        "......",
    ],
    'bt_microphone': [
        "..##..",
        ".####.",
        ".####.",
        "#.##.#",
        "#.##.#",
        ".#..#.",
        "..##..",
        ".####.",
    ],
    'bt_keyboard': [
        "........",
        "########",
        "#.#.#.##",
        "########",
        "##.#.#.#",
        "########",
        "#......#",
        "########",
    ],
    'bt_mouse': [
        "..#...",
        ".###..",
        "#.#.#.",
        "#####.",
        "#...#.",
        "#...#.",
        ".###..",
        "......",
    ],
    'bt_gamepad': [
        "........",
        ".######.",
        "#.#..#.#",
        "###.#.##",
        "#.#..#.#",
        "########",
        "##....##",
        "........",
    ],
    'bt_computer': [
        "########",
        "#......#",
        "#......#",
        "#......#",
        "########",
        "...##...",
        ".######.",
        "........",
    ],
    'bt_phone': [
        ".####.",
        "#....#",
        "#....#",
        "#....#",
        "#....#",
        "#....#",
        "#.##.#",
        ".####.",
    ],
}

_KEYBOARD_ART = {
    'caps_on': [
        "########",
        "###..###",
        "##.##.##",
        "##.##.##",
        "##....##",
        "##.##.##",
        "##.##.##",
        "########",
    ],
    'caps_off': [
        "########",
        "#..##..#",
        "#.#..#.#",
        "#.#..#.#",
        "#.####.#",
        "#.#..#.#",
        "#......#",
        "########",
    ],
    'num_on': [
        "########",
        "####.###",
        "###..###",
        "####.###",
        "####.###",
        "####.###",
        "###...##",
        "########",
    ],
    'num_off': [
        "########",
        "#...#..#",
        "#..##..#",
        "#...#..#",
        "#...#..#",
        "#...#..#",
        "#..###.#",
        "########",
    ],
    'scroll_on': [
        "########",
        "##....##",
        "#.######",
        "##...###",
        "#####.##",
        "#.....##",
        "########",
        "########",
    ],
    'scroll_off': [
        "########",
        "#.####.#",
        "##.....#",
        "#.###..#",
        "#.....##",
        "#.####.#",
        "#......#",
        "########",
    ],
}

# Mascot eyes: open, half, closed, plus the sleeping "z"
_MASCOT_ART = {
    'eyes_open': [
        "..###......###..",
        ".#...#....#...#.",
        ".#.#.#....#.#.#.",
        ".#.#.#....#.#.#.",
        ".#...#....#...#.",
        "..###......###..",
        "................",
        "................",
    ],
    'eyes_half': [
        "................",
        "................",
        ".#####....#####.",
        ".#.#.#....#.#.#.",
        ".#...#....#...#.",
        "..###......###..",
        "................",
        "................",
    ],
    'eyes_closed': [
        "................",
        "................",
        "................",
        "................",
        ".#...#....#...#.",
        "..###......###..",
        "................",
        "................",
    ],
    'zzz': [
        ".....",
        "#####",
        "...#.",
        "..#..",
        ".#...",
        "#####",
        ".....",
        ".....",
    ],
}


def _build_sets(prefix: str, art: Dict[str, List[str]]) -> Dict[int, GlyphSet]:
    base = {name: Glyph.from_art(name, rows) for name, rows in art.items()}
    sets = {}
    for size in (BASE_SIZE, widget_defaults.ICON_SIZE_MEDIUM, widget_defaults.ICON_SIZE_LARGE):
        sets[size] = GlyphSet(f"{prefix}_{size}x{size}", size,
                              {name: g.scaled(size) for name, g in base.items()})
    return sets


BLUETOOTH_ICONS = _build_sets('bluetooth', _BLUETOOTH_ART)
KEYBOARD_ICONS = _build_sets('keyboard', _KEYBOARD_ART)
MASCOT_SPRITES = _build_sets('mascot', _MASCOT_ART)


def icon_size_for_height(height: int) -> int:
    if height >= widget_defaults.ICON_SIZE_LARGE:
        return widget_defaults.ICON_SIZE_LARGE
    if height >= widget_defaults.ICON_SIZE_MEDIUM:
        return widget_defaults.ICON_SIZE_MEDIUM
    return BASE_SIZE


def select_icon_set(sets: Dict[int, GlyphSet], height: int) -> GlyphSet:
    """Pick the icon set that fits a content area of the given height."""
    return sets[icon_size_for_height(height)]
