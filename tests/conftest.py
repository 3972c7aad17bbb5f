"""
Pytest configuration and fixtures.
"""

from typing import List

import pytest
from PIL import Image

from oledash.bitmap import text as bitmap_text
from oledash.bitmap.text import FontFace
from oledash.config.model import WidgetConfig


class BlockFont(FontFace):
    """
    Fixed-width synthetic font: every character is CHAR_W x HEIGHT pixels,
    drawn as a solid block one column narrower than its cell. Spaces are
    blank. Keeps pixel assertions independent of installed fonts.
    """

    CHAR_W = 5
    HEIGHT = 8

    def __init__(self, size: int = 8):
        self.font = None
        self.name = 'block'
        self.size = size
        self.ascent = self.HEIGHT
        self.descent = 0

    def measure(self, text: str):
        return len(text) * self.CHAR_W, self.HEIGHT

    def render_mask(self, text: str) -> Image.Image:
        w, h = self.measure(text)
        mask = Image.new('L', (max(1, w), h), 0)
        for i, ch in enumerate(text):
            if ch != ' ':
                mask.paste(255, (i * self.CHAR_W, 0, (i + 1) * self.CHAR_W - 1, h))
        return mask


@pytest.fixture(autouse=True)
def block_font(request, monkeypatch):
    """Every font lookup returns the block font, except in tests marked real_fonts."""
    if request.node.get_closest_marker('real_fonts'):
        return None
    font = BlockFont()
    monkeypatch.setattr(bitmap_text, 'load_font', lambda name='', size=10: font)
    return font


def widget_config(**data) -> WidgetConfig:
    """WidgetConfig from keyword fields, with an id, type and 64x16 position by default."""
    data.setdefault('id', 'w')
    data.setdefault('type', 'cpu')
    data.setdefault('position', {'x': 0, 'y': 0, 'w': 64, 'h': 16})
    return WidgetConfig.from_dict(data)


def pixels(img: Image.Image) -> List[List[int]]:
    """Canvas as rows of ints, indexed [y][x]."""
    w, h = img.size
    data = img.tobytes()
    return [list(data[y * w:(y + 1) * w]) for y in range(h)]


def lit_columns(img: Image.Image) -> List[int]:
    """Sorted x positions that contain at least one non-zero pixel."""
    rows = pixels(img)
    return sorted({x for row in rows for x, v in enumerate(row) if v})


def solid(width: int, height: int, value: int) -> Image.Image:
    return Image.new('L', (width, height), value)


class FakeReader:
    """sample() returns queued values in order, repeating the last one."""

    def __init__(self, *values):
        self.values = list(values)
        self.closed = False

    def sample(self):
        value = self.values[0]
        if len(self.values) > 1:
            self.values.pop(0)
        if isinstance(value, Exception):
            raise value
        return value

    def close(self):
        self.closed = True


class RecordingSink:
    """Sink that keeps every delivered frame."""

    def __init__(self, ok: bool = True):
        self.ok = ok
        self.frames: List[Image.Image] = []
        self.initialized = False
        self.cleaned_up = 0

    def initialize(self) -> bool:
        self.initialized = self.ok
        return self.ok

    def deliver_frame(self, img: Image.Image):
        self.frames.append(img.copy())

    def cleanup(self):
        self.cleaned_up += 1
