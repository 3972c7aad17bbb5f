"""
Tests for the composite token renderer.
"""

from oledash.bitmap.canvas import new_canvas
from oledash.bitmap.glyphs import Glyph
from oledash.render.composite import ICON_GAP, CompositeTokenRenderer, TokenResolver
from oledash.render.tokens import TokenType, parse_format_tokens

from conftest import lit_columns, pixels

ICON = Glyph.from_art('test', ['#' * 12] * 8)


def classify(name):
    return {'icon': TokenType.ICON, 'name': TokenType.TEXT, 'battery': TokenType.SHAPE}.get(
        name, TokenType.LITERAL)


class StubResolver(TokenResolver):
    def __init__(self, font):
        super().__init__(font)
        self.shapes = []

    def text_for(self, token):
        return 'BT' if token.name == 'name' else ''

    def icon_for(self, token):
        return ICON

    def draw_shape(self, img, token, x, y, width, height):
        self.shapes.append((x, width))
        img.paste(255, (x, y, x + width, y + height))


def make(fmt, h_align='center'):
    return CompositeTokenRenderer(parse_format_tokens(fmt, classify), h_align)


class TestLayout:

    def test_measured_widths(self, block_font):
        renderer = make("{icon} {name} {battery:20}")
        widths = renderer.measure(StubResolver(block_font), 60)
        assert widths == [12 + ICON_GAP, 5, 10, 5, 20]

    def test_center_start_and_integer_advances(self, block_font):
        renderer = make("{icon} {name} {battery:20}")
        positions = renderer.layout(StubResolver(block_font), (0, 0, 60, 8))
        total = 14 + 5 + 10 + 5 + 20
        assert positions[0] == (60 - total) // 2
        assert positions == [3, 17, 22, 32, 37]

    def test_left_and_right(self, block_font):
        resolver = StubResolver(block_font)
        assert make("{name}", 'left').layout(resolver, (2, 0, 40, 8)) == [2]
        assert make("{name}", 'right').layout(resolver, (2, 0, 40, 8)) == [32]

    def test_shape_width_capped_by_rect(self, block_font):
        widths = make("{battery:200}").measure(StubResolver(block_font), 30)
        assert widths == [30]


class TestBlinkStability:

    def test_hidden_token_keeps_positions(self, block_font):
        renderer = make("{icon} {name} {battery:20}")
        visible_img, hidden_img = new_canvas(60, 8), new_canvas(60, 8)
        shown = renderer.render(visible_img, (0, 0, 60, 8), StubResolver(block_font))
        resolver = StubResolver(block_font)
        hidden = renderer.render(hidden_img, (0, 0, 60, 8), resolver, hidden={0})

        assert shown == hidden
        assert resolver.shapes == [(37, 20)]
        # icon columns are dark, everything right of them is unchanged
        assert not any(x < 17 for x in lit_columns(hidden_img))
        assert [row[17:] for row in pixels(visible_img)] == [row[17:] for row in pixels(hidden_img)]

    def test_hidden_shape_is_not_drawn(self, block_font):
        renderer = make("{name} {battery:10}", 'left')
        resolver = StubResolver(block_font)
        renderer.render(new_canvas(40, 8), (0, 0, 40, 8), resolver, hidden={2})
        assert resolver.shapes == []
