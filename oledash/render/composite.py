"""
Composite token renderer

Lays out a parsed token list (icons, text and shapes) in one horizontal
flow. Rendering is two-pass: every token is measured first, the start x
is derived from the horizontal alignment, and then tokens are drawn left
to right. x always advances by the measured width, also for tokens that
are hidden this frame, so blinking never shifts the rest of the line.
"""

from typing import Collection, List, Optional

from PIL import Image

from ..bitmap.canvas import Rect
from ..bitmap.glyphs import Glyph, GlyphSet, draw_glyph
from ..bitmap.text import FontFace, draw_text_at
from .tokens import Token, TokenType

ICON_GAP = 2  # blank columns after every icon


def align_offset(extent: int, size: int, align: str) -> int:
    """Offset of an item of size inside extent for top/left, center, bottom/right."""
    if align in ('top', 'left'):
        return 0
    if align in ('bottom', 'right'):
        return extent - size
    return (extent - size) // 2


class TokenResolver:
    """
    Widget-specific knowledge the renderer needs about each token.

    The defaults draw literals in a single colour and resolve nothing else;
    widgets override text_for(), icon_for(), draw_shape() and the colour
    hooks.
    """

    def __init__(self, font: FontFace, icon_set: Optional[GlyphSet] = None,
                 v_align: str = 'center', color: int = 255):
        self.font = font
        self.icon_set = icon_set
        self.v_align = v_align
        self.color = color

    # Resolution hooks
    def text_for(self, token: Token) -> str:
        return ''

    def icon_for(self, token: Token) -> Optional[Glyph]:
        return None

    def literal_color(self, token: Token) -> int:
        return self.color

    def text_color(self, token: Token) -> int:
        return self.color

    def icon_color(self, token: Token) -> int:
        return self.color

    def shape_width(self, token: Token, content_w: int) -> int:
        return max(0, min(token.int_param(), content_w))

    def draw_shape(self, img: Image.Image, token: Token, x: int, y: int, width: int, height: int):
        pass

    # Measurement and drawing
    def measure(self, token: Token, content_w: int) -> int:
        if token.type == TokenType.LITERAL:
            return self.font.measure(token.text)[0] if token.text else 0
        if token.type == TokenType.TEXT:
            text = self.text_for(token)
            return self.font.measure(text)[0] if text else 0
        if token.type == TokenType.ICON:
            glyph = self.icon_for(token)
            return glyph.width + ICON_GAP if glyph is not None else 0
        if token.type == TokenType.SHAPE:
            return self.shape_width(token, content_w)
        return 0

    def draw(self, img: Image.Image, token: Token, x: int, rect: Rect, width: int):
        _, y, _, h = rect
        if token.type == TokenType.LITERAL:
            self._draw_text(img, token.text, x, rect, self.literal_color(token))
        elif token.type == TokenType.TEXT:
            self._draw_text(img, self.text_for(token), x, rect, self.text_color(token))
        elif token.type == TokenType.ICON:
            glyph = self.icon_for(token)
            color = self.icon_color(token)
            if glyph is not None and color >= 0:
                draw_glyph(img, glyph, x, y + align_offset(h, glyph.height, self.v_align), color)
        elif token.type == TokenType.SHAPE and width > 0:
            self.draw_shape(img, token, x, y, width, h)

    def _draw_text(self, img: Image.Image, text: str, x: int, rect: Rect, color: int):
        if not text or color < 0:
            return
        _, y, _, h = rect
        top = y + align_offset(h, self.font.height, self.v_align)
        draw_text_at(img, text, self.font, x, top, clip=rect, color=color)


class CompositeTokenRenderer:
    """
    Args:
        tokens: Parsed format tokens
        h_align: left, center or right within the content rect
    """

    def __init__(self, tokens: List[Token], h_align: str = 'center'):
        self.tokens = tokens
        self.h_align = h_align

    def measure(self, resolver: TokenResolver, content_w: int) -> List[int]:
        return [resolver.measure(t, content_w) for t in self.tokens]

    def start_x(self, rect: Rect, total: int) -> int:
        x, _, w, _ = rect
        if self.h_align == 'left':
            return x
        return max(x, x + align_offset(w, total, self.h_align))

    def layout(self, resolver: TokenResolver, rect: Rect) -> List[int]:
        """X position of every token for this frame."""
        widths = self.measure(resolver, rect[2])
        positions = []
        cur = self.start_x(rect, sum(widths))
        for width in widths:
            positions.append(cur)
            cur += width
        return positions

    def render(self, img: Image.Image, rect: Rect, resolver: TokenResolver,
               hidden: Collection[int] = ()) -> List[int]:
        """
        Draw all tokens into rect, skipping the indices in hidden.

        Returns:
            The x position assigned to each token
        """
        widths = self.measure(resolver, rect[2])
        positions = []
        cur = self.start_x(rect, sum(widths))
        for i, (token, width) in enumerate(zip(self.tokens, widths)):
            positions.append(cur)
            if i not in hidden:
                resolver.draw(img, token, cur, rect, width)
            cur += width
        return positions
