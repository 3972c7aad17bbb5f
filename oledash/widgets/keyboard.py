"""
Keyboard lock indicator widget
"""

import logging
from typing import Optional

from PIL import Image

from ..bitmap.glyphs import KEYBOARD_ICONS, Glyph, get_icon, select_icon_set
from ..config import widgets as widget_defaults
from ..readers.keyboard import KeyboardLockReader
from ..render.composite import CompositeTokenRenderer, TokenResolver
from ..render.config_helper import ConfigHelper
from ..render.tokens import Token, TokenType, parse_format_tokens
from .base_widget import BaseWidget
from .registry import register

logger = logging.getLogger(__name__)

LOCKS = ('caps', 'num', 'scroll')


class KeyboardResolver(TokenResolver):
    def __init__(self, font, icon_set, v_align: str, states, labels, color_on: int, color_off: int):
        super().__init__(font, icon_set, v_align, color_on)
        self.states = states
        self.labels = labels
        self.color_on = color_on
        self.color_off = color_off

    def _colour(self, name: str) -> int:
        return self.color_on if self.states.get(name) else self.color_off

    def text_for(self, token: Token) -> str:
        on, off = self.labels.get(token.name, ('', ''))
        return on if self.states.get(token.name) else off

    def text_color(self, token: Token) -> int:
        return self._colour(token.name)

    def icon_for(self, token: Token) -> Optional[Glyph]:
        suffix = 'on' if self.states.get(token.name) else 'off'
        return get_icon(self.icon_set, f"{token.name}_{suffix}")

    def icon_color(self, token: Token) -> int:
        return self._colour(token.name)


@register('keyboard')
class KeyboardWidget(BaseWidget):
    """
    Caps, num and scroll lock state.

    text.format places the indicators (default "{caps}{num}{scroll}").
    Each lock is drawn as an icon unless params.indicators.<lock> gives
    "on"/"off" strings, in which case that text is drawn instead. Colours
    come from params.colors {on, off}; -1 skips drawing that state.
    """

    def __init__(self, cfg, reader=None):
        super().__init__(cfg)
        helper = ConfigHelper(cfg)

        indicators = helper.section('indicators')
        self.labels = {}
        for name in LOCKS:
            spec = indicators.get(name)
            if isinstance(spec, dict) and ('on' in spec or 'off' in spec):
                self.labels[name] = (str(spec.get('on') or ''), str(spec.get('off') or ''))

        def classify(name: str) -> TokenType:
            if name not in LOCKS:
                return TokenType.LITERAL
            return TokenType.TEXT if name in self.labels else TokenType.ICON

        self.format = helper.text_format(widget_defaults.KEYBOARD_FORMAT)
        self.tokens = parse_format_tokens(self.format, classify)
        self.layout = CompositeTokenRenderer(self.tokens, cfg.text.h_align)

        colors = helper.section('colors')
        self.color_on = int(colors.get('on', widget_defaults.COLOR_ON))
        self.color_off = int(colors.get('off', widget_defaults.COLOR_OFF))

        self.font = helper.load_font()
        self.v_align = cfg.text.v_align
        self.icon_set = select_icon_set(KEYBOARD_ICONS, self.get_content_area()[3])

        self.reader = reader if reader is not None else KeyboardLockReader()
        self._states = dict.fromkeys(LOCKS, False)

    def update(self):
        caps, num, scroll = self.reader.sample()
        with self._lock:
            self._states = {'caps': caps, 'num': num, 'scroll': scroll}

    def render(self) -> Image.Image:
        with self._lock:
            states = dict(self._states)

        img = self.create_canvas()
        self.apply_border(img)
        resolver = KeyboardResolver(self.font, self.icon_set, self.v_align, states, self.labels,
                                    self.color_on, self.color_off)
        self.layout.render(img, self.get_content_area(), resolver)
        return img

    def close(self):
        self.reader.close()
