"""
Font loading, measurement and masks with PIL's own fonts.
"""

import logging

import pytest
from PIL import features

from oledash.bitmap import text as bitmap_text
from oledash.bitmap.canvas import new_canvas
from oledash.bitmap.text import FontFace, clear_font_cache, draw_text_at, load_font
from oledash.render.config_helper import ConfigHelper

from conftest import lit_columns, widget_config

pytestmark = pytest.mark.real_fonts

MISSING = 'no-such-font-anywhere.ttf'


@pytest.fixture(autouse=True)
def fresh_cache():
    clear_font_cache()
    yield
    clear_font_cache()


class TestLoadFont:

    def test_missing_font_falls_back_to_default(self, caplog):
        with caplog.at_level(logging.WARNING, logger='oledash.bitmap.text'):
            face = load_font(MISSING, 12)
        assert isinstance(face, FontFace)
        assert face.name == MISSING
        assert face.size == 12
        assert 'using default font' in caplog.text

    def test_default_name_loads(self):
        face = load_font()
        assert face.height > 0
        assert face.measure('12:34')[0] > 0

    def test_cached_per_name_and_size(self):
        face = load_font(MISSING, 12)
        assert load_font(MISSING, 12) is face
        assert load_font(MISSING, 14) is not face

    def test_clear_cache(self):
        face = load_font(MISSING, 12)
        clear_font_cache()
        assert load_font(MISSING, 12) is not face

    @pytest.mark.skipif(not features.check('freetype2'), reason="needs FreeType")
    def test_fallback_honours_size(self):
        assert load_font(MISSING, 24).height > load_font(MISSING, 10).height

    def test_config_helper_uses_loader(self):
        cfg = widget_config(text={'font': MISSING, 'size': 11})
        assert ConfigHelper(cfg).load_font() is bitmap_text.load_font(MISSING, 11)


class TestMeasure:

    def test_empty_text_keeps_line_height(self):
        face = load_font(MISSING, 12)
        assert face.measure('') == (0, face.height)

    def test_height_is_ascent_plus_descent(self):
        face = load_font(MISSING, 12)
        assert face.height == face.ascent + face.descent
        assert face.measure('Ag')[1] == face.height
        assert face.measure('--')[1] == face.height

    def test_width_grows_with_text(self):
        face = load_font(MISSING, 12)
        one = face.measure('W')[0]
        assert one > 0
        assert face.measure('WWW')[0] > one


class TestMask:

    def test_mask_is_one_bit(self):
        face = load_font(MISSING, 12)
        mask = face.render_mask('Hello')
        assert mask.mode == 'L'
        assert mask.size == face.measure('Hello')
        values = set(mask.getdata())
        assert values <= {0, 255}
        assert 255 in values

    def test_empty_mask(self):
        face = load_font(MISSING, 12)
        mask = face.render_mask('')
        assert mask.size == (1, face.height)
        assert set(mask.getdata()) == {0}

    def test_draw_uses_single_gray_level(self):
        face = load_font(MISSING, 12)
        img = new_canvas(60, 20)
        draw_text_at(img, 'Hi', face, 2, 2, color=200)
        assert set(img.getdata()) == {0, 200}
        assert min(lit_columns(img)) >= 2

    def test_draw_respects_clip(self):
        face = load_font(MISSING, 12)
        img = new_canvas(60, 20)
        draw_text_at(img, 'MMMMMMMM', face, 0, 0, clip=(0, 0, 10, 20))
        assert max(lit_columns(img)) < 10
