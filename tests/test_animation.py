"""
Tests for the scroll, blink and sleepy animators, and for drawing scrolled text.
"""

import random

import pytest

from oledash.anim.blink import BlinkAnimator, BlinkMode
from oledash.anim.scroller import BOUNCE, CONTINUOUS, PAUSE_ENDS, ScrollerConfig, TextScroller
from oledash.anim.sleepy import FRAME_CLOSED, FRAME_HALF, FRAME_OPEN, SleepyAnimator
from oledash.bitmap.canvas import new_canvas
from oledash.render.scrolling import draw_scrolling_text

from conftest import lit_columns


def scroller(mode=CONTINUOUS, direction='left', speed=10.0, gap=5, pause_ms=1000):
    return TextScroller(ScrollerConfig(speed=speed, mode=mode, direction=direction,
                                       gap=gap, pause_ms=pause_ms))


class TestTextScroller:

    def test_fitting_text_does_not_move(self):
        s = scroller()
        assert s.update(10, 20, 5.0) == 0.0

    def test_continuous_wraps_at_text_plus_gap(self):
        s = scroller()
        assert s.update(50, 20, 1.0) == pytest.approx(10.0)
        assert s.update(50, 20, 5.0) == pytest.approx(5.0)

    def test_continuous_right_runs_negative(self):
        s = scroller(direction='right')
        assert s.update(50, 20, 1.0) == pytest.approx(-10.0)
        assert s.update(50, 20, 5.0) == pytest.approx(-5.0)

    def test_bounce_reverses_without_pause(self):
        s = scroller(mode=BOUNCE)
        assert s.update(50, 20, 2.0) == pytest.approx(20.0)
        assert s.update(50, 20, 2.0) == pytest.approx(30.0)
        assert s.update(50, 20, 1.0) == pytest.approx(20.0)
        assert s.update(50, 20, 3.0) == pytest.approx(0.0)
        assert s.update(50, 20, 1.0) == pytest.approx(10.0)

    def test_pause_ends_holds_at_the_end(self):
        s = scroller(mode=PAUSE_ENDS)
        assert s.update(50, 20, 3.0) == pytest.approx(30.0)
        assert s.paused
        assert s.update(50, 20, 0.5) == pytest.approx(30.0)
        assert s.update(50, 20, 1.0) == pytest.approx(25.0)
        assert not s.paused

    def test_end_pause_elapses_at_zero_speed(self):
        s = scroller(mode=PAUSE_ENDS)
        s.update(50, 20, 3.0)
        assert s.paused
        s.config.speed = 0.0
        assert s.update(50, 20, 1.0) == pytest.approx(30.0)
        assert not s.paused

    def test_tick_uses_elapsed_time(self):
        s = scroller()
        assert s.tick(50, 20, now=100.0) == 0.0
        assert s.tick(50, 20, now=101.0) == pytest.approx(10.0)

    def test_reset(self):
        s = scroller()
        s.update(50, 20, 1.0)
        s.reset()
        assert s.offset == 0.0
        assert s.tick(50, 20, now=5.0) == 0.0


class TestScrollingText:

    TEXT = 'ABCDEFGH'  # 40px wide in the block font

    def draw(self, font, offset, mode=BOUNCE, h_align='center'):
        img = new_canvas(28, 8)
        draw_scrolling_text(img, self.TEXT, font, (0, 0, 28, 8), scroller(mode=mode), offset,
                            h_align=h_align)
        return img

    def test_first_glyph_fully_visible_at_start(self, block_font):
        assert lit_columns(self.draw(block_font, 0))[:4] == [0, 1, 2, 3]

    def test_last_glyph_fully_visible_at_max_offset(self, block_font):
        cols = lit_columns(self.draw(block_font, 40 - 28))
        assert cols[-4:] == [23, 24, 25, 26]
        assert 27 not in cols

    def test_alignment_ignored_when_overflowing(self, block_font):
        left = self.draw(block_font, 5, h_align='left')
        right = self.draw(block_font, 5, h_align='right')
        assert left.tobytes() == right.tobytes() == self.draw(block_font, 5).tobytes()

    def test_fitting_text_stays_aligned(self, block_font):
        img = new_canvas(28, 8)
        draw_scrolling_text(img, 'AB', block_font, (0, 0, 28, 8), scroller(mode=BOUNCE), 0,
                            h_align='right')
        assert lit_columns(img) == [18, 19, 20, 21, 23, 24, 25, 26]


class TestBlinkAnimator:

    def test_first_half_visible(self):
        blink = BlinkAnimator(BlinkMode.ALWAYS, 0.5)
        assert blink.should_render()
        blink.update(0.6)
        assert not blink.should_render()
        blink.update(0.5)
        assert blink.should_render()

    def test_tick(self):
        blink = BlinkAnimator(BlinkMode.ALWAYS, 0.5)
        blink.tick(10.0)
        blink.tick(10.7)
        assert not blink.should_render()

    def test_conditional_only_while_active(self):
        blink = BlinkAnimator(BlinkMode.CONDITIONAL, 0.5)
        blink.update(0.6)
        assert blink.should_render()
        blink.set_active(True)
        blink.update(0.6)
        assert not blink.should_render()

    def test_never(self):
        blink = BlinkAnimator('never', 0.5)
        blink.update(0.7)
        assert blink.should_render()

    def test_progressive_interval(self):
        blink = BlinkAnimator(BlinkMode.PROGRESSIVE, 1.0)
        assert blink.current_interval(1) == pytest.approx(1.0)
        assert blink.current_interval(3) == pytest.approx(0.8)
        assert blink.current_interval(20) == pytest.approx(0.1)
        assert blink.current_interval(0) == 0.0


class TestSleepyAnimator:

    def test_falls_asleep_over_three_frames(self):
        anim = SleepyAnimator(awake=True, rng=random.Random(0), now=0.0)
        anim.set_awake(False, now=10.0)
        assert anim.sleeping
        assert anim.frame(10.0) == FRAME_OPEN
        assert anim.frame(10.3) == FRAME_HALF
        assert anim.frame(10.6) == FRAME_CLOSED
        assert anim.frame(30.0) == FRAME_CLOSED

    def test_wakes_up(self):
        anim = SleepyAnimator(awake=False, rng=random.Random(0), now=0.0)
        assert anim.frame(1.0) == FRAME_CLOSED
        anim.set_awake(True, now=20.0)
        assert anim.frame(20.0) == FRAME_CLOSED
        assert anim.frame(20.2) == FRAME_HALF
        assert anim.frame(20.35) == FRAME_OPEN
        assert anim.frame(20.5) == FRAME_OPEN

    def test_blinks_while_awake(self):
        anim = SleepyAnimator(awake=True, rng=random.Random(0), now=0.0)
        assert anim.frame(1.0) == FRAME_OPEN
        assert anim.frame(5.0) == FRAME_OPEN
        assert anim.frame(5.06) == FRAME_HALF
        assert anim.frame(5.1) == FRAME_CLOSED
        assert anim.frame(5.25) == FRAME_OPEN

    def test_same_state_is_ignored(self):
        anim = SleepyAnimator(awake=True, rng=random.Random(0), now=0.0)
        anim.set_awake(True, now=1.0)
        assert anim.frame(1.0) == FRAME_OPEN
