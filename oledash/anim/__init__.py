"""
Time-driven animation: scrolling, blinking, sprite sequencing and frame
transitions.
"""

from .scroller import TextScroller, ScrollerConfig, SCROLL_MODES, SCROLL_DIRECTIONS
from .blink import BlinkAnimator, BlinkMode
from .sleepy import SleepyAnimator, FRAME_OPEN, FRAME_HALF, FRAME_CLOSED
from .transition import (
    TransitionManager, apply_transition, select_transition, generate_pixel_order,
    clock_angle, ALL_TRANSITIONS, TRANSITION_TYPES, BAYER_8X8,
)
