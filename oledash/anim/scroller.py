"""
Text scroll animator
"""

import time
from dataclasses import dataclass
from typing import Optional

from ..config import widgets as widget_defaults

CONTINUOUS = 'continuous'
BOUNCE = 'bounce'
PAUSE_ENDS = 'pause_ends'

SCROLL_MODES = (CONTINUOUS, BOUNCE, PAUSE_ENDS)
SCROLL_DIRECTIONS = ('left', 'right', 'up', 'down')


@dataclass
class ScrollerConfig:
    speed: float = widget_defaults.SCROLL_SPEED  # pixels per second
    mode: str = widget_defaults.SCROLL_MODE
    direction: str = widget_defaults.SCROLL_DIRECTION
    gap: int = widget_defaults.SCROLL_GAP
    pause_ms: int = widget_defaults.SCROLL_PAUSE_MS

    @classmethod
    def from_settings(cls, settings) -> 'ScrollerConfig':
        """Build from a ScrollSettings record."""
        return cls(speed=settings.speed, mode=settings.mode, direction=settings.direction,
                   gap=settings.gap, pause_ms=settings.pause_ms)


class TextScroller:
    """
    Pixel offset of a scrolling line of text.

    continuous: the offset grows without bound and wraps at
    content + gap, so a renderer drawing the text twice (gap apart) loops
    seamlessly. Directions right and down run the offset negative.

    bounce: the offset runs back and forth over [0, content - container]
    and reverses immediately at either end.

    pause_ends: like bounce, but holds pause_ms at each end before
    reversing.

    When the content fits in the container the offset is always 0.
    """

    def __init__(self, config: Optional[ScrollerConfig] = None):
        self.config = config or ScrollerConfig()
        self.offset = 0.0
        self._dir = 1
        self._pause_left = 0.0
        self._last_tick: Optional[float] = None

    @property
    def horizontal(self) -> bool:
        return self.config.direction in ('left', 'right')

    @property
    def paused(self) -> bool:
        return self._pause_left > 0

    def reset(self):
        self.offset = 0.0
        self._dir = 1
        self._pause_left = 0.0
        self._last_tick = None

    def tick(self, content_size: int, container_size: int, now: Optional[float] = None) -> float:
        """Advance by the wall time elapsed since the previous tick."""
        now = time.monotonic() if now is None else now
        dt = 0.0 if self._last_tick is None else max(0.0, now - self._last_tick)
        self._last_tick = now
        return self.update(content_size, container_size, dt)

    def update(self, content_size: int, container_size: int, dt: float) -> float:
        """
        Advance the offset by dt seconds.

        Returns:
            The new offset in pixels
        """
        if content_size <= container_size:
            self.offset = 0.0
            return self.offset

        mode = self.config.mode
        if mode == BOUNCE:
            self._update_bounce(dt, content_size - container_size, hold=False)
        elif mode == PAUSE_ENDS:
            self._update_bounce(dt, content_size - container_size, hold=True)
        else:
            self._update_continuous(self.config.speed * dt, content_size)
        return self.offset

    def _update_continuous(self, movement: float, content_size: int):
        period = float(content_size + self.config.gap)
        if self.config.direction in ('right', 'down'):
            self.offset -= movement
            while self.offset <= -period:
                self.offset += period
        else:
            self.offset += movement
            while self.offset >= period:
                self.offset -= period

    def _update_bounce(self, dt: float, max_offset: float, hold: bool):
        # The end pause runs on wall time, whatever the speed
        if hold and self._pause_left > 0:
            consumed = min(self._pause_left, dt)
            self._pause_left -= consumed
            if self._pause_left > 1e-9:
                return
            self._pause_left = 0.0
            dt -= consumed

        self.offset += self.config.speed * dt * self._dir
        if self.offset > max_offset or (self._dir > 0 and self.offset >= max_offset):
            self.offset = float(max_offset)
            self._dir = -1
            if hold:
                self._pause_left = self.config.pause_ms / 1000.0
        elif self.offset < 0 or (self._dir < 0 and self.offset <= 0):
            self.offset = 0.0
            self._dir = 1
            if hold:
                self._pause_left = self.config.pause_ms / 1000.0
