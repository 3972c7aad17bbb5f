"""
Blink animator
"""

import time
from enum import Enum
from typing import Optional

from ..config import widgets as widget_defaults


class BlinkMode(Enum):
    NEVER = "never"
    ALWAYS = "always"
    CONDITIONAL = "conditional"  # blinks only while active is set
    PROGRESSIVE = "progressive"  # faster with higher intensity


class BlinkAnimator:
    """
    Visibility toggle with a fixed phase length.

    One period is two phases of `interval` seconds; should_render() is true
    during the first phase. In progressive mode the interval shrinks by a
    tenth of the base per intensity step above 1, down to a tenth of the
    base, and intensity 0 stops blinking.

    Args:
        mode: BlinkMode or its name
        interval: Phase length in seconds
    """

    def __init__(self, mode=BlinkMode.ALWAYS, interval: float = widget_defaults.BLINK_INTERVAL):
        self.mode = BlinkMode(mode)
        self.interval = float(interval)
        self.active = False
        self.intensity = 1
        self._phase = 0.0
        self._last_tick: Optional[float] = None

    def current_interval(self, intensity: Optional[int] = None) -> float:
        intensity = self.intensity if intensity is None else intensity
        if self.mode == BlinkMode.NEVER:
            return 0.0
        if self.mode == BlinkMode.PROGRESSIVE:
            if intensity <= 0:
                return 0.0
            step = self.interval / 10.0
            return max(step, self.interval - (intensity - 1) * step)
        return self.interval

    def _blinking(self) -> bool:
        if self.mode == BlinkMode.CONDITIONAL and not self.active:
            return False
        return self.current_interval() > 0

    def update(self, dt: float, intensity: Optional[int] = None):
        """Advance the phase by dt seconds."""
        if intensity is not None:
            self.intensity = intensity
        interval = self.current_interval()
        if interval <= 0:
            self._phase = 0.0
            return
        self._phase = (self._phase + dt) % (2 * interval)

    def tick(self, now: Optional[float] = None, intensity: Optional[int] = None):
        """Advance by the wall time elapsed since the previous tick."""
        now = time.monotonic() if now is None else now
        dt = 0.0 if self._last_tick is None else max(0.0, now - self._last_tick)
        self._last_tick = now
        self.update(dt, intensity)

    def set_active(self, active: bool):
        if active and not self.active:
            self._phase = 0.0
        self.active = active

    def should_render(self) -> bool:
        if not self._blinking():
            return True
        return self._phase < self.current_interval()

    def reset(self):
        self._phase = 0.0
        self._last_tick = None
