"""
Sleepy / wake sprite animator

Chooses one of three eye frames (0 = open, 1 = half, 2 = closed) from
wall time. Falling asleep walks 0 -> 1 -> 2 over SLEEP_DURATION, waking
walks back over WAKE_DURATION, and while awake the eyes blink every few
seconds.
"""

import random
import time
from typing import Optional

FRAME_OPEN = 0
FRAME_HALF = 1
FRAME_CLOSED = 2

SLEEP_DURATION = 0.8
WAKE_DURATION = 0.4
BLINK_DURATION = 0.2
BLINK_INTERVAL_MIN = 2.0
BLINK_INTERVAL_MAX = 5.0


class SleepyAnimator:
    """
    Args:
        awake: Initial state; a sleeping start shows closed eyes at once
        rng: random.Random used for blink intervals
    """

    def __init__(self, awake: bool = True, rng: Optional[random.Random] = None, now: Optional[float] = None):
        self._rng = rng or random.Random()
        now = time.monotonic() if now is None else now
        self.awake = awake
        self._sleep_start: Optional[float] = None
        self._wake_start: Optional[float] = None
        self._blink_start: Optional[float] = None
        self._next_blink = now + self._blink_interval()

    def _blink_interval(self) -> float:
        return self._rng.uniform(BLINK_INTERVAL_MIN, BLINK_INTERVAL_MAX)

    @property
    def sleeping(self) -> bool:
        return not self.awake

    def set_awake(self, awake: bool, now: Optional[float] = None):
        """Start the wake or sleep sequence when the state flips."""
        if awake == self.awake:
            return
        now = time.monotonic() if now is None else now
        self.awake = awake
        self._blink_start = None
        if awake:
            self._sleep_start = None
            self._wake_start = now
            self._next_blink = now + WAKE_DURATION + self._blink_interval()
        else:
            self._wake_start = None
            self._sleep_start = now

    def frame(self, now: Optional[float] = None) -> int:
        """Eye frame to show at `now`; also schedules blinks while awake."""
        now = time.monotonic() if now is None else now

        if not self.awake:
            if self._sleep_start is not None:
                progress = (now - self._sleep_start) / SLEEP_DURATION
                if progress < 1.0:
                    return min(FRAME_CLOSED, int(progress * 3))
            return FRAME_CLOSED

        if self._wake_start is not None:
            progress = (now - self._wake_start) / WAKE_DURATION
            if progress < 1.0:
                return max(FRAME_OPEN, FRAME_CLOSED - int(progress * 3))
            self._wake_start = None

        if self._blink_start is None and now >= self._next_blink:
            self._blink_start = now
            self._next_blink = now + BLINK_DURATION + self._blink_interval()

        if self._blink_start is not None:
            progress = (now - self._blink_start) / BLINK_DURATION
            if progress >= 1.0:
                self._blink_start = None
                return FRAME_OPEN
            return _blink_frame(progress)

        return FRAME_OPEN


def _blink_frame(progress: float) -> int:
    # open, half, closed, half, open
    if progress < 0.25:
        return FRAME_OPEN
    if progress < 0.4:
        return FRAME_HALF
    if progress < 0.6:
        return FRAME_CLOSED
    if progress < 0.75:
        return FRAME_HALF
    return FRAME_OPEN
