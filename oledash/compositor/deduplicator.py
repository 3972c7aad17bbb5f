"""
Frame deduplication: skip delivering a frame identical to the last one.
"""

from typing import Optional

from PIL import Image


class FrameDeduplicator:
    def __init__(self, enabled: bool = True):
        self.enabled = enabled
        self._last: Optional[bytes] = None

    def has_changed(self, frame: Image.Image) -> bool:
        if not self.enabled or self._last is None:
            return True
        return frame.tobytes() != self._last

    def update(self, frame: Image.Image):
        if self.enabled:
            self._last = frame.tobytes()

    def reset(self):
        self._last = None
