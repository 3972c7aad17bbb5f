"""
Base widget

Every widget owns a fixed rectangle on the display and implements
update() (sample data sources, store the result) and render() (return a
canvas of exactly position.w x position.h, or None to stay hidden for the
frame). The compositor polls update() from a background thread every
update_interval seconds and calls render() from the frame loop, so state
shared between the two is guarded by self._lock.
"""

import logging
import threading
import time
from typing import Optional

from PIL import Image

from ..bitmap.canvas import Rect, new_canvas
from ..bitmap.draw import draw_border
from ..config.model import WidgetConfig

logger = logging.getLogger(__name__)


class BaseWidget:
    """
    Shared state and services for all widget kinds.

    Args:
        cfg: Widget configuration record
    """

    type_name = ''

    def __init__(self, cfg: WidgetConfig):
        self.cfg = cfg
        self.id = cfg.id
        self.position = cfg.position
        self.style = cfg.style
        self.padding = cfg.style.padding
        self.update_interval = cfg.update_interval if cfg.update_interval > 0 else 1.0
        self.auto_hide_enabled = cfg.auto_hide.enabled
        self.auto_hide_timeout = cfg.auto_hide.timeout_s

        self._lock = threading.RLock()
        self._visible_until: Optional[float] = None
        self._stopped = False

    def __repr__(self):
        return f"{type(self).__name__}({self.id!r})"

    @property
    def size(self):
        return self.position.w, self.position.h

    @property
    def z(self) -> int:
        return self.position.z

    @property
    def transparent(self) -> bool:
        return self.style.transparent

    # Contract
    def update(self):
        """Sample data sources. Raise to report a failed sample."""
        raise NotImplementedError

    def render(self) -> Optional[Image.Image]:
        raise NotImplementedError

    def start(self):
        """Hook for widgets that run their own poller besides update()."""

    def close(self):
        """Hook to release readers; called once by stop()."""

    def stop(self):
        with self._lock:
            if self._stopped:
                return
            self._stopped = True
        try:
            self.close()
        except Exception as e:
            logger.warning(f"Error closing widget {self.id}: {e}")
        logger.debug(f"Widget {self.id} stopped")

    @property
    def stopped(self) -> bool:
        return self._stopped

    # Rendering helpers
    def render_background(self) -> int:
        """Fill level for new canvases; transparent widgets start from 0."""
        return 0 if self.style.transparent else self.style.background

    def create_canvas(self) -> Image.Image:
        return new_canvas(self.position.w, self.position.h, self.render_background())

    def apply_border(self, img: Image.Image):
        if self.style.border >= 0:
            draw_border(img, self.style.border)

    def get_content_area(self) -> Rect:
        """Drawable (x, y, w, h) inside padding, and inside the border when one is drawn."""
        inset = self.padding + (1 if self.style.border >= 0 else 0)
        w = max(0, self.position.w - 2 * inset)
        h = max(0, self.position.h - 2 * inset)
        return inset, inset, w, h

    # Auto-hide
    def trigger_auto_hide(self, now: Optional[float] = None):
        """Show the widget for auto_hide_timeout seconds from now. No-op when auto-hide is off."""
        if not self.auto_hide_enabled:
            return
        now = time.monotonic() if now is None else now
        with self._lock:
            self._visible_until = now + self.auto_hide_timeout

    def should_hide(self, now: Optional[float] = None) -> bool:
        """
        True when auto-hide is on and the widget was never triggered or its
        visibility window has run out.
        """
        if not self.auto_hide_enabled:
            return False
        with self._lock:
            visible_until = self._visible_until
        if visible_until is None:
            return True
        now = time.monotonic() if now is None else now
        return now > visible_until
