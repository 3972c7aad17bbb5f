"""
Layout manager

Paints widget canvases onto the display framebuffer in ascending z-order.
Ties keep configuration order.
"""

import logging
from typing import List, Optional, Sequence

from PIL import Image

from ..bitmap.canvas import new_canvas
from ..widgets.base_widget import BaseWidget

logger = logging.getLogger(__name__)


def _fit(img: Image.Image, width: int, height: int, background: int = 0) -> Image.Image:
    """Crop or pad a widget canvas to its declared size."""
    if img.mode != 'L':
        img = img.convert('L')
    if img.size == (width, height):
        return img
    logger.debug(f"Widget canvas {img.size} does not match {width}x{height}, fitting")
    fitted = new_canvas(width, height, background)
    fitted.paste(img.crop((0, 0, min(width, img.width), min(height, img.height))), (0, 0))
    return fitted


def foreground_mask(img: Image.Image) -> Image.Image:
    """Mask of every non-zero pixel; transparent widgets draw on a 0 canvas."""
    return img.point(lambda v: 255 if v else 0)


class LayoutManager:
    """
    Args:
        width, height: Display size
        background: Fill level of a fresh framebuffer
        widgets: Widgets in configuration order
    """

    def __init__(self, width: int, height: int, background: int = 0,
                 widgets: Optional[Sequence[BaseWidget]] = None):
        self.width = width
        self.height = height
        self.background = background
        self.widgets: List[BaseWidget] = []
        self.set_widgets(widgets or [])

    def set_widgets(self, widgets: Sequence[BaseWidget]):
        # sorted() is stable, so equal z keeps configuration order
        self.widgets = sorted(widgets, key=lambda w: w.z)

    def compose(self) -> Image.Image:
        frame = new_canvas(self.width, self.height, self.background)
        for widget in self.widgets:
            try:
                img = widget.render()
            except Exception as e:
                logger.error(f"Widget {widget.id} render error: {e}", exc_info=True)
                continue
            if img is None:
                continue
            self.blit(frame, widget, img)
        return frame

    def blit(self, frame: Image.Image, widget: BaseWidget, img: Image.Image):
        w, h = widget.size
        img = _fit(img, w, h, widget.render_background())
        position = (widget.position.x, widget.position.y)
        if widget.transparent:
            frame.paste(img, position, foreground_mask(img))
        else:
            frame.paste(img, position)
