"""
Emulator sink

Keeps the last delivered frame in memory, with BMP bytes for the web
preview and an ASCII rendering for logs and terminals. Needs only PIL.
"""

import io
import logging
import threading
import time
from typing import Any, Dict, Optional

from PIL import Image

from ..bitmap.canvas import new_canvas

logger = logging.getLogger(__name__)

ASCII_CHARS = [" ", ".", ":", "+", "*", "#", "@"]


class EmulatorSink:
    """
    Args:
        width, height: Display size
        background: Level shown before the first frame arrives
    """

    def __init__(self, width: int, height: int, background: int = 0):
        self.width = width
        self.height = height
        self.background = background

        self.initialized = False
        self.current_image: Optional[Image.Image] = None
        self.bmp_data: Optional[bytes] = None
        self.last_update: Optional[float] = None
        self.frame_count = 0
        self._lock = threading.Lock()

    @property
    def last_frame(self) -> Optional[Image.Image]:
        with self._lock:
            return self.current_image

    def initialize(self) -> bool:
        with self._lock:
            self.current_image = new_canvas(self.width, self.height, self.background)
            self._update_bmp_data()
            self.last_update = time.time()
            self.initialized = True
        logger.debug("Emulator sink initialized")
        return True

    def deliver_frame(self, img: Image.Image):
        if not self.initialized:
            logger.warning("Emulator sink not initialized - dropping frame")
            return
        with self._lock:
            self.current_image = img.copy()
            self._update_bmp_data()
            self.last_update = time.time()
            self.frame_count += 1

    def _update_bmp_data(self):
        """Convert current image to BMP bytes."""
        try:
            if self.current_image is not None:
                bmp_buffer = io.BytesIO()
                self.current_image.save(bmp_buffer, format='BMP')
                self.bmp_data = bmp_buffer.getvalue()
                bmp_buffer.close()
        except Exception as e:
            logger.error(f"BMP conversion error: {e}")
            self.bmp_data = None

    def get_bmp(self) -> Optional[bytes]:
        with self._lock:
            return self.bmp_data

    def get_ascii(self, width: int = 64, height: int = 16) -> str:
        """ASCII art of the last frame, resized to width x height characters."""
        with self._lock:
            image = self.current_image
        if image is None:
            return "[No image available]"

        resized = image.resize((width, height))
        result = []
        for y in range(height):
            line = ""
            for x in range(width):
                pixel = resized.getpixel((x, y))
                line += ASCII_CHARS[int(pixel * (len(ASCII_CHARS) - 1) / 255)]
            result.append(line)
        return "\n".join(result)

    def cleanup(self):
        with self._lock:
            self.current_image = None
            self.bmp_data = None
            self.initialized = False
        logger.info("Emulator sink cleanup completed")

    def get_display_info(self) -> Dict[str, Any]:
        with self._lock:
            return {
                'mode': 'emulator',
                'initialized': self.initialized,
                'width': self.width,
                'height': self.height,
                'last_update': self.last_update,
                'frame_count': self.frame_count,
                'bmp_size': len(self.bmp_data) if self.bmp_data else 0,
            }
