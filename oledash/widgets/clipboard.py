"""
Clipboard widget

Polls the clipboard on its own thread (every poll_interval_ms) and shows
the content through a template with the tokens {content}, {type},
{length} and {preview}.
"""

import logging
import threading
import time
from typing import Optional

from PIL import Image

from ..anim.scroller import TextScroller, ScrollerConfig
from ..bitmap.text import draw_text_in_rect
from ..config import system as system_config
from ..config import widgets as widget_defaults
from ..readers.clipboard import ClipboardReader, ContentType
from ..render.config_helper import ConfigHelper
from ..render.formatter import TokenFormatter
from ..render.scrolling import draw_scrolling_text
from .base_widget import BaseWidget
from .registry import register

logger = logging.getLogger(__name__)

EMPTY_TEXT = '[Empty]'
PREVIEW_LENGTH = 20


def format_clipboard(content: str, content_type: ContentType, template: str,
                     max_length: int = widget_defaults.CLIPBOARD_MAX_LENGTH,
                     show_invisible: bool = False) -> str:
    """
    Display text for one clipboard snapshot.

    Content longer than max_length is cut to max_length characters ending
    in "...". Line breaks and tabs become escapes with show_invisible, else
    spaces. {length} is the length before any of this.
    """
    if content_type == ContentType.EMPTY:
        return EMPTY_TEXT

    original_length = len(content)
    if max_length > 3 and len(content) > max_length:
        content = content[:max_length - 3] + '...'

    if show_invisible:
        content = (content.replace('\r\n', '\\n').replace('\n', '\\n')
                   .replace('\r', '\\r').replace('\t', '\\t'))
    else:
        content = (content.replace('\r\n', ' ').replace('\n', ' ')
                   .replace('\r', '').replace('\t', ' '))

    preview = content
    if len(preview) > PREVIEW_LENGTH:
        preview = preview[:PREVIEW_LENGTH] + '...'

    formatter = TokenFormatter().set_all({
        'content': content,
        'type': str(content_type),
        'length': original_length,
        'preview': preview,
    })
    return formatter.format(template)


@register('clipboard')
class ClipboardWidget(BaseWidget):
    """
    Configuration (params):
        clipboard: {max_length, poll_interval_ms, show_invisible, tool}

    text.format is the template (default "{content}").
    """

    def __init__(self, cfg, reader=None):
        super().__init__(cfg)
        helper = ConfigHelper(cfg)
        clip = helper.section('clipboard')

        self.max_length = int(clip.get('max_length') or widget_defaults.CLIPBOARD_MAX_LENGTH)
        self.poll_interval = int(clip.get('poll_interval_ms')
                                 or widget_defaults.CLIPBOARD_POLL_INTERVAL_MS) / 1000.0
        self.show_invisible = bool(clip.get('show_invisible', False))
        self.template = helper.text_format(widget_defaults.CLIPBOARD_FORMAT)

        self.text = helper.text_config()
        self.scroll_enabled = cfg.scroll.enabled
        self.scroller = TextScroller(ScrollerConfig.from_settings(cfg.scroll))

        self.reader = reader if reader is not None else ClipboardReader(clip.get('tool'))

        self._content = EMPTY_TEXT
        self._content_type = ContentType.EMPTY
        self._stop_event = threading.Event()
        self._poll_thread: Optional[threading.Thread] = None

    @property
    def content(self) -> str:
        with self._lock:
            return self._content

    @property
    def content_type(self) -> ContentType:
        with self._lock:
            return self._content_type

    def start(self):
        if self._poll_thread is not None:
            return
        self._poll_thread = threading.Thread(target=self._poll_loop, name=f"clipboard-{self.id}",
                                             daemon=True)
        self._poll_thread.start()

    def poll(self) -> bool:
        """
        Read the clipboard if it changed since the last poll.

        Returns:
            True when new content was published
        """
        if not self.reader.has_changed():
            return False
        content, content_type = self.reader.read()
        text = format_clipboard(content, content_type, self.template, self.max_length,
                                self.show_invisible)
        with self._lock:
            self._content = text
            self._content_type = content_type
            self.scroller.reset()
        self.trigger_auto_hide()
        logger.debug(f"Clipboard widget {self.id}: new {content_type} content")
        return True

    def _poll_loop(self):
        logger.debug(f"Clipboard poller for {self.id} started")
        while not self._stop_event.is_set():
            try:
                self.poll()
            except Exception as e:
                logger.error(f"Widget {self.id} clipboard poll error: {e}")
            self._stop_event.wait(self.poll_interval)
        logger.debug(f"Clipboard poller for {self.id} exited")

    def update(self):
        # Sampling happens on the poll thread
        pass

    def render(self, now: Optional[float] = None) -> Optional[Image.Image]:
        now = time.monotonic() if now is None else now
        if self.should_hide(now):
            return None

        rect = self.get_content_area()
        font = self.text.font
        with self._lock:
            text = self._content
            offset = 0.0
            if self.scroll_enabled:
                text_w, text_h = font.measure(text)
                if self.scroller.horizontal:
                    offset = self.scroller.tick(text_w, rect[2], now)
                else:
                    offset = self.scroller.tick(text_h, rect[3], now)

        img = self.create_canvas()
        self.apply_border(img)
        if self.scroll_enabled:
            draw_scrolling_text(img, text, font, rect, self.scroller, offset,
                                self.text.h_align, self.text.v_align, self.text.color)
        else:
            draw_text_in_rect(img, text, font, rect, self.text.h_align, self.text.v_align, self.text.color)
        return img

    def close(self):
        self._stop_event.set()
        thread = self._poll_thread
        if thread is not None and thread.is_alive() and thread is not threading.current_thread():
            thread.join(timeout=system_config.THREAD_JOIN_TIMEOUT)
            if thread.is_alive():
                logger.warning(f"Clipboard poller for {self.id} did not stop within timeout")
        self._poll_thread = None
        self.reader.close()
