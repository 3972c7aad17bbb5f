"""
Media player widget (beefweb)

Shows the current track through a token template such as
"{artist} - {title}". Available tokens: artist, title, album, position,
duration (MM:SS) and state.
"""

import logging
import time
from typing import Optional

from PIL import Image

from ..anim.scroller import TextScroller, ScrollerConfig
from ..bitmap.text import draw_text_in_rect
from ..config import widgets as widget_defaults
from ..errors import ConfigurationError
from ..readers.beefweb import BeefwebClient, PlaybackState, PlayerState
from ..render.config_helper import ConfigHelper
from ..render.formatter import TokenFormatter
from ..render.scrolling import draw_scrolling_text
from .base_widget import BaseWidget
from .registry import register

logger = logging.getLogger(__name__)

PLACEHOLDER_TEXT = 'text'
PLACEHOLDER_HIDE = 'hide'


def format_duration(seconds: float) -> str:
    """MM:SS; negative durations (unknown length) give --:--."""
    if seconds < 0:
        return "--:--"
    total = int(seconds)
    return f"{total // 60:02d}:{total % 60:02d}"


def format_track(template: str, state: PlayerState) -> str:
    track = state.track
    if track is None:
        return ''
    formatter = (TokenFormatter()
                 .set('artist', track.artist)
                 .set('title', track.title)
                 .set('album', track.album)
                 .set('position', format_duration(track.position))
                 .set('duration', format_duration(track.duration))
                 .set('state', state.state.value))
    return formatter.format(template)


@register('beefweb')
class MediaWidget(BaseWidget):
    """
    Configuration (params):
        beefweb: {server_url, format, placeholder: {mode: text|hide, text}}
        auto_show: {on_track_change (default true), on_play, on_pause,
            on_stop, duration_s}

    Auto-show only has an effect together with auto_hide.enabled: the
    widget stays hidden until one of the configured events fires.
    """

    def __init__(self, cfg, client: Optional[BeefwebClient] = None):
        super().__init__(cfg)
        helper = ConfigHelper(cfg, default_text_size=widget_defaults.MEDIA_TEXT_SIZE)
        media = helper.section('beefweb')

        self.format = media.get('format') or cfg.text.format or widget_defaults.MEDIA_FORMAT
        placeholder = media.get('placeholder') or {}
        self.placeholder_mode = placeholder.get('mode') or PLACEHOLDER_TEXT
        if self.placeholder_mode not in (PLACEHOLDER_TEXT, PLACEHOLDER_HIDE):
            raise ConfigurationError(
                f"beefweb widget '{cfg.id}': unknown placeholder mode '{self.placeholder_mode}'")
        self.placeholder_text = placeholder.get('text') or widget_defaults.MEDIA_PLACEHOLDER_TEXT

        auto_show = helper.section('auto_show')
        self.show_on_track_change = bool(auto_show.get('on_track_change', True))
        self.show_on_play = bool(auto_show.get('on_play', False))
        self.show_on_pause = bool(auto_show.get('on_pause', False))
        self.show_on_stop = bool(auto_show.get('on_stop', False))
        if auto_show.get('duration_s'):
            self.auto_hide_timeout = float(auto_show['duration_s'])

        self.text = helper.text_config()
        self.scroll_enabled = cfg.scroll.enabled
        self.scroller = TextScroller(ScrollerConfig.from_settings(cfg.scroll))

        self.client = client if client is not None else BeefwebClient(
            media.get('server_url') or widget_defaults.MEDIA_SERVER_URL)

        self._text = ''
        self._previous_state = PlaybackState.STOPPED
        self._previous_track = None

    @property
    def current_text(self) -> str:
        with self._lock:
            return self._text

    def update(self, now: Optional[float] = None):
        if not self.client.is_available():
            with self._lock:
                if self._previous_state != PlaybackState.STOPPED and self.show_on_stop:
                    self.trigger_auto_hide(now)
                self._text = ''
                self._previous_state = PlaybackState.STOPPED
                self._previous_track = None
            return

        try:
            state = self.client.get_state()
        except Exception:
            with self._lock:
                self._text = ''
            raise

        with self._lock:
            changed = state.state != self._previous_state
            if changed and (
                    (state.state == PlaybackState.PLAYING and self.show_on_play)
                    or (state.state == PlaybackState.PAUSED and self.show_on_pause)
                    or (state.state == PlaybackState.STOPPED and self.show_on_stop)):
                self.trigger_auto_hide(now)
            self._previous_state = state.state

            if state.state == PlaybackState.STOPPED or state.track is None:
                self._text = ''
                return

            self._text = format_track(self.format, state)

            key = state.track.key
            if key != self._previous_track:
                if self._previous_track is not None and not changed:
                    self.scroller.reset()
                    if self.show_on_track_change:
                        self.trigger_auto_hide(now)
                self._previous_track = key

    def render(self, now: Optional[float] = None) -> Optional[Image.Image]:
        now = time.monotonic() if now is None else now
        if self.should_hide(now):
            return None

        rect = self.get_content_area()
        font = self.text.font
        with self._lock:
            text = self._text
            offset = 0.0
            if text and self.scroll_enabled:
                text_w, text_h = font.measure(text)
                if self.scroller.horizontal:
                    offset = self.scroller.tick(text_w, rect[2], now)
                else:
                    offset = self.scroller.tick(text_h, rect[3], now)

        if not text and self.placeholder_mode == PLACEHOLDER_HIDE:
            return None

        img = self.create_canvas()
        self.apply_border(img)

        if not text:
            draw_text_in_rect(img, self.placeholder_text, font, rect,
                              self.text.h_align, self.text.v_align, self.text.color)
            return img

        if self.scroll_enabled:
            draw_scrolling_text(img, text, font, rect, self.scroller, offset,
                                self.text.h_align, self.text.v_align, self.text.color)
        else:
            draw_text_in_rect(img, text, font, rect, self.text.h_align, self.text.v_align, self.text.color)
        return img
