"""
Compositor

Owns the frame loop and one poller thread per widget:

    compositor = Compositor(dashboard.display, widgets, EmulatorSink(w, h))
    compositor.start()
    ...
    compositor.stop()

Pollers call widget.update() every update_interval seconds. The frame loop
calls render() on every widget at refresh_rate_ms, blends the result with
the previous frame while a transition is active, and hands it to the sink.
"""

import logging
import threading
import time
from typing import Any, Dict, List, Optional, Sequence

from PIL import Image

from ..anim.transition import TransitionManager
from ..config import display as display_defaults
from ..config import system as system_config
from ..config.model import DisplayConfig
from ..widgets.base_widget import BaseWidget
from .deduplicator import FrameDeduplicator
from .layout_manager import LayoutManager

logger = logging.getLogger(__name__)


class Compositor:
    """
    Args:
        display_config: Display geometry, refresh rate and default transition
        widgets: Widgets in configuration order
        sink: Object with initialize() -> bool, deliver_frame(img) and cleanup()
        deduplicate: Skip delivery of frames identical to the previous one
        clock: Time source in seconds
    """

    def __init__(self, display_config: DisplayConfig, widgets: Sequence[BaseWidget], sink,
                 deduplicate: bool = display_defaults.DEDUPLICATE_FRAMES, clock=time.monotonic):
        self.display_config = display_config
        self.sink = sink
        self._clock = clock

        self.layout = LayoutManager(display_config.width, display_config.height,
                                    display_config.background, widgets)
        self.deduplicator = FrameDeduplicator(deduplicate)
        self.transitions = TransitionManager(display_config.width, display_config.height,
                                             display_config.background, clock=clock)

        self.frame_interval = display_config.refresh_rate_ms / 1000.0
        self.last_frame: Optional[Image.Image] = None
        self.frames_delivered = 0
        self.frames_skipped = 0

        self.running = False
        self._stopped = False
        self._frame_lock = threading.Lock()
        self._stop_event = threading.Event()
        self._frame_thread: Optional[threading.Thread] = None
        self._pollers: Dict[str, threading.Thread] = {}
        self._poller_events: Dict[str, threading.Event] = {}

    @property
    def widgets(self) -> List[BaseWidget]:
        return self.layout.widgets

    def start(self) -> bool:
        """
        Initialize the sink and start pollers and the frame loop.

        Returns:
            True if the compositor is running
        """
        if self.running:
            return True
        if not self.sink.initialize():
            logger.error("Failed to initialize display sink")
            return False

        self._stop_event.clear()
        self.running = True
        self._stopped = False
        for widget in self.widgets:
            self._start_widget(widget)

        self._frame_thread = threading.Thread(target=self._frame_loop, name="frame-loop", daemon=True)
        self._frame_thread.start()
        logger.info(f"Compositor started: {len(self.widgets)} widgets at "
                    f"{self.display_config.refresh_rate_ms}ms per frame")
        return True

    def _start_widget(self, widget: BaseWidget):
        try:
            widget.start()
        except Exception as e:
            logger.error(f"Widget {widget.id} failed to start: {e}")
        event = threading.Event()
        thread = threading.Thread(target=self._poll_widget, args=(widget, event),
                                  name=f"poller-{widget.id}", daemon=True)
        self._poller_events[widget.id] = event
        self._pollers[widget.id] = thread
        thread.start()

    def _poll_widget(self, widget: BaseWidget, event: threading.Event):
        logger.debug(f"Poller for {widget.id} started ({widget.update_interval}s)")
        while not event.is_set() and not self._stop_event.is_set():
            try:
                widget.update()
            except Exception as e:
                # Keep the last good state; the widget renders stale data
                logger.error(f"Widget {widget.id} update error: {e}")
            event.wait(widget.update_interval)
        logger.debug(f"Poller for {widget.id} exited")

    def _stop_pollers(self, widgets: Sequence[BaseWidget]):
        threads = []
        for widget in widgets:
            event = self._poller_events.pop(widget.id, None)
            if event is not None:
                event.set()
            thread = self._pollers.pop(widget.id, None)
            if thread is not None:
                threads.append((widget, thread))
        for widget, thread in threads:
            if thread.is_alive() and thread is not threading.current_thread():
                thread.join(timeout=system_config.THREAD_JOIN_TIMEOUT)
                if thread.is_alive():
                    logger.warning(f"Poller for {widget.id} did not stop within timeout")
        for widget in widgets:
            widget.stop()

    def _frame_loop(self):
        logger.info("Frame loop started")
        while not self._stop_event.is_set():
            start_time = self._clock()
            try:
                self.tick()
            except Exception as e:
                logger.error(f"Error in frame loop: {e}", exc_info=True)
            elapsed = self._clock() - start_time
            self._stop_event.wait(timeout=max(0.0, self.frame_interval - elapsed))
        logger.info("Frame loop exited")

    def render_frame(self, now: Optional[float] = None) -> Image.Image:
        """Compose all widgets and apply any running transition."""
        with self._frame_lock:
            frame = self.layout.compose()
            if self.transitions.active:
                frame = self.transitions.apply(frame, now)
            return frame

    def tick(self, now: Optional[float] = None) -> bool:
        """
        Render one frame and deliver it.

        Returns:
            True if the frame was delivered, False if it was a duplicate
        """
        frame = self.render_frame(now)
        return self.deliver(frame)

    def deliver(self, frame: Image.Image) -> bool:
        with self._frame_lock:
            self.last_frame = frame
            if not self.deduplicator.has_changed(frame):
                self.frames_skipped += 1
                return False
            self.deduplicator.update(frame)
        self.sink.deliver_frame(frame)
        self.frames_delivered += 1
        return True

    def start_transition(self, transition: Optional[str] = None, duration: Optional[float] = None,
                         now: Optional[float] = None):
        """Blend from the last delivered frame into whatever is rendered next."""
        settings = self.display_config.transition
        transition = transition or settings.type
        duration = settings.duration_s if duration is None else duration
        with self._frame_lock:
            old_frame = self.last_frame
        self.transitions.start(transition, duration, old_frame, now)

    def switch_widgets(self, widgets: Sequence[BaseWidget], transition: Optional[str] = None,
                       duration: Optional[float] = None):
        """
        Replace the widget set at runtime.

        Old pollers are stopped and their widgets closed, then the new
        widgets are started. The transition runs from the last frame shown.
        """
        old_widgets = list(self.widgets)
        self.start_transition(transition, duration)
        with self._frame_lock:
            self.layout.set_widgets(widgets)
        self._stop_pollers(old_widgets)
        if self.running:
            for widget in self.widgets:
                self._start_widget(widget)
        logger.info(f"Switched to {len(self.widgets)} widgets")

    def stop(self):
        """Stop pollers and the frame loop, close widgets and the sink. Safe to call twice."""
        if self._stopped:
            return
        self._stopped = True
        logger.info("Compositor stopping")
        self.running = False
        self._stop_event.set()

        if self._frame_thread and self._frame_thread.is_alive():
            self._frame_thread.join(timeout=system_config.THREAD_JOIN_TIMEOUT)
            if self._frame_thread.is_alive():
                logger.warning("Frame loop did not stop within timeout")
        self._frame_thread = None

        self._stop_pollers(self.widgets)
        self.transitions.cancel()
        try:
            self.sink.cleanup()
        except Exception as e:
            logger.error(f"Error during sink cleanup: {e}")
        logger.info("Compositor stopped")

    def get_info(self) -> Dict[str, Any]:
        info = {
            'running': self.running,
            'width': self.display_config.width,
            'height': self.display_config.height,
            'refresh_rate_ms': self.display_config.refresh_rate_ms,
            'widgets': [w.id for w in self.widgets],
            'transition_active': self.transitions.active,
            'frames_delivered': self.frames_delivered,
            'frames_skipped': self.frames_skipped,
        }
        get_display_info = getattr(self.sink, 'get_display_info', None)
        if get_display_info is not None:
            info['sink'] = get_display_info()
        return info
