"""
Compositor, layout and sink tests.
"""

import time

import pytest

from conftest import RecordingSink, pixels, solid, widget_config
from oledash.compositor import Compositor, FrameDeduplicator, LayoutManager
from oledash.config.model import DisplayConfig
from oledash.display import EmulatorSink, LumaSink, PreviewServer, create_sink, to_monochrome
from oledash.display import luma_sink
from oledash.widgets.base_widget import BaseWidget


class StubWidget(BaseWidget):
    """Renders a solid canvas of `value`, or whatever `image` is set to."""

    def __init__(self, id='w', x=0, y=0, w=8, h=8, z=0, value=255, transparent=False,
                 update_error=None, update_interval=1.0):
        style = {'background': -1} if transparent else {}
        super().__init__(widget_config(id=id, position={'x': x, 'y': y, 'w': w, 'h': h, 'z': z},
                                       style=style, update_interval=update_interval))
        self.value = value
        self.image = None
        self.render_error = None
        self.update_error = update_error
        self.updates = 0

    def update(self):
        self.updates += 1
        if self.update_error:
            raise self.update_error

    def render(self):
        if self.render_error:
            raise self.render_error
        if self.image is not None:
            return self.image
        return solid(self.position.w, self.position.h, self.value)


class FakeClock:
    def __init__(self, now=0.0):
        self.now = now

    def __call__(self):
        return self.now


def display(**data):
    data.setdefault('width', 16)
    data.setdefault('height', 8)
    return DisplayConfig.from_dict(data)


def wait_for(condition, timeout=2.0):
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if condition():
            return True
        time.sleep(0.01)
    return condition()


class TestLayoutManager:

    def test_higher_z_wins(self):
        top = StubWidget('top', z=1, value=100)
        bottom = StubWidget('bottom', z=0, value=200)
        frame = LayoutManager(16, 8, 0, [top, bottom]).compose()
        assert pixels(frame)[0][0] == 100

    def test_equal_z_keeps_configuration_order(self):
        first = StubWidget('first', value=100)
        second = StubWidget('second', value=200)
        frame = LayoutManager(16, 8, 0, [first, second]).compose()
        assert pixels(frame)[0][0] == 200

    def test_transparent_widget_shows_what_is_below(self):
        bottom = StubWidget('bottom', value=200)
        top = StubWidget('top', z=1, transparent=True)
        top.image = solid(8, 8, 0)
        top.image.putpixel((0, 0), 255)
        rows = pixels(LayoutManager(16, 8, 0, [bottom, top]).compose())
        assert rows[0][0] == 255
        assert rows[1][1] == 200

    def test_opaque_widget_covers_what_is_below(self):
        bottom = StubWidget('bottom', value=200)
        top = StubWidget('top', z=1, value=0)
        assert pixels(LayoutManager(16, 8, 0, [bottom, top]).compose())[1][1] == 0

    def test_render_error_and_none_are_skipped(self):
        broken = StubWidget('broken', z=1)
        broken.render_error = RuntimeError('boom')
        hidden = StubWidget('hidden', x=8)
        hidden.render = lambda: None
        good = StubWidget('good', value=50)
        rows = pixels(LayoutManager(16, 8, 10, [broken, hidden, good]).compose())
        assert rows[0][0] == 50
        assert rows[0][8] == 10

    def test_oversized_canvas_is_cropped(self):
        big = StubWidget('big', x=4, y=2, w=4, h=4)
        big.image = solid(20, 20, 255)
        rows = pixels(LayoutManager(16, 8, 0, [big]).compose())
        assert [x for x, v in enumerate(rows[3]) if v] == [4, 5, 6, 7]
        assert not any(rows[7])


class TestFrameDeduplicator:

    def test_detects_changes(self):
        dedup = FrameDeduplicator()
        assert dedup.has_changed(solid(4, 4, 0))
        dedup.update(solid(4, 4, 0))
        assert not dedup.has_changed(solid(4, 4, 0))
        assert dedup.has_changed(solid(4, 4, 1))
        dedup.reset()
        assert dedup.has_changed(solid(4, 4, 0))

    def test_disabled(self):
        dedup = FrameDeduplicator(enabled=False)
        dedup.update(solid(4, 4, 0))
        assert dedup.has_changed(solid(4, 4, 0))


class TestCompositor:

    def test_duplicate_frames_are_skipped(self):
        sink = RecordingSink()
        comp = Compositor(display(), [StubWidget()], sink)
        assert comp.tick()
        assert not comp.tick()
        assert len(sink.frames) == 1
        assert comp.frames_delivered == 1
        assert comp.frames_skipped == 1

    def test_deduplication_can_be_disabled(self):
        sink = RecordingSink()
        comp = Compositor(display(), [StubWidget()], sink, deduplicate=False)
        comp.tick()
        comp.tick()
        assert len(sink.frames) == 2

    def test_switch_runs_transition(self):
        clock = FakeClock()
        sink = RecordingSink()
        old = StubWidget('old', w=16, value=0)
        new = StubWidget('new', w=16, value=255)
        cfg = display(transition={'type': 'dissolve_fade', 'duration_s': 1.0})
        comp = Compositor(cfg, [old], sink, clock=clock)
        comp.tick(now=0.0)

        comp.switch_widgets([new])
        assert old.stopped
        assert comp.widgets == [new]
        assert comp.transitions.active
        assert pixels(comp.render_frame(now=0.5))[0][0] == 128
        assert pixels(comp.render_frame(now=2.0))[0][0] == 255
        assert not comp.transitions.active

    def test_explicit_transition(self):
        clock = FakeClock()
        comp = Compositor(display(), [StubWidget(w=16, value=0)], RecordingSink(), clock=clock)
        comp.tick(now=0.0)
        comp.layout.widgets[0].value = 255
        comp.start_transition('push_left', 1.0, now=0.0)
        rows = pixels(comp.render_frame(now=0.5))
        assert rows[0][0] == 0
        assert rows[0][15] == 255

    def test_start_fails_when_sink_fails(self):
        comp = Compositor(display(), [StubWidget()], RecordingSink(ok=False))
        assert not comp.start()
        assert not comp.running

    def test_start_and_stop(self):
        sink = RecordingSink()
        widget = StubWidget(update_interval=0.01)
        comp = Compositor(display(refresh_rate_ms=10), [widget], sink)
        assert comp.start()
        try:
            assert wait_for(lambda: sink.frames and widget.updates >= 2)
        finally:
            comp.stop()
        comp.stop()
        assert sink.cleaned_up == 1
        assert widget.stopped
        assert not comp.running

    def test_failing_update_keeps_polling(self):
        widget = StubWidget(update_interval=0.01, update_error=RuntimeError('sensor gone'))
        comp = Compositor(display(), [widget], RecordingSink())
        comp.start()
        try:
            assert wait_for(lambda: widget.updates >= 3)
        finally:
            comp.stop()

    def test_get_info(self):
        sink = EmulatorSink(16, 8)
        comp = Compositor(display(), [StubWidget('a'), StubWidget('b')], sink)
        sink.initialize()
        comp.tick()
        info = comp.get_info()
        assert info['widgets'] == ['a', 'b']
        assert info['frames_delivered'] == 1
        assert info['sink']['mode'] == 'emulator'
        assert info['sink']['frame_count'] == 1


class TestEmulatorSink:

    def test_drops_frames_before_initialize(self):
        sink = EmulatorSink(8, 4)
        sink.deliver_frame(solid(8, 4, 255))
        assert sink.frame_count == 0
        assert sink.get_bmp() is None

    def test_bmp_and_ascii(self):
        sink = EmulatorSink(8, 4)
        assert sink.initialize()
        assert sink.get_bmp().startswith(b'BM')
        assert sink.get_ascii(4, 2) == '    \n    '
        sink.deliver_frame(solid(8, 4, 255))
        assert sink.get_ascii(4, 2) == '@@@@\n@@@@'
        assert sink.last_frame.size == (8, 4)

    def test_cleanup(self):
        sink = EmulatorSink(8, 4)
        sink.initialize()
        sink.cleanup()
        assert sink.get_bmp() is None
        assert sink.get_ascii() == '[No image available]'

    def test_create_sink(self):
        assert type(create_sink(8, 4)) is EmulatorSink


class TestLumaSink:

    def test_falls_back_to_emulator(self, monkeypatch):
        monkeypatch.setattr(luma_sink, 'LUMA_AVAILABLE', False)
        sink = LumaSink(8, 4)
        assert sink.initialize()
        assert sink.mode == 'emulator'
        sink.deliver_frame(solid(8, 4, 255))
        assert sink.frame_count == 1
        assert sink.get_display_info()['mode'] == 'emulator'
        sink.cleanup()
        assert sink.mode is None

    def test_to_monochrome(self):
        img = solid(8, 1, 0)
        img.putpixel((0, 0), 255)
        img.putpixel((2, 0), 127)
        mono = to_monochrome(img)
        assert mono.mode == '1'
        assert mono.getpixel((0, 0)) == 255
        assert mono.getpixel((1, 0)) == 0
        assert mono.getpixel((2, 0)) == 0


class TestPreviewServer:

    @pytest.fixture
    def sink(self):
        return EmulatorSink(16, 8)

    def test_health(self, sink):
        client = PreviewServer(sink).app.test_client()
        response = client.get('/api/health')
        assert response.status_code == 200
        assert response.get_json()['status'] == 'healthy'

    def test_image(self, sink):
        client = PreviewServer(sink).app.test_client()
        assert client.get('/api/display/image').status_code == 404
        sink.initialize()
        sink.deliver_frame(solid(16, 8, 255))
        response = client.get('/api/display/image')
        assert response.status_code == 200
        assert response.mimetype == 'image/bmp'
        assert response.data.startswith(b'BM')

    def test_ascii_and_info(self, sink):
        sink.initialize()
        comp = Compositor(display(), [StubWidget('a')], sink)
        client = PreviewServer(sink, compositor=comp).app.test_client()
        assert 'ascii_art' in client.get('/api/display/ascii').get_json()
        info = client.get('/api/display/info').get_json()
        assert info['display']['width'] == 16
        assert info['compositor']['widgets'] == ['a']

    def test_api_allows_cross_origin(self, sink):
        client = PreviewServer(sink).app.test_client()
        response = client.get('/api/health', headers={'Origin': 'http://example.com'})
        assert response.headers['Access-Control-Allow-Origin'] == '*'
