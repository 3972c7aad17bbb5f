"""
Reader tests with requests, subprocess, psutil and sysfs stubbed out.
"""

import subprocess
from types import SimpleNamespace

import pytest
import requests

from oledash.errors import ConfigurationError, DataUnavailableError
from oledash.readers import beefweb, bluetooth, clipboard, gpu, system, volume
from oledash.readers.beefweb import BeefwebClient, PlaybackState, parse_player_response
from oledash.readers.bluetooth import BluetoothClient, BluetoothDevice, device_type_icon
from oledash.readers.clipboard import ClipboardReader, ContentType, classify_targets, format_file_list
from oledash.readers.gpu import GpuReader
from oledash.readers.keyboard import KeyboardLockReader
from oledash.readers.system import CpuReader, DiskReader, MemoryReader, NetworkReader
from oledash.readers.volume import VolumeReader, parse_amixer, parse_pactl, parse_wpctl


class FakeResponse:
    def __init__(self, status_code=200, payload=None):
        self.status_code = status_code
        self.payload = payload

    def json(self):
        if isinstance(self.payload, Exception):
            raise self.payload
        return self.payload


class FakeGet:
    """Stand-in for requests.get returning (or raising) queued results."""

    def __init__(self, *results):
        self.results = list(results)
        self.urls = []

    def __call__(self, url, timeout=None):
        self.urls.append(url)
        result = self.results[0]
        if len(self.results) > 1:
            self.results.pop(0)
        if isinstance(result, Exception):
            raise result
        return result


class FakeClock:
    def __init__(self, now=0.0):
        self.now = now

    def __call__(self):
        return self.now


PLAYER = {
    'player': {
        'playbackState': 'playing',
        'volume': {'value': -10.0, 'min': -100.0, 'max': 0.0, 'isMuted': False},
        'activeItem': {'columns': ['Artist', 'Title', 'Album'], 'position': 12.5,
                       'duration': 200.0, 'index': 3},
    }
}


class TestBeefweb:

    def test_parse_player_response(self):
        state = parse_player_response(PLAYER)
        assert state.state == PlaybackState.PLAYING
        assert state.volume == pytest.approx(0.9)
        assert state.track.artist == 'Artist'
        assert state.track.title == 'Title'
        assert state.track.position == 12.5
        assert state.track.index == 3

    def test_parse_without_track(self):
        state = parse_player_response({'player': {'playbackState': 'weird'}})
        assert state.state == PlaybackState.STOPPED
        assert state.track is None

    def test_to_dict(self):
        data = parse_player_response(PLAYER).to_dict()
        assert data['state'] == 'playing'
        assert data['track']['album'] == 'Album'

    def test_availability_is_cached(self, monkeypatch):
        get = FakeGet(FakeResponse(200))
        monkeypatch.setattr(beefweb.requests, 'get', get)
        clock = FakeClock()
        client = BeefwebClient('http://host:8880/', cache_ttl=5.0, clock=clock)
        assert client.is_available()
        clock.now = 4.0
        assert client.is_available()
        assert len(get.urls) == 1
        clock.now = 6.0
        client.is_available()
        assert len(get.urls) == 2
        assert get.urls[0] == 'http://host:8880/api/player'

    def test_unreachable(self, monkeypatch):
        monkeypatch.setattr(beefweb.requests, 'get', FakeGet(requests.exceptions.ConnectionError('refused')))
        assert not BeefwebClient('http://host:8880').is_available()

    def test_get_state(self, monkeypatch):
        get = FakeGet(FakeResponse(200, PLAYER))
        monkeypatch.setattr(beefweb.requests, 'get', get)
        state = BeefwebClient('http://host:8880').get_state()
        assert state.track.album == 'Album'
        assert 'columns=' in get.urls[0]

    def test_get_state_connection_failure_invalidates_cache(self, monkeypatch):
        monkeypatch.setattr(beefweb.requests, 'get', FakeGet(
            FakeResponse(200), requests.exceptions.Timeout('slow')))
        clock = FakeClock()
        client = BeefwebClient('http://host:8880', clock=clock)
        assert client.is_available()
        with pytest.raises(DataUnavailableError):
            client.get_state()
        assert not client.is_available()

    @pytest.mark.parametrize('response', [FakeResponse(500), FakeResponse(200, ValueError('bad json'))])
    def test_get_state_errors(self, monkeypatch, response):
        monkeypatch.setattr(beefweb.requests, 'get', FakeGet(response))
        with pytest.raises(DataUnavailableError):
            BeefwebClient('http://host:8880').get_state()


DEVICE = {
    'displayName': 'Buds',
    'type': 'Headset',
    'connectionState': 'Connected',
    'isConnected': True,
    'battery': {'level': 55, 'supported': True},
    'adapter': {'available': True, 'enabled': True},
}


class TestBluetoothClient:

    def test_device(self, monkeypatch):
        get = FakeGet(FakeResponse(200, DEVICE))
        monkeypatch.setattr(bluetooth.requests, 'get', get)
        device = BluetoothClient('localhost:8765').get_device('AA:BB')
        assert get.urls == ['http://localhost:8765/api/devices/AA:BB']
        assert device.name == 'Buds'
        assert device.connected
        assert device.battery_level == 55
        assert device.battery_supported
        assert device.adapter_ok

    def test_disabled_adapter(self, monkeypatch):
        data = dict(DEVICE, adapter={'available': True, 'enabled': False})
        monkeypatch.setattr(bluetooth.requests, 'get', FakeGet(FakeResponse(200, data)))
        assert not BluetoothClient().get_device('AA').adapter_ok

    def test_not_found(self, monkeypatch):
        monkeypatch.setattr(bluetooth.requests, 'get', FakeGet(FakeResponse(404)))
        device = BluetoothClient().get_device('AA')
        assert device.api_reachable
        assert not device.device_found

    def test_unreachable(self, monkeypatch):
        monkeypatch.setattr(bluetooth.requests, 'get', FakeGet(requests.exceptions.ConnectionError('down')))
        assert not BluetoothClient().get_device('AA').api_reachable

    @pytest.mark.parametrize('response', [FakeResponse(500), FakeResponse(200, ValueError('bad json'))])
    def test_errors(self, monkeypatch, response):
        monkeypatch.setattr(bluetooth.requests, 'get', FakeGet(response))
        with pytest.raises(DataUnavailableError):
            BluetoothClient().get_device('AA')

    def test_transient_states(self):
        assert BluetoothDevice(connection_state='Connecting').transient
        assert not BluetoothDevice(connection_state='Connected').transient

    def test_device_type_icon(self):
        assert device_type_icon('Keyboard') == 'bt_keyboard'
        assert device_type_icon('Toaster') == 'bt_generic'


def completed(stdout=b'', returncode=0):
    return subprocess.CompletedProcess(args=[], returncode=returncode, stdout=stdout, stderr=b'')


class TestClipboardReader:

    @pytest.mark.parametrize('targets, expected', [
        ([], ContentType.TEXT),
        (['text/uri-list', 'image/png'], ContentType.FILES),
        (['image/png', 'text/plain'], ContentType.IMAGE),
        (['text/html', 'text/plain'], ContentType.HTML),
        (['UTF8_STRING'], ContentType.TEXT),
        (['application/x-foo'], ContentType.UNKNOWN),
    ])
    def test_classify_targets(self, targets, expected):
        assert classify_targets(targets) == expected

    def test_format_file_list(self):
        assert format_file_list([]) == '[No files]'
        assert format_file_list(['/home/u/notes.txt']) == 'notes.txt'
        assert format_file_list(['/a', '/b']) == '[2 files]'

    def test_detects_tool(self, monkeypatch):
        monkeypatch.setattr(clipboard.shutil, 'which', lambda tool: '/usr/bin/xclip' if tool == 'xclip' else None)
        assert ClipboardReader().tool == 'xclip'

    def test_no_tool(self, monkeypatch):
        monkeypatch.setattr(clipboard.shutil, 'which', lambda tool: None)
        with pytest.raises(ConfigurationError):
            ClipboardReader()

    def test_unsupported_tool(self):
        with pytest.raises(ConfigurationError):
            ClipboardReader('pbpaste')

    def test_read_text_and_detect_changes(self, monkeypatch):
        content = {'value': b'hello'}
        monkeypatch.setattr(clipboard.subprocess, 'run',
                            lambda cmd, capture_output, timeout: completed(content['value']))
        reader = ClipboardReader('xsel')
        assert reader.has_changed()
        assert not reader.has_changed()
        assert reader.read() == ('hello', ContentType.TEXT)
        content['value'] = b'world'
        assert reader.has_changed()

    def test_empty_selection(self, monkeypatch):
        monkeypatch.setattr(clipboard.subprocess, 'run',
                            lambda cmd, capture_output, timeout: completed(returncode=1))
        assert ClipboardReader('xsel').read() == ('', ContentType.EMPTY)

    def test_tool_failure(self, monkeypatch):
        def run(cmd, capture_output, timeout):
            raise subprocess.TimeoutExpired(cmd, timeout)
        monkeypatch.setattr(clipboard.subprocess, 'run', run)
        with pytest.raises(DataUnavailableError):
            ClipboardReader('xsel').read()

    def test_files(self, monkeypatch):
        def run(cmd, capture_output, timeout):
            if 'TARGETS' in cmd:
                return completed(b'text/uri-list\nUTF8_STRING\n')
            if 'text/uri-list' in cmd:
                return completed(b'file:///home/u/My%20File.txt\n')
            return completed(b'file:///home/u/My%20File.txt')
        monkeypatch.setattr(clipboard.subprocess, 'run', run)
        assert ClipboardReader('xclip').read() == ('My File.txt', ContentType.FILES)

    def test_file_names_are_percent_decoded(self, monkeypatch):
        uri_list = '# copied\r\nfile:///home/u/%C3%A9t%C3%A9%2Bnotes%23draft.txt\r\n'.encode()

        def run(cmd, capture_output, timeout):
            if 'TARGETS' in cmd:
                return completed(b'text/uri-list\n')
            return completed(uri_list)
        monkeypatch.setattr(clipboard.subprocess, 'run', run)
        assert ClipboardReader('xclip').read() == ('été+notes#draft.txt', ContentType.FILES)

    def test_image(self, monkeypatch):
        monkeypatch.setattr(clipboard.subprocess, 'run',
                            lambda cmd, capture_output, timeout: completed(b'image/png\n'))
        assert ClipboardReader('wl-paste').read() == ('[Image]', ContentType.IMAGE)


class TestGpuReader:

    def card(self, root, value='37\n', index=0):
        device = root / f'card{index}' / 'device'
        device.mkdir(parents=True)
        (device / 'gpu_busy_percent').write_text(value)

    @pytest.fixture
    def no_nvidia(self, monkeypatch):
        monkeypatch.setattr(gpu.shutil, 'which', lambda tool: None)

    def test_sysfs(self, tmp_path, no_nvidia):
        self.card(tmp_path, index=1)
        reader = GpuReader(adapter=1, drm_root=tmp_path)
        assert reader.source == 'sysfs'
        assert reader.sample() == 37.0

    def test_no_counter(self, tmp_path, no_nvidia):
        with pytest.raises(DataUnavailableError):
            GpuReader(drm_root=tmp_path)

    def test_sysfs_only_has_overall_utilization(self, tmp_path, no_nvidia):
        self.card(tmp_path)
        with pytest.raises(DataUnavailableError):
            GpuReader(metric='utilization_copy', drm_root=tmp_path)

    def test_unknown_metric(self, tmp_path):
        with pytest.raises(ConfigurationError):
            GpuReader(metric='temperature', drm_root=tmp_path)

    def test_garbage_value(self, tmp_path, no_nvidia):
        self.card(tmp_path, value='\n')
        with pytest.raises(DataUnavailableError):
            GpuReader(drm_root=tmp_path).sample()

    def test_nvidia_smi(self, tmp_path, monkeypatch):
        calls = []

        def run(cmd, capture_output, timeout):
            calls.append(cmd)
            return completed(b'12\n')
        monkeypatch.setattr(gpu.shutil, 'which', lambda tool: '/usr/bin/nvidia-smi')
        monkeypatch.setattr(gpu.subprocess, 'run', run)
        reader = GpuReader(adapter=0, metric='utilization_video_decode', drm_root=tmp_path)
        assert reader.source == 'nvidia-smi'
        assert reader.sample() == 12.0
        assert '--query-gpu=utilization.decoder' in calls[0]
        assert calls[0][-2:] == ['-i', '0']

    def test_nvidia_smi_failure(self, tmp_path, monkeypatch):
        monkeypatch.setattr(gpu.shutil, 'which', lambda tool: '/usr/bin/nvidia-smi')
        monkeypatch.setattr(gpu.subprocess, 'run',
                            lambda cmd, capture_output, timeout: completed(b'[N/A]\n'))
        with pytest.raises(DataUnavailableError):
            GpuReader(drm_root=tmp_path).sample()


class TestVolumeReader:

    def test_parse_wpctl(self):
        assert parse_wpctl('Volume: 0.40\n') == (pytest.approx(40.0), False)
        assert parse_wpctl('Volume: 0.25 [MUTED]\n') == (pytest.approx(25.0), True)
        with pytest.raises(DataUnavailableError):
            parse_wpctl('nothing here')

    def test_parse_pactl(self):
        out = 'Volume: front-left: 26214 /  40% / -23.81 dB,   front-right: 26214 /  40% / -23.81 dB'
        assert parse_pactl(out) == 40.0

    def test_parse_amixer(self):
        out = "Simple mixer control 'Master',0\n  Mono: Playback 40 [63%] [-24.00dB] [off]\n"
        assert parse_amixer(out) == (63.0, True)
        assert parse_amixer('  Front Left: Playback 26214 [40%] [on]') == (40.0, False)

    def test_detects_tool(self, monkeypatch):
        monkeypatch.setattr(volume.shutil, 'which', lambda tool: '/usr/bin/amixer' if tool == 'amixer' else None)
        assert VolumeReader().tool == 'amixer'

    def test_no_tool(self, monkeypatch):
        monkeypatch.setattr(volume.shutil, 'which', lambda tool: None)
        with pytest.raises(ConfigurationError):
            VolumeReader()

    def test_pactl_reads_mute(self, monkeypatch):
        def run(cmd, capture_output, timeout):
            if 'get-sink-mute' in cmd:
                return completed(b'Mute: yes\n')
            return completed(b'Volume: front-left: 19661 /  30% / -31.37 dB')
        monkeypatch.setattr(volume.subprocess, 'run', run)
        assert VolumeReader('pactl').sample() == (30.0, True)

    def test_tool_failure(self, monkeypatch):
        monkeypatch.setattr(volume.subprocess, 'run',
                            lambda cmd, capture_output, timeout: completed(returncode=1))
        with pytest.raises(DataUnavailableError):
            VolumeReader('wpctl').sample()


class TestKeyboardLockReader:

    def led(self, root, name, value):
        path = root / name
        path.mkdir()
        (path / 'brightness').write_text(value)

    def test_reads_leds(self, tmp_path):
        self.led(tmp_path, 'input0::capslock', '1\n')
        self.led(tmp_path, 'input0::numlock', '0\n')
        self.led(tmp_path, 'input3::numlock', '1\n')
        self.led(tmp_path, 'input0::scrolllock', '0\n')
        assert KeyboardLockReader(tmp_path).sample() == (True, True, False)

    def test_missing_directory_reads_off(self, tmp_path):
        assert KeyboardLockReader(tmp_path / 'missing').sample() == (False, False, False)


class TestSystemReaders:

    def test_cpu_total(self, monkeypatch):
        monkeypatch.setattr(system.psutil, 'cpu_count', lambda: 4)
        monkeypatch.setattr(system.psutil, 'cpu_percent',
                            lambda interval=None, percpu=False: [1.0, 2.0, 3.0, 4.0] if percpu else 12.5)
        assert CpuReader().sample() == 12.5
        assert CpuReader(core=2).sample() == 3.0

    def test_cpu_core_out_of_range(self, monkeypatch):
        monkeypatch.setattr(system.psutil, 'cpu_count', lambda: 4)
        with pytest.raises(ConfigurationError):
            CpuReader(core=9)

    def test_memory(self, monkeypatch):
        monkeypatch.setattr(system.psutil, 'virtual_memory', lambda: SimpleNamespace(percent=61.0))
        assert MemoryReader().sample() == 61.0

    def test_network(self, monkeypatch):
        counters = {
            'eth0': SimpleNamespace(bytes_recv=10, bytes_sent=5),
            'lo': SimpleNamespace(bytes_recv=1, bytes_sent=1),
        }
        monkeypatch.setattr(system.psutil, 'net_io_counters', lambda pernic=False: counters)
        assert NetworkReader().sample() == (11, 6)
        assert NetworkReader('eth0').sample() == (10, 5)
        with pytest.raises(DataUnavailableError):
            NetworkReader('wlan0').sample()

    def test_disk(self, monkeypatch):
        counters = {'sda': SimpleNamespace(read_bytes=100, write_bytes=50)}
        monkeypatch.setattr(system.psutil, 'disk_io_counters', lambda perdisk=False: counters)
        assert DiskReader().sample() == (100, 50)
        assert DiskReader('sda').sample() == (100, 50)
        with pytest.raises(DataUnavailableError):
            DiskReader('nvme0n1').sample()

    def test_disk_without_counters(self, monkeypatch):
        monkeypatch.setattr(system.psutil, 'disk_io_counters', lambda perdisk=False: None)
        assert DiskReader().sample() == (0, 0)
