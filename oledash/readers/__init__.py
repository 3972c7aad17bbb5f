"""
Data source collaborators used by widgets.

Readers do the I/O (psutil counters, HTTP services, clipboard tools, sysfs)
so that widgets only ever see plain values and records.
"""

from .system import CpuReader, MemoryReader, NetworkReader, DiskReader
from .beefweb import BeefwebClient, PlayerState, PlaybackState, TrackInfo, parse_player_response
from .bluetooth import BluetoothClient, BluetoothDevice, device_type_icon
from .clipboard import ClipboardReader, ContentType, classify_targets, detect_tool
from .keyboard import KeyboardLockReader
from .gpu import GpuReader, GPU_METRICS
from .volume import VolumeReader
