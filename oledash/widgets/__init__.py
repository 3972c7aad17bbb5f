"""
Widgets and the registry that builds them from configuration.

Importing this package registers every widget type:

    from oledash.widgets import create_widgets
    widgets = create_widgets(dashboard.widgets)
"""

from .base_widget import BaseWidget
from .registry import register, create_widget, create_widgets, registered_types
from .metric import MetricWidget, CpuWidget, MemoryWidget, GpuWidget
from .dual_io import DualIOWidget, NetworkWidget, DiskWidget, format_io_value
from .clock import ClockWidget
from .bluetooth import BluetoothWidget
from .keyboard import KeyboardWidget
from .media import MediaWidget
from .clipboard import ClipboardWidget
from .mascot import MascotWidget
from .volume import VolumeWidget
