"""
Output sinks for composed frames.

- EmulatorSink: in-memory frame, BMP and ASCII export (PIL only)
- LumaSink: SSD1306/SSD1322 through luma.oled, falls back to emulation
- PreviewServer: Flask endpoints over a sink
"""

from .emulator import EmulatorSink
from .luma_sink import LumaSink, LUMA_AVAILABLE, to_monochrome
from .preview import PreviewServer


def create_sink(width: int, height: int, background: int = 0, use_hardware: bool = False, **kwargs):
    """LumaSink when hardware is requested, else the emulator."""
    if use_hardware:
        return LumaSink(width, height, background, **kwargs)
    return EmulatorSink(width, height, background)

