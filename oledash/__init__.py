"""
oledash - live dashboards for small monochrome OLED panels

This package contains:
- Bitmap primitives and text rendering on 8-bit gray canvases
- Metric, indicator and media widgets with their data readers
- Frame compositor with z-order, transparency and transitions
- Output sinks (emulator, luma.oled hardware, Flask preview)
"""

__version__ = "1.0.0"
__author__ = "oledash Team"
