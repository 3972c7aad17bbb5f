"""
Display Configuration
"""

# =============================================================================
# Display Geometry
# =============================================================================
WIDTH = 128  # pixels
HEIGHT = 40  # pixels
BACKGROUND = 0  # 0 = panel off, 255 = fully lit
REFRESH_RATE_MS = 100  # frame loop period in milliseconds
DEDUPLICATE_FRAMES = True  # skip delivering frames identical to the previous one

# =============================================================================
# Transitions (played when the widget set is switched)
# =============================================================================
TRANSITION_TYPE = 'none'  # none, push_left, slide_up, dissolve_fade, clock_wipe, random, ...
TRANSITION_DURATION = 0.5  # seconds

# =============================================================================
# Hardware Sink (luma.oled)
# =============================================================================
USE_HARDWARE = False  # Use actual hardware display (set False for emulation)
DRIVER = 'ssd1306'  # ssd1306 or ssd1322
I2C_PORT = 1
I2C_ADDRESS = 0x3C
GPIO_DC = 25        # GPIO pin for Data/Command (SPI only)
GPIO_RST = 24       # GPIO pin for Reset (SPI only)
SPI_PORT = 0
SPI_DEVICE = 0
SPI_BUS_SPEED = 4_000_000  # Hz
ROTATE = 0          # 0=0°, 1=90°, 2=180°, 3=270°
DITHER = False      # Floyd-Steinberg when packing frames to 1-bit
