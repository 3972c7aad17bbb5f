"""
Hardware sink for SSD1306 (I2C) and SSD1322 (SPI) panels via luma.oled.

luma.oled is optional: without it, or when the panel fails to come up,
the sink falls back to emulation so the dashboard keeps running.
"""

import logging
from typing import Any, Dict, Optional

from PIL import Image

from ..bitmap.canvas import pack_1bit
from ..config import display as display_defaults
from .emulator import EmulatorSink

logger = logging.getLogger(__name__)

# Hardware support is OPTIONAL - only available on a Raspberry Pi or similar
try:
    from luma.core.interface.serial import i2c, spi
    from luma.oled.device import ssd1306, ssd1322
    LUMA_AVAILABLE = True
    logger.info("Hardware display support available (luma.oled detected)")
except ImportError:
    LUMA_AVAILABLE = False
    logger.info("Hardware display not available - will use emulator mode only")

DRIVERS = ('ssd1306', 'ssd1322')


def to_monochrome(img: Image.Image, dither: bool = False) -> Image.Image:
    """1-bit copy of a gray canvas, as SSD1306 panels take it."""
    return Image.frombytes('1', img.size, pack_1bit(img, dither))


class LumaSink(EmulatorSink):
    """
    Drives a real panel and mirrors every frame into the emulator state,
    so the web preview shows what the panel shows.

    Args:
        width, height: Display size
        background: Initial fill level
        driver: 'ssd1306' (I2C, 1-bit) or 'ssd1322' (SPI, 4-bit gray)
        dither: Floyd-Steinberg when packing to 1-bit
    """

    def __init__(self, width: int, height: int, background: int = 0,
                 driver: str = display_defaults.DRIVER,
                 i2c_port: int = display_defaults.I2C_PORT,
                 i2c_address: int = display_defaults.I2C_ADDRESS,
                 spi_port: int = display_defaults.SPI_PORT,
                 spi_device: int = display_defaults.SPI_DEVICE,
                 gpio_dc: int = display_defaults.GPIO_DC,
                 gpio_rst: int = display_defaults.GPIO_RST,
                 bus_speed_hz: int = display_defaults.SPI_BUS_SPEED,
                 rotate: int = display_defaults.ROTATE,
                 dither: bool = display_defaults.DITHER):
        super().__init__(width, height, background)
        self.driver = driver
        self.i2c_port = i2c_port
        self.i2c_address = i2c_address
        self.spi_port = spi_port
        self.spi_device = spi_device
        self.gpio_dc = gpio_dc
        self.gpio_rst = gpio_rst
        self.bus_speed_hz = bus_speed_hz
        self.rotate = rotate
        self.dither = dither

        self.mode: Optional[str] = None
        self.serial = None
        self.device = None

    def initialize(self) -> bool:
        """
        Try the hardware panel, fall back to emulation.

        Returns:
            True (emulation cannot fail)
        """
        if LUMA_AVAILABLE:
            if self._initialize_hardware():
                self.mode = 'hardware'
                super().initialize()
                logger.info(f"Display initialized in HARDWARE mode ({self.driver})")
                return True
            logger.warning("Hardware display initialization failed, falling back to emulator")
        else:
            logger.warning("luma.oled not installed, falling back to emulator")

        self.mode = 'emulator'
        return super().initialize()

    def _initialize_hardware(self) -> bool:
        if self.driver not in DRIVERS:
            logger.error(f"Unsupported display driver '{self.driver}'")
            return False
        try:
            if self.driver == 'ssd1306':
                self.serial = i2c(port=self.i2c_port, address=self.i2c_address)
                self.device = ssd1306(self.serial, width=self.width, height=self.height,
                                      rotate=self.rotate)
            else:
                logger.info(f"Initializing SPI hardware at {self.bus_speed_hz / 1e6:.1f} MHz")
                self.serial = spi(port=self.spi_port, device=self.spi_device,
                                  gpio_DC=self.gpio_dc, gpio_RST=self.gpio_rst,
                                  bus_speed_hz=self.bus_speed_hz)
                self.device = ssd1322(self.serial, width=self.width, height=self.height,
                                      rotate=self.rotate)
            self.device.clear()
            return True
        except Exception as e:
            logger.error(f"Hardware display initialization failed: {e}")
            self.device = None
            self.serial = None
            return False

    def deliver_frame(self, img: Image.Image):
        super().deliver_frame(img)
        if self.mode != 'hardware' or self.device is None:
            return
        try:
            if self.driver == 'ssd1306':
                self.device.display(to_monochrome(img, self.dither))
            else:
                self.device.display(img.convert(self.device.mode))
        except Exception as e:
            logger.error(f"Error sending frame to display: {e}")

    def cleanup(self):
        try:
            if self.mode == 'hardware' and self.device is not None:
                self.device.clear()
                self.device.cleanup()
        except Exception as e:
            logger.error(f"Error during display cleanup: {e}")
        finally:
            self.device = None
            self.serial = None
            self.mode = None
        super().cleanup()

    def get_display_info(self) -> Dict[str, Any]:
        info = super().get_display_info()
        info['mode'] = self.mode
        if self.mode == 'hardware':
            info.update({
                'driver': self.driver,
                'rotate': self.rotate,
                'dither': self.dither,
            })
        return info
