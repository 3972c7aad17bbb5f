"""
Bluetooth device widget

Shows one device as a composite line built from a format string, e.g.
"{icon} {name} {battery:20}". Tokens:

    {icon}                          device type icon (Icon)
    {name} {level} {state}          display name, "NN%", connection state (Text)
    {battery:W} {battery_h:W}       battery shape W pixels wide (Shape)
    {battery_v:W}                   upright battery
    {bar:W} {bar_h:W} {bar_v:W}     outlined level bar

Anything else in braces is drawn literally.
"""

import logging
import time
from typing import Optional

from PIL import Image

from ..anim.blink import BlinkAnimator, BlinkMode
from ..bitmap.glyphs import BLUETOOTH_ICONS, Glyph, get_icon, select_icon_set
from ..bitmap.shapes import draw_battery_token, draw_level_bar
from ..config import widgets as widget_defaults
from ..errors import ConfigurationError
from ..readers.bluetooth import BluetoothClient, BluetoothDevice, device_type_icon
from ..render.composite import CompositeTokenRenderer, TokenResolver
from ..render.config_helper import ConfigHelper
from ..render.tokens import Token, TokenType, parse_format_tokens, find_blink_target
from .base_widget import BaseWidget
from .registry import register

logger = logging.getLogger(__name__)

BLINK_INTERVAL = 0.5

_TEXT_NAMES = ('name', 'level', 'state')
_SHAPE_NAMES = ('battery', 'battery_h', 'battery_v', 'bar', 'bar_h', 'bar_v')


def classify_bluetooth_token(name: str) -> TokenType:
    if name == 'icon':
        return TokenType.ICON
    if name in _TEXT_NAMES:
        return TokenType.TEXT
    if name in _SHAPE_NAMES:
        return TokenType.SHAPE
    return TokenType.LITERAL


def icon_state(device: BluetoothDevice, color_on: int, color_off: int):
    """(icon name, colour) for the device's current state."""
    if not device.api_reachable or not device.adapter_ok:
        return 'bt_off', color_off
    if not device.device_found:
        return 'bt_unknown', color_on
    if device.connected or device.transient:
        return device_type_icon(device.device_type), color_on
    return device_type_icon(device.device_type), color_off


class BluetoothResolver(TokenResolver):
    """Resolves tokens against one device snapshot."""

    def __init__(self, font, icon_set, v_align: str, device: BluetoothDevice,
                 color_on: int, color_off: int):
        super().__init__(font, icon_set, v_align, color_on)
        self.device = device
        self.color_on = color_on
        self.color_off = color_off
        self.icon_name, self.icon_colour = icon_state(device, color_on, color_off)

    @property
    def _usable(self) -> bool:
        d = self.device
        return d.api_reachable and d.adapter_ok and d.device_found

    def text_for(self, token: Token) -> str:
        if not self._usable:
            return ''
        d = self.device
        if token.name == 'name':
            return d.name
        if token.name == 'level':
            if d.connected and d.battery_supported and d.battery_level is not None:
                return f"{d.battery_level}%"
            return ''
        if token.name == 'state':
            return d.connection_state
        return ''

    def icon_for(self, token: Token) -> Optional[Glyph]:
        return get_icon(self.icon_set, self.icon_name)

    def icon_color(self, token: Token) -> int:
        return self.icon_colour

    def literal_color(self, token: Token) -> int:
        if self._usable and not self.device.connected:
            return self.color_off
        return self.color_on

    def text_color(self, token: Token) -> int:
        return self.color_on if self.device.connected else self.color_off

    def draw_shape(self, img: Image.Image, token: Token, x: int, y: int, width: int, height: int):
        d = self.device
        if not (d.device_found and d.connected and d.battery_supported and d.battery_level is not None):
            return
        level = d.battery_level
        if token.name in ('battery', 'battery_h'):
            draw_battery_token(img, x, y, width, height, level, self.color_on)
        elif token.name == 'battery_v':
            draw_battery_token(img, x, y, width, height, level, self.color_on, vertical=True)
        elif token.name in ('bar', 'bar_h'):
            draw_level_bar(img, x, y, width, height, level, self.color_on)
        elif token.name == 'bar_v':
            draw_level_bar(img, x, y, width, height, level, self.color_on, vertical=True)


@register('bluetooth')
class BluetoothWidget(BaseWidget):
    """
    Configuration (params):
        bluetooth: {address (required), api_url, format, low_battery_threshold}
        colors: {on, off}

    An unknown device blinks its icon; a connected device at or below
    low_battery_threshold blinks its battery shape (or icon, or name).
    """

    def __init__(self, cfg, client: Optional[BluetoothClient] = None):
        super().__init__(cfg)
        helper = ConfigHelper(cfg)
        bt = helper.section('bluetooth')

        self.address = bt.get('address') or ''
        if not self.address:
            raise ConfigurationError(f"bluetooth widget '{cfg.id}' requires bluetooth.address")

        self.format = bt.get('format') or widget_defaults.BLUETOOTH_FORMAT
        self.tokens = parse_format_tokens(self.format, classify_bluetooth_token)
        self.layout = CompositeTokenRenderer(self.tokens, cfg.text.h_align)
        self.low_battery_threshold = int(bt.get('low_battery_threshold') or 0)

        colors = helper.section('colors')
        self.color_on = int(colors.get('on', widget_defaults.COLOR_ON))
        self.color_off = int(colors.get('off', widget_defaults.COLOR_OFF))

        self.font = helper.load_font()
        self.v_align = cfg.text.v_align
        self.icon_set = select_icon_set(BLUETOOTH_ICONS, cfg.position.h)

        self.blink = BlinkAnimator(BlinkMode.ALWAYS, BLINK_INTERVAL)
        self.battery_blink = BlinkAnimator(BlinkMode.ALWAYS, BLINK_INTERVAL)

        self.client = client if client is not None else BluetoothClient(
            bt.get('api_url') or widget_defaults.BLUETOOTH_API_URL)
        # Optimistic until the first answer
        self._device = BluetoothDevice()

    @property
    def device(self) -> BluetoothDevice:
        with self._lock:
            return self._device

    def update(self):
        device = self.client.get_device(self.address)
        with self._lock:
            self._device = device

    def battery_low(self, device: BluetoothDevice) -> bool:
        return (self.low_battery_threshold > 0 and device.connected and device.battery_supported
                and device.battery_level is not None
                and device.battery_level <= self.low_battery_threshold)

    def render(self, now: Optional[float] = None) -> Image.Image:
        now = time.monotonic() if now is None else now
        with self._lock:
            device = self._device
            self.blink.tick(now)
            self.battery_blink.tick(now)
            blink_visible = self.blink.should_render()
            battery_visible = self.battery_blink.should_render()

        hidden = set()
        if self.battery_low(device) and not battery_visible:
            target = find_blink_target(self.tokens)
            if target is not None:
                hidden.add(target)
        if not device.device_found and not blink_visible:
            hidden.update(i for i, t in enumerate(self.tokens) if t.type == TokenType.ICON)

        img = self.create_canvas()
        self.apply_border(img)
        resolver = BluetoothResolver(self.font, self.icon_set, self.v_align, device,
                                     self.color_on, self.color_off)
        self.layout.render(img, self.get_content_area(), resolver, hidden)
        return img

    def close(self):
        self.client.close()
