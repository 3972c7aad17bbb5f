"""
Bluetooth status service client

Talks to a local HTTP service that reports per-device Bluetooth state
(GET /api/devices/<address>).
"""

import logging
from dataclasses import dataclass
from typing import Optional, Dict, Any

import requests

from ..config import system as system_config
from ..config import widgets as widget_defaults
from ..errors import DataUnavailableError

logger = logging.getLogger(__name__)

TRANSIENT_STATES = ('Connecting', 'Disconnecting')


@dataclass
class BluetoothDevice:
    """
    Snapshot of one device as the widget sees it.

    api_reachable, adapter_ok and device_found describe how far the lookup
    got; the device fields are only meaningful when all three are true.
    """
    api_reachable: bool = True
    adapter_ok: bool = True
    device_found: bool = True
    name: str = ""
    device_type: str = "Unknown"
    connection_state: str = ""
    connected: bool = False
    battery_level: Optional[int] = None
    battery_supported: bool = False

    @property
    def transient(self) -> bool:
        return self.connection_state in TRANSIENT_STATES

    @classmethod
    def unreachable(cls) -> 'BluetoothDevice':
        return cls(api_reachable=False)

    @classmethod
    def not_found(cls) -> 'BluetoothDevice':
        return cls(device_found=False)

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> 'BluetoothDevice':
        adapter = data.get('adapter')
        # No adapter block: the service answered with device data, so the adapter works
        adapter_ok = True if adapter is None else bool(adapter.get('available')) and bool(adapter.get('enabled'))
        battery = data.get('battery') or {}
        level = battery.get('level')
        return cls(
            adapter_ok=adapter_ok,
            name=data.get('displayName') or data.get('name') or '',
            device_type=data.get('type') or 'Unknown',
            connection_state=data.get('connectionState') or '',
            connected=bool(data.get('isConnected', False)),
            battery_level=int(level) if level is not None else None,
            battery_supported=bool(battery.get('supported', False)),
        )


class BluetoothClient:
    """
    Args:
        api_url: host:port of the status service
        timeout: Per-request timeout in seconds
    """

    def __init__(self, api_url: str = widget_defaults.BLUETOOTH_API_URL,
                 timeout: float = system_config.HTTP_TIMEOUT):
        self.api_url = api_url or widget_defaults.BLUETOOTH_API_URL
        self.timeout = timeout
        self._reachable = True

    def get_device(self, address: str) -> BluetoothDevice:
        """
        Look up one device.

        An unreachable service and an unknown address are normal answers,
        not errors.

        Raises:
            DataUnavailableError: unexpected HTTP status or malformed JSON
        """
        url = f"http://{self.api_url}/api/devices/{address}"
        try:
            response = requests.get(url, timeout=self.timeout)
        except requests.exceptions.RequestException as e:
            if self._reachable:
                logger.warning(f"Bluetooth API unreachable at {url}: {e}")
                self._reachable = False
            return BluetoothDevice.unreachable()

        if not self._reachable:
            logger.info(f"Bluetooth API reachable again at {self.api_url}")
            self._reachable = True

        if response.status_code == 404:
            return BluetoothDevice.not_found()
        if response.status_code != 200:
            raise DataUnavailableError(f"bluetooth API returned status {response.status_code}")

        try:
            return BluetoothDevice.from_api(response.json())
        except (ValueError, TypeError, AttributeError) as e:
            logger.error(f"Failed to parse bluetooth API response: {e}")
            raise DataUnavailableError(f"bad bluetooth API response: {e}") from e

    def close(self):
        pass


DEVICE_TYPE_ICONS = {
    'AudioOutput': 'bt_headphones',
    'Headset': 'bt_headphones',
    'AudioInput': 'bt_microphone',
    'Keyboard': 'bt_keyboard',
    'Mouse': 'bt_mouse',
    'Gamepad': 'bt_gamepad',
    'Computer': 'bt_computer',
    'Phone': 'bt_phone',
}


def device_type_icon(device_type: str) -> str:
    return DEVICE_TYPE_ICONS.get(device_type, 'bt_generic')
