"""
Keyboard lock LED reader (Linux sysfs)
"""

import logging
from pathlib import Path
from typing import Tuple

from ..errors import DataUnavailableError

logger = logging.getLogger(__name__)

LEDS_ROOT = Path('/sys/class/leds')
LOCK_NAMES = ('capslock', 'numlock', 'scrolllock')


class KeyboardLockReader:
    """
    Reads caps/num/scroll lock state from /sys/class/leds/*::<name>/brightness.

    A lock counts as on when any keyboard reports a non-zero brightness for
    it; a lock with no LED entry counts as off.

    Args:
        root: sysfs LED directory (overridable for tests)
    """

    def __init__(self, root: Path = LEDS_ROOT):
        self.root = Path(root)
        if not self.root.is_dir():
            logger.warning(f"LED directory {self.root} not found, lock states will read as off")

    def _state(self, name: str) -> bool:
        for led in self.root.glob(f'*::{name}'):
            try:
                value = (led / 'brightness').read_text().strip()
            except OSError as e:
                raise DataUnavailableError(f"cannot read {led}: {e}") from e
            if value and value != '0':
                return True
        return False

    def sample(self) -> Tuple[bool, bool, bool]:
        caps, num, scroll = (self._state(name) for name in LOCK_NAMES)
        return caps, num, scroll

    def close(self):
        pass
