"""
System metric readers backed by psutil.

Each reader exposes sample() and close(). Percent readers return a float
in 0..100; counter readers return cumulative (primary, secondary) byte
counts and leave rate computation to the widget.
"""

import logging
from typing import Optional, Tuple

import psutil

from ..errors import ConfigurationError, DataUnavailableError

logger = logging.getLogger(__name__)


class CpuReader:
    """
    CPU utilisation since the previous sample.

    Args:
        core: Index of a single core to report, or None for the total
    """

    def __init__(self, core: Optional[int] = None):
        count = psutil.cpu_count() or 1
        if core is not None and not 0 <= core < count:
            raise ConfigurationError(f"cpu core {core} out of range (0..{count - 1})")
        self.core = core
        # Prime the counters; the first non-blocking call always returns 0.0
        psutil.cpu_percent(interval=None, percpu=core is not None)

    def sample(self) -> float:
        if self.core is None:
            return float(psutil.cpu_percent(interval=None))
        per_core = psutil.cpu_percent(interval=None, percpu=True)
        if self.core >= len(per_core):
            raise DataUnavailableError(f"cpu core {self.core} not reported")
        return float(per_core[self.core])

    def close(self):
        pass


class MemoryReader:
    def sample(self) -> float:
        return float(psutil.virtual_memory().percent)

    def close(self):
        pass


class NetworkReader:
    """
    Cumulative (bytes_recv, bytes_sent) for one interface or all of them.

    Args:
        interface: Interface name, or None/'' to sum every interface
    """

    def __init__(self, interface: Optional[str] = None):
        self.interface = interface or None
        self._missing_logged = False

    def sample(self) -> Tuple[int, int]:
        counters = psutil.net_io_counters(pernic=True)
        if self.interface is None:
            return (sum(c.bytes_recv for c in counters.values()),
                    sum(c.bytes_sent for c in counters.values()))

        stats = counters.get(self.interface)
        if stats is None:
            if not self._missing_logged:
                logger.warning(f"Network interface '{self.interface}' not found")
                self._missing_logged = True
            raise DataUnavailableError(f"network interface '{self.interface}' not found")
        self._missing_logged = False
        return stats.bytes_recv, stats.bytes_sent

    def close(self):
        pass


class DiskReader:
    """
    Cumulative (read_bytes, write_bytes) for one disk or all of them.

    Args:
        disk: Disk name as psutil reports it ('sda', 'nvme0n1'), or None for all
    """

    def __init__(self, disk: Optional[str] = None):
        self.disk = disk or None
        self._missing_logged = False

    def sample(self) -> Tuple[int, int]:
        counters = psutil.disk_io_counters(perdisk=True) or {}
        if self.disk is None:
            return (sum(c.read_bytes for c in counters.values()),
                    sum(c.write_bytes for c in counters.values()))

        stats = counters.get(self.disk)
        if stats is None:
            if not self._missing_logged:
                logger.warning(f"Disk '{self.disk}' not found")
                self._missing_logged = True
            raise DataUnavailableError(f"disk '{self.disk}' not found")
        self._missing_logged = False
        return stats.read_bytes, stats.write_bytes

    def close(self):
        pass
