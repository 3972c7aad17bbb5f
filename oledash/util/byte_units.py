"""
Byte-rate unit conversion for dual I/O widgets.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Tuple


class UnitFamily(Enum):
    BYTES_DECIMAL = "bytes_decimal"
    BYTES_BINARY = "bytes_binary"
    BITS = "bits"


@dataclass(frozen=True)
class ByteUnit:
    name: str
    divisor: float  # bytes per second in one unit
    is_bits: bool = False
    is_binary: bool = False


BYTE_UNITS_DECIMAL = {
    'B/s': ByteUnit('B/s', 1),
    'KB/s': ByteUnit('KB/s', 1e3),
    'MB/s': ByteUnit('MB/s', 1e6),
    'GB/s': ByteUnit('GB/s', 1e9),
}

BYTE_UNITS_BINARY = {
    'B/s': ByteUnit('B/s', 1),
    'KiB/s': ByteUnit('KiB/s', 1024, is_binary=True),
    'MiB/s': ByteUnit('MiB/s', 1024 ** 2, is_binary=True),
    'GiB/s': ByteUnit('GiB/s', 1024 ** 3, is_binary=True),
}

BIT_UNITS = {
    'bps': ByteUnit('bps', 1 / 8, is_bits=True),
    'Kbps': ByteUnit('Kbps', 1e3 / 8, is_bits=True),
    'Mbps': ByteUnit('Mbps', 1e6 / 8, is_bits=True),
    'Gbps': ByteUnit('Gbps', 1e9 / 8, is_bits=True),
}

ALL_UNITS: Dict[str, ByteUnit] = {**BYTE_UNITS_DECIMAL, **BYTE_UNITS_BINARY, **BIT_UNITS}

_AUTO_SCALE_ORDER = {
    UnitFamily.BYTES_DECIMAL: ['B/s', 'KB/s', 'MB/s', 'GB/s'],
    UnitFamily.BYTES_BINARY: ['B/s', 'KiB/s', 'MiB/s', 'GiB/s'],
    UnitFamily.BITS: ['bps', 'Kbps', 'Mbps', 'Gbps'],
}


def is_valid_unit(name: str) -> bool:
    return name in ALL_UNITS


def determine_unit_family(name: str) -> UnitFamily:
    unit = ALL_UNITS.get(name)
    if unit is not None:
        if unit.is_bits:
            return UnitFamily.BITS
        if unit.is_binary:
            return UnitFamily.BYTES_BINARY
    return UnitFamily.BYTES_DECIMAL


class ByteRateConverter:
    """Converts bytes/second into a named unit, or picks one automatically."""

    def __init__(self, default_unit: str = 'MB/s'):
        if default_unit != 'auto' and not is_valid_unit(default_unit):
            default_unit = 'MB/s'
        self.default_unit = default_unit
        self.family = determine_unit_family(default_unit)

    def convert(self, bps: float, unit_name: str) -> Tuple[float, str]:
        if unit_name == 'auto':
            return self.auto_scale(bps)
        unit = ALL_UNITS.get(unit_name) or ALL_UNITS.get(self.default_unit) or BYTE_UNITS_DECIMAL['MB/s']
        return bps / unit.divisor, unit.name

    def auto_scale(self, bps: float) -> Tuple[float, str]:
        """Largest unit of the family in which the value is still >= 1."""
        names: List[str] = _AUTO_SCALE_ORDER[self.family]
        selected = names[0]
        for name in names:
            if bps / ALL_UNITS[name].divisor >= 1:
                selected = name
            else:
                break
        unit = ALL_UNITS[selected]
        return bps / unit.divisor, unit.name
