"""
Small shared containers and converters.
"""

from .ring_buffer import RingBuffer
from .byte_units import ByteRateConverter, ByteUnit, UnitFamily, is_valid_unit, ALL_UNITS
