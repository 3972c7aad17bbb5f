"""
Byte-rate unit conversion tests.
"""

import pytest

from oledash.util.byte_units import ByteRateConverter, UnitFamily, determine_unit_family, is_valid_unit


def test_convert_fixed_units():
    conv = ByteRateConverter()
    assert conv.convert(1_000_000, 'MB/s') == (pytest.approx(1.0), 'MB/s')
    assert conv.convert(1_000_000, 'Mbps') == (pytest.approx(8.0), 'Mbps')
    assert conv.convert(2048, 'KiB/s') == (pytest.approx(2.0), 'KiB/s')


def test_convert_unknown_unit_uses_default():
    assert ByteRateConverter('KB/s').convert(2000, 'parsecs') == (pytest.approx(2.0), 'KB/s')


def test_invalid_default_unit():
    assert ByteRateConverter('furlongs').default_unit == 'MB/s'


@pytest.mark.parametrize('default, bps, expected', [
    ('MB/s', 1500, (1.5, 'KB/s')),
    ('MB/s', 0.5, (0.5, 'B/s')),
    ('MB/s', 3e9, (3.0, 'GB/s')),
    ('MiB/s', 3 * 1024 ** 2, (3.0, 'MiB/s')),
    ('Mbps', 125, (1.0, 'Kbps')),
    ('Mbps', 1_250_000, (10.0, 'Mbps')),
])
def test_auto_scale_stays_in_family(default, bps, expected):
    value, unit = ByteRateConverter(default).auto_scale(bps)
    assert (value, unit) == (pytest.approx(expected[0]), expected[1])


def test_convert_auto():
    assert ByteRateConverter('MB/s').convert(1500, 'auto') == (pytest.approx(1.5), 'KB/s')


def test_unit_families():
    assert determine_unit_family('Gbps') == UnitFamily.BITS
    assert determine_unit_family('GiB/s') == UnitFamily.BYTES_BINARY
    assert determine_unit_family('KB/s') == UnitFamily.BYTES_DECIMAL
    assert determine_unit_family('B/s') == UnitFamily.BYTES_DECIMAL


def test_is_valid_unit():
    assert is_valid_unit('Kbps')
    assert not is_valid_unit('auto')
