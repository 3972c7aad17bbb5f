"""
Tests for the graph history ring buffer.
"""

import pytest

from oledash.util.ring_buffer import RingBuffer


class TestRingBuffer:

    def test_empty(self):
        buf = RingBuffer(4)
        assert buf.is_empty()
        assert not buf.is_full()
        assert len(buf) == 0
        assert buf.to_list() == []
        assert buf.get(0) == 0.0

    @pytest.mark.parametrize("count", [1, 3, 4, 5, 11])
    def test_keeps_latest_in_order(self, count):
        buf = RingBuffer(4)
        values = [float(v) for v in range(1, count + 1)]
        for v in values:
            buf.push(v)
        assert len(buf) == min(count, 4)
        assert buf.to_list() == values[-4:]
        assert [buf.get(i) for i in range(len(buf))] == values[-4:]

    def test_push_when_full_evicts_oldest(self):
        buf = RingBuffer(3)
        for v in (1.0, 2.0, 3.0):
            buf.push(v)
        assert buf.is_full()
        buf.push(4.0)
        assert buf.to_list() == [2.0, 3.0, 4.0]
        assert buf.cap == 3

    def test_get_out_of_range(self):
        buf = RingBuffer(3)
        buf.push(7.0)
        assert buf.get(-1) == 0.0
        assert buf.get(1) == 0.0

    def test_to_list_is_a_copy(self):
        buf = RingBuffer(3)
        buf.push(1.0)
        snapshot = buf.to_list()
        snapshot.append(99.0)
        assert buf.to_list() == [1.0]

    def test_clear(self):
        buf = RingBuffer(2)
        buf.push(1.0)
        buf.push(2.0)
        buf.clear()
        assert buf.is_empty()
        buf.push(5.0)
        assert buf.to_list() == [5.0]

    def test_non_positive_capacity_holds_one(self):
        buf = RingBuffer(0)
        buf.push(1.0)
        buf.push(2.0)
        assert buf.to_list() == [2.0]
