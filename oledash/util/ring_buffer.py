"""
Fixed-capacity circular buffer used for graph history.
"""

from typing import List


class RingBuffer:
    """
    Circular buffer of floats with overwrite-oldest semantics.

    Push is O(1); readout is oldest first. Not thread safe: owners guard it
    with their own lock.
    """

    def __init__(self, capacity: int):
        if capacity <= 0:
            capacity = 1
        self._data = [0.0] * capacity
        self._head = 0
        self._count = 0

    def push(self, value: float):
        self._data[self._head] = value
        self._head = (self._head + 1) % len(self._data)
        if self._count < len(self._data):
            self._count += 1

    def __len__(self) -> int:
        return self._count

    def len(self) -> int:
        return self._count

    @property
    def cap(self) -> int:
        return len(self._data)

    def is_full(self) -> bool:
        return self._count == len(self._data)

    def is_empty(self) -> bool:
        return self._count == 0

    def get(self, index: int) -> float:
        """Return the index-th element, oldest first; 0.0 when out of range."""
        if index < 0 or index >= self._count:
            return 0.0
        size = len(self._data)
        start = (self._head - self._count + size) % size
        return self._data[(start + index) % size]

    def to_list(self) -> List[float]:
        """Return a fresh ordered copy, oldest first."""
        if self._count == 0:
            return []
        size = len(self._data)
        start = (self._head - self._count + size) % size
        end = start + self._count
        if end <= size:
            return self._data[start:end]
        return self._data[start:] + self._data[:end - size]

    def clear(self):
        """Reset head and count. Storage is not zeroed."""
        self._head = 0
        self._count = 0

    def __iter__(self):
        return iter(self.to_list())
