from __future__ import annotations
from contextlib import contextmanager
from typing import Iterator, Sequence
import numpy as np


class RingBuffer:
    """Fixed-capacity sample ring (numpy-backed).

    - Storage is one array of `capacity` slots allocated up front and never
      resized.
    - Slots fill from index 0, so while not full the valid samples are
      `buf[:size]`; once full every slot is valid and `head` points at the
      oldest sample.
    """

    def __init__(self, capacity: int, dtype) -> None:
        self._cap = int(capacity)
        self._buf = np.zeros(self._cap, dtype=dtype)
        self._size = 0
        self._head = 0

    def __len__(self) -> int:
        return self._size

    def capacity(self) -> int:
        return self._cap

    @property
    def head(self) -> int:
        return self._head

    def is_full(self) -> bool:
        return self._size >= self._cap

    def oldest(self):
        """Sample the next write evicts, or None while not full."""
        return self._buf[self._head] if self.is_full() else None

    def window(self) -> np.ndarray:
        """Read-only view of the valid slots (storage order, not age order)."""
        view = self._buf[:self._size]
        view.flags.writeable = False
        return view

    def extend_initial(self, items: Sequence) -> None:
        assert self._size == 0, "extend_initial on a non-empty RingBuffer"
        n = len(items)
        assert n <= self._cap, "more initial items than capacity"
        if n:
            self._buf[:n] = items
        self._size = n
        self._head = n % self._cap

    @contextmanager
    def staged(self, value) -> Iterator[np.ndarray]:
        """Write `value` at the cursor and yield the valid slots including it.

        The write is committed (cursor advanced, size grown up to capacity)
        only if the block exits cleanly; otherwise the slot is restored.
        """
        i = self._head
        size = min(self._size + 1, self._cap)
        orig = self._buf[i]  # scalar copy, not a view
        self._buf[i] = value
        try:
            yield self._buf[:size]
        except BaseException:
            self._buf[i] = orig
            raise
        self._head = (i + 1) % self._cap
        self._size = size
