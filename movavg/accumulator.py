# movavg/accumulator.py
from __future__ import annotations
from typing import Dict, Protocol
import numpy as np

from .config import MovAvgConfig
from .numeric import NumericType


class Accumulator(Protocol):
    """Running-sum strategy for one accumulator type.

    `items` is always the valid window content, already including the
    sample that is being fed.
    """
    num: NumericType
    def initial(self, items: np.ndarray): ...
    def recalc(self, accu, first, value, items: np.ndarray): ...
    def average(self, accu, count: int): ...


class IntegerAccumulator:
    """Exact incremental sum: subtract the evicted sample, add the new one."""
    def __init__(self, num: NumericType):
        self.num = num

    def initial(self, items: np.ndarray):
        return self.num.sum(items)

    def recalc(self, accu, first, value, items: np.ndarray):
        # only the final sum has to fit the accumulator
        return self.num.add(int(accu) - int(first), value)

    def average(self, accu, count: int):
        return self.num.div(accu, count)


class PreciseFloatAccumulator:
    """Recomputes the float sum from the window on every feed.

    O(window) per feed, but no rounding error is ever carried over from
    earlier samples, so the average only depends on the current window.
    """
    def __init__(self, num: NumericType):
        self.num = num

    def initial(self, items: np.ndarray):
        return self.num.sum(items)

    def recalc(self, accu, first, value, items: np.ndarray):
        return self.num.sum(items)

    def average(self, accu, count: int):
        return self.num.div(accu, count)


class FastFloatAccumulator:
    """O(1) float sum plus reciprocal-multiply division.

    Rounding error of the incremental sum is carried from feed to feed
    (cancellation when large samples leave the window). Every partial sum
    is bounded by M = window * max|sample|, and each feed rounds twice, so
    after k feeds the average stays within (k + window + 2) * eps * M of
    the precise strategy.
    """
    def __init__(self, num: NumericType):
        self.num = num
        self._recip: Dict[int, object] = {}

    def initial(self, items: np.ndarray):
        return self.num.sum(items)

    def recalc(self, accu, first, value, items: np.ndarray):
        return self.num.add(self.num.sub(accu, first), value)

    def reciprocal(self, count: int):
        r = self._recip.get(count)
        if r is None:
            r = self._recip[count] = self.num.one() / self.num.dtype.type(count)
        return r

    def average(self, accu, count: int):
        return accu * self.reciprocal(count)


def select_accumulator(num: NumericType, config: MovAvgConfig) -> Accumulator:
    if num.is_integer:
        return IntegerAccumulator(num)
    if config.fast_float:
        return FastFloatAccumulator(num)
    return PreciseFloatAccumulator(num)
