# movavg/numeric.py
from __future__ import annotations
import numbers
from dataclasses import dataclass
from typing import Any, Iterable
import numpy as np

from .errors import AccumulatorOverflowError, ConversionError


@dataclass(frozen=True)
class NumericType:
    """Checked arithmetic over one numpy integer or floating dtype.

    This is the capability set MovAvg is generic over: zero identity,
    add/sub, divide by a count, and conversion from other numbers.
    Integer arithmetic is done on exact Python ints and range checked,
    float arithmetic is done in the dtype itself and checked for a finite
    result.
    """
    dtype: np.dtype

    @classmethod
    def of(cls, t: Any) -> "NumericType":
        if isinstance(t, NumericType):
            return t
        dt = np.dtype(t)
        if dt.kind not in "iuf":
            raise TypeError(f"unsupported numeric type: {dt} (need an integer or float dtype)")
        return cls(dt)

    @property
    def is_integer(self) -> bool:
        return self.dtype.kind in "iu"

    @property
    def min(self):
        return int(np.iinfo(self.dtype).min) if self.is_integer else float(np.finfo(self.dtype).min)

    @property
    def max(self):
        return int(np.iinfo(self.dtype).max) if self.is_integer else float(np.finfo(self.dtype).max)

    def zero(self):
        return self.dtype.type(0)

    def one(self):
        return self.dtype.type(1)

    def __str__(self) -> str:
        return self.dtype.name

    # --- conversion ---
    def cast(self, value: Any, exact: bool = False):
        """Convert `value` into this type or raise ConversionError.

        Floats going into an integer type are truncated toward zero, unless
        `exact` is set, which rejects anything non-integral. `exact` also
        rejects NaN/inf for float types.
        """
        if isinstance(value, (bool, np.bool_)) or not isinstance(value, numbers.Real):
            raise ConversionError(f"cannot convert {value!r} to {self}")
        if self.is_integer:
            return self._to_int(value, exact)
        return self._to_float(value, exact)

    def _to_int(self, value, exact: bool):
        try:
            v = int(value)
        except (OverflowError, ValueError) as e:
            raise ConversionError(f"cannot convert non-finite {value!r} to {self}") from e
        if exact and v != value:
            raise ConversionError(f"{value!r} is not an integral value for {self}")
        if not (self.min <= v <= self.max):
            raise ConversionError(f"{value!r} out of range for {self} [{self.min}, {self.max}]")
        return self.dtype.type(v)

    def _to_float(self, value, exact: bool):
        if isinstance(value, numbers.Integral):
            value = int(value)
        try:
            with np.errstate(over="ignore", invalid="ignore"):
                out = self.dtype.type(value)
        except OverflowError as e:
            raise ConversionError(f"{value!r} out of range for {self}") from e
        if not np.isfinite(out):
            if exact or np.isfinite(float(value)):
                raise ConversionError(f"{value!r} is not a finite value of {self}")
        return out

    # --- checked arithmetic ---
    def _checked_int(self, v: int, op: str):
        if not (self.min <= v <= self.max):
            raise AccumulatorOverflowError(f"accumulator {op} overflow: {v} does not fit {self}")
        return self.dtype.type(v)

    def _checked_float(self, r, a, b, op: str):
        if not np.isfinite(r) and np.isfinite(a) and np.isfinite(b):
            raise AccumulatorOverflowError(f"accumulator {op} overflow in {self}")
        return r

    def add(self, a, b):
        if self.is_integer:
            return self._checked_int(int(a) + int(b), "add")
        with np.errstate(over="ignore", invalid="ignore"):
            r = self.dtype.type(a) + self.dtype.type(b)
        return self._checked_float(r, a, b, "add")

    def sub(self, a, b):
        if self.is_integer:
            return self._checked_int(int(a) - int(b), "sub")
        with np.errstate(over="ignore", invalid="ignore"):
            r = self.dtype.type(a) - self.dtype.type(b)
        return self._checked_float(r, a, b, "sub")

    def sum(self, items: Iterable):
        """Sum `items` (any numeric dtype) in this type."""
        if self.is_integer:
            return self._checked_int(sum(int(self.cast(x)) for x in items), "add")
        arr = np.asarray(items)
        with np.errstate(over="ignore", invalid="ignore"):
            r = np.sum(arr, dtype=self.dtype)
        if not np.isfinite(r) and np.all(np.isfinite(arr)):
            raise AccumulatorOverflowError(f"accumulator add overflow in {self}")
        return self.dtype.type(r)

    def div(self, a, n: int):
        """a / n; integers truncate toward zero."""
        if self.is_integer:
            q = abs(int(a)) // n
            return self.dtype.type(-q if a < 0 else q)
        return self.dtype.type(a) / self.dtype.type(n)
