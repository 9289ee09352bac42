# movavg/sma.py
from __future__ import annotations
import operator
from functools import lru_cache
from typing import Any, ClassVar, Iterable, Optional
import numpy as np

from .accumulator import Accumulator, select_accumulator
from .config import DEFAULT_CONFIG, MovAvgConfig
from .errors import ConversionError, EmptyWindowError, InvalidWindowError
from .numeric import NumericType
from .ring_buffer import RingBuffer


def _window_size(window: Any) -> int:
    size = operator.index(window)
    if size < 1:
        raise InvalidWindowError(f"window size must be >= 1, got {size}")
    return size


def _pick(explicit: Any, fixed: Optional[np.dtype], default: Any, what: str) -> NumericType:
    if fixed is not None:
        if explicit is not None and NumericType.of(explicit).dtype != fixed:
            raise TypeError(f"{what} is fixed to {fixed} by the type, got {np.dtype(explicit)}")
        return NumericType.of(fixed)
    return NumericType.of(explicit if explicit is not None else default)


class MovAvg:
    """Simple Moving Average (SMA) over the last `window` fed samples.

    Three numeric types are involved, all numpy dtypes:

    - `dtype`: type of the fed samples (default float64).
    - `accu_dtype`: type of the running sum (default `dtype`). Pick a wider
      one to avoid overflow, e.g. int8 samples with an int32 accumulator.
    - `result_dtype`: type of the returned average (default `dtype`).

    The average is `sum / count` computed in the accumulator type, where
    count is the number of samples fed so far, capped at the window size.
    Integer division truncates toward zero.

    Examples:

        >>> avg = MovAvg(3, np.int32)
        >>> [int(avg.feed(x)) for x in (10, 20, 30, 40)]
        [10, 15, 20, 30]
        >>> int(avg.get())
        30
        >>> avg = MovAvg[np.int8, np.int32, 3]()   # window fixed by the type
        >>> int(avg.feed(100)), int(avg.feed(100))  # would overflow an int8 sum
        (100, 100)

    Errors never leave a partially updated state behind: a failing `feed`
    raises and the instance is unchanged.
    """

    # set by MovAvg[...] specializations
    WINDOW: ClassVar[Optional[int]] = None
    INPUT: ClassVar[Optional[np.dtype]] = None
    ACCU: ClassVar[Optional[np.dtype]] = None
    RESULT: ClassVar[Optional[np.dtype]] = None

    def __class_getitem__(cls, params):
        """MovAvg[input, window], MovAvg[input, accu, window] or MovAvg[input, accu, window, result]."""
        if not isinstance(params, tuple):
            params = (params,)
        if len(params) == 2:
            (inp, window), accu, res = params, None, None
        elif len(params) == 3:
            (inp, accu, window), res = params, None
        elif len(params) == 4:
            inp, accu, window, res = params
        else:
            raise TypeError(f"{cls.__name__}[...] takes 2 to 4 parameters, got {len(params)}")
        inp_t = NumericType.of(inp).dtype
        accu_t = NumericType.of(accu).dtype if accu is not None else inp_t
        res_t = NumericType.of(res).dtype if res is not None else inp_t
        return _specialize(cls, inp_t, accu_t, _window_size(window), res_t)

    def __init__(
        self,
        window: Optional[int] = None,
        dtype: Any = None,
        accu_dtype: Any = None,
        result_dtype: Any = None,
        *,
        items: Optional[Iterable] = None,
        config: Optional[MovAvgConfig] = None,
    ) -> None:
        self._cfg = DEFAULT_CONFIG if config is None else config
        cls = type(self)
        if cls.WINDOW is None:
            if self._cfg.no_alloc:
                raise TypeError(
                    f"no-alloc mode needs the window fixed by the type, e.g. {cls.__name__}[np.int32, 8]()"
                )
            if window is None:
                raise TypeError(f"{cls.__name__}() missing the window size")
            size = _window_size(window)
        else:
            size = cls.WINDOW
            if window is not None and _window_size(window) != size:
                raise InvalidWindowError(f"window is fixed to {size} by the type, got {window}")

        self._input = _pick(dtype, cls.INPUT, np.float64, "input type")
        self._accu_num = _pick(accu_dtype, cls.ACCU, self._input.dtype, "accumulator type")
        self._result = _pick(result_dtype, cls.RESULT, self._input.dtype, "result type")
        try:
            self._accu_num.cast(size)  # the count divides the sum
        except ConversionError as e:
            raise InvalidWindowError(f"window size {size} does not fit accumulator {self._accu_num}") from e

        self._strategy: Accumulator = select_accumulator(self._accu_num, self._cfg)
        self._ring = RingBuffer(size, self._input.dtype)
        if items is not None:
            samples = [self._input.cast(x, exact=True) for x in items]
            if len(samples) > size:
                raise InvalidWindowError(f"{len(samples)} initial items for a window of {size}")
            self._ring.extend_initial(samples)
        self._accu = self._strategy.initial(self._ring.window())

    # --- state ---
    def __len__(self) -> int:
        return len(self._ring)

    @property
    def window_size(self) -> int:
        return self._ring.capacity()

    def is_full(self) -> bool:
        return self._ring.is_full()

    @property
    def accumulator(self):
        return self._accu

    @property
    def config(self) -> MovAvgConfig:
        return self._cfg

    @property
    def input_type(self) -> np.dtype:
        return self._input.dtype

    @property
    def accu_type(self) -> np.dtype:
        return self._accu_num.dtype

    @property
    def result_type(self) -> np.dtype:
        return self._result.dtype

    def __repr__(self) -> str:
        return (
            f"MovAvg[{self._input}, {self._accu_num}, {self.window_size}, {self._result}]"
            f"(fill={len(self)}, accumulator={self._accu!r})"
        )

    # --- operations ---
    def feed(self, value):
        """Feed one sample and return the new average.

        Raises ConversionError if the sample (or the average) does not fit
        its type, AccumulatorOverflowError if the running sum does not fit
        the accumulator type. State is untouched in both cases.
        """
        sample = self._input.cast(value, exact=True)
        a_value = self._accu_num.cast(sample)
        oldest = self._ring.oldest()
        first = self._accu_num.zero() if oldest is None else self._accu_num.cast(oldest)
        count = min(len(self._ring) + 1, self._ring.capacity())

        with self._ring.staged(sample) as items:
            accu = self._strategy.recalc(self._accu, first, a_value, items)
            avg = self._result.cast(self._strategy.average(accu, count))
        self._accu = accu
        return avg

    def get(self):
        """Current average, without feeding. Raises EmptyWindowError before the first feed."""
        n = len(self._ring)
        if n == 0:
            raise EmptyWindowError("no samples have been fed yet")
        return self._result.cast(self._strategy.average(self._accu, n))


@lru_cache(maxsize=None)
def _specialize(cls, inp: np.dtype, accu: np.dtype, window: int, res: np.dtype):
    name = f"{cls.__name__}[{inp.name}, {accu.name}, {window}, {res.name}]"
    return type(cls)(name, (cls,), {
        "WINDOW": window,
        "INPUT": inp,
        "ACCU": accu,
        "RESULT": res,
        "__module__": cls.__module__,
        "__qualname__": name,
    })
