# movavg/__init__.py
from .accumulator import (
    Accumulator,
    FastFloatAccumulator,
    IntegerAccumulator,
    PreciseFloatAccumulator,
    select_accumulator,
)
from .config import DEFAULT_CONFIG, MovAvgConfig
from .errors import (
    AccumulatorOverflowError,
    ConversionError,
    EmptyWindowError,
    InvalidWindowError,
    MovAvgError,
)
from .numeric import NumericType
from .ring_buffer import RingBuffer
from .sma import MovAvg

__all__ = [
    "MovAvg",
    "MovAvgConfig",
    "DEFAULT_CONFIG",
    "NumericType",
    "RingBuffer",
    "Accumulator",
    "IntegerAccumulator",
    "PreciseFloatAccumulator",
    "FastFloatAccumulator",
    "select_accumulator",
    "MovAvgError",
    "InvalidWindowError",
    "EmptyWindowError",
    "ConversionError",
    "AccumulatorOverflowError",
]
