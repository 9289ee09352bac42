from __future__ import annotations


class MovAvgError(Exception):
    """Base class for all moving-average errors."""


class InvalidWindowError(MovAvgError, ValueError):
    """Window size is unusable (zero, negative, too small for the initial items, ...)."""


class EmptyWindowError(MovAvgError, RuntimeError):
    """The average was queried before any sample was fed."""


class ConversionError(MovAvgError, ValueError):
    """A value does not fit the numeric type it is converted into."""


class AccumulatorOverflowError(MovAvgError, OverflowError):
    """Checked accumulator arithmetic left the representable range."""
