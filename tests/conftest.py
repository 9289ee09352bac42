# tests/conftest.py
import os
import sys

# Ensure project root is importable (so movavg.* imports work when running from repo root)
ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

import numpy as np
import pytest

from movavg import MovAvg, MovAvgConfig


def tdiv(a: int, b: int) -> int:
    """Integer division truncating toward zero."""
    q = abs(a) // b
    return -q if a < 0 else q


@pytest.fixture
def movavg_factory():
    def make(window=3, dtype=np.int32, accu_dtype=None, result_dtype=None, **kwargs):
        return MovAvg(window, dtype, accu_dtype, result_dtype, **kwargs)
    return make


@pytest.fixture
def fast_config():
    return MovAvgConfig(fast_float=True)


@pytest.fixture
def rng():
    return np.random.default_rng(1234)
