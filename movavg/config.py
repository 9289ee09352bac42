# movavg/config.py
from __future__ import annotations
import os
from dataclasses import dataclass, replace
from typing import Mapping, Optional

_TRUTHY = {"1", "true", "yes", "on"}


def _flag(environ: Mapping[str, str], name: str) -> bool:
    return environ.get(name, "").strip().lower() in _TRUTHY


@dataclass(frozen=True, slots=True)
class MovAvgConfig:
    # float accumulators: O(1) incremental sum + reciprocal-multiply division
    fast_float: bool = False
    # window must be fixed by a MovAvg[...] specialization
    no_alloc: bool = False

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "MovAvgConfig":
        """Read MOVAVG_FASTFLOAT / MOVAVG_NO_ALLOC (1/true/yes/on)."""
        env = os.environ if environ is None else environ
        return cls(
            fast_float=_flag(env, "MOVAVG_FASTFLOAT"),
            no_alloc=_flag(env, "MOVAVG_NO_ALLOC"),
        )

    def with_(self, **kwargs) -> "MovAvgConfig":
        """Convenience: clone with updated values"""
        return replace(self, **kwargs)


# Resolved once at import; instances keep whatever config they were built with.
DEFAULT_CONFIG = MovAvgConfig.from_env()
