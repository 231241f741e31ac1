"""Numeric coercion helpers shared by the value models and scoring services.

Every helper is total: malformed input collapses to the supplied default
instead of raising.
"""

from __future__ import annotations

import math
from typing import Any


def safe_number(
    value: Any,
    default: float,
    lo: float | None = None,
    hi: float | None = None,
) -> float:
    """Coerce *value* to a finite float, clamped to ``[lo, hi]`` when given.

    ``None``, booleans, NaN, infinities and anything ``float()`` rejects
    return *default*.  Numeric strings such as ``"72"`` are accepted.
    """
    if value is None or isinstance(value, bool):
        return default
    try:
        num = float(value)
    except (TypeError, ValueError):
        return default
    if not math.isfinite(num):
        return default
    if lo is not None:
        num = max(lo, num)
    if hi is not None:
        num = min(hi, num)
    return num


def clamp(value: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, value))


def clamp01(value: float) -> float:
    return clamp(value, 0.0, 1.0)


def round_half_up(value: float) -> int:
    """Round to the nearest integer with .5 going up (not banker's rounding)."""
    return int(math.floor(value + 0.5))


def to_percent(value: float) -> int:
    """Convert a [0, 1] fraction to an integer percentage in [0, 100]."""
    return int(clamp(round_half_up(value * 100.0), 0, 100))
