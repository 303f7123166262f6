"""Numeric helpers shared by the metrics and validation code."""

import math


def round_half_up(value: float) -> int:
    """Round to the nearest integer with .5 always going up (2.5 -> 3, 0.5 -> 1).

    Python's built-in round() uses banker's rounding, which would display a
    half-second recording as 0 seconds.
    """
    return int(math.floor(value + 0.5))


def is_finite_number(value) -> bool:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return math.isfinite(value)
