"""Numeric helpers shared by the scoring modules."""

import math


def round_half_up(value: float) -> int:
    """Round to the nearest integer with halves going up.

    The built-in round() uses banker's rounding (2.5 -> 2); scores here
    follow the conventional rule (2.5 -> 3, -2.5 -> -2).
    """
    return math.floor(value + 0.5)


def clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))
