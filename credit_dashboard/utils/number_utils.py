"""Numeric helpers shared by scoring and aggregation"""

import math
from typing import Optional, Union


def round_half_up(value: float) -> Union[int, float]:
    """Round to the nearest integer with .5 going toward positive infinity

    Infinities and NaN have no integer form and are returned unchanged.
    """
    if not math.isfinite(value):
        return value
    return int(math.floor(value + 0.5))


def round_to_cents(value: float) -> float:
    """Round to two decimal places, half-up"""
    return round_half_up(value * 100) / 100


def clamp(value: float, lower: float, upper: float) -> float:
    return max(lower, min(upper, value))


def finite_or_none(value: Optional[float]) -> Optional[float]:
    """JSON has no inf/NaN; such values are emitted as null"""
    if value is None or not math.isfinite(value):
        return None
    return value
