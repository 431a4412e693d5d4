"""Sentinel filtering for raw sensor readings."""

import math

WAVE_HEIGHT_SENTINEL = 900.0


def filter_sentinel(value: float | None, limit: float = WAVE_HEIGHT_SENTINEL) -> float | None:
    """Return the value, or None when it is missing or a "no reading" placeholder.

    Valid readings lie strictly inside (-limit, limit).
    """
    if value is None or math.isnan(value):
        return None
    if value <= -limit or value >= limit:
        return None
    return value
