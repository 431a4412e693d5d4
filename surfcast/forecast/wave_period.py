"""Wave period estimate from wind speed."""

import math

PERIOD_PER_WIND_SPEED = 0.83
MIN_PERIOD_S = 2.0
MAX_PERIOD_S = 18.0


def estimate(wind_speed: float | None) -> float | None:
    """Estimate the peak wave period in seconds from 10 m wind speed (m/s).

    Pierson-Moskowitz fully developed sea: Tp ~= 0.83 * U10, clamped to a
    surfable range. This is a heuristic, not a measurement.
    """
    if wind_speed is None or not math.isfinite(wind_speed) or wind_speed <= 0:
        return None
    raw = PERIOD_PER_WIND_SPEED * wind_speed
    return max(MIN_PERIOD_S, min(MAX_PERIOD_S, raw))
