"""Cross-location averages of forecast charts."""

import math
from collections.abc import Iterable, Sequence

from surfcast.models.forecast import AverageConditions, Chart

MIN_RESULTANT = 1e-6


def circular_mean(degrees: Iterable[float]) -> float | None:
    """Mean direction in [0, 360) by summing unit vectors.

    Non-finite readings are skipped. Returns None when nothing is left, or
    when the vectors cancel out.
    """
    sum_x = 0.0
    sum_y = 0.0
    count = 0
    for d in degrees:
        if not math.isfinite(d):
            continue
        r = math.radians(d)
        sum_x += math.cos(r)
        sum_y += math.sin(r)
        count += 1
    if count == 0 or math.hypot(sum_x, sum_y) < MIN_RESULTANT:
        return None

    angle = math.degrees(math.atan2(sum_y, sum_x))
    if angle < 0:
        angle += 360.0
    # -tiny + 360 rounds to 360.0
    if angle >= 360.0:
        angle -= 360.0
    return angle


def average_conditions(charts: Sequence[Chart]) -> AverageConditions:
    """Average the given charts. An empty input averages to zeros."""
    if not charts:
        return AverageConditions(
            wind_speed=0.0,
            wave_height=0.0,
            wave_period=0.0,
            wind_direction=None,
            wave_direction=None,
            sample_count=0,
        )

    heights = [c.wave_height for c in charts if c.wave_height is not None]
    return AverageConditions(
        wind_speed=_mean([c.wind_speed for c in charts]),
        wave_height=_mean(heights),
        wave_period=_mean([c.wave_period for c in charts]),
        wind_direction=circular_mean(c.wind_direction for c in charts),
        wave_direction=circular_mean(c.wave_direction for c in charts),
        sample_count=len(charts),
    )


def _mean(values: list[float]) -> float:
    finite = [v for v in values if math.isfinite(v)]
    return sum(finite) / len(finite) if finite else 0.0
