"""Weather classification from sky condition and precipitation fields.

Codes follow the Korea Meteorological Administration short-term forecast:
sky condition 1 (clear), 3 (mostly cloudy), 4 (overcast); precipitation type
0 (none), 1 (rain), 2 (rain/snow), 3 (snow), 4 (shower).
"""

from surfcast.models.weather import WeatherCategory

FOG_MIN_HUMIDITY = 95.0
FOG_MAX_WIND_SPEED = 2.0
MUCH_SUN_MIN_PRECIP_PROBABILITY = 30.0
MUCH_SUN_MIN_HUMIDITY = 85.0


def classify(
    sky: int,
    precip: int,
    humidity: float | None = None,
    wind_speed: float | None = None,
    precip_probability: float | None = None,
) -> WeatherCategory:
    """Classify one forecast row. Total: always returns a category.

    Precipitation overrides fog, and fog overrides the sky condition.
    """
    if precip != 0:
        if precip in (1, 4):
            return WeatherCategory.RAIN
        if precip in (2, 3):
            return WeatherCategory.SNOW
        return WeatherCategory.UNKNOWN

    # Missing readings never produce fog
    h = humidity if humidity is not None else -1.0
    w = wind_speed if wind_speed is not None else float("inf")
    if h >= FOG_MIN_HUMIDITY and w <= FOG_MAX_WIND_SPEED:
        return WeatherCategory.FOG

    if sky == 1:
        return WeatherCategory.CLEAR
    if sky == 3:
        p = precip_probability if precip_probability is not None else 0.0
        hh = humidity if humidity is not None else 0.0
        if p >= MUCH_SUN_MIN_PRECIP_PROBABILITY or hh >= MUCH_SUN_MIN_HUMIDITY:
            return WeatherCategory.CLOUDY_MUCH_SUN
        return WeatherCategory.CLOUDY_LITTLE_SUN
    if sky == 4:
        return WeatherCategory.OVERCAST
    return WeatherCategory.UNKNOWN
