"""Discrete weather categories and their icon names."""

from enum import IntEnum


class WeatherCategory(IntEnum):
    CLEAR = 1
    OVERCAST = 3
    RAIN = 4
    SNOW = 5
    CLOUDY_LITTLE_SUN = 9
    CLOUDY_MUCH_SUN = 10
    FOG = 14
    UNKNOWN = 999

    @property
    def icon_name(self) -> str:
        return _ICON_NAMES[self]

    @classmethod
    def from_code(cls, code: int | None) -> "WeatherCategory":
        try:
            return cls(code)
        except ValueError:
            return cls.UNKNOWN

    @classmethod
    def from_icon_name(cls, name: str | None) -> "WeatherCategory":
        """Recover a category from a stored icon name.

        Older rows hold either an icon name or a stringified code.
        """
        if not name:
            return cls.UNKNOWN
        if name.isdigit():
            return cls.from_code(int(name))
        return _ICON_LOOKUP.get(name, cls.UNKNOWN)


_ICON_NAMES: dict[WeatherCategory, str] = {
    WeatherCategory.CLEAR: "sun",
    WeatherCategory.OVERCAST: "cloudy",
    WeatherCategory.RAIN: "rain",
    WeatherCategory.SNOW: "snow",
    WeatherCategory.CLOUDY_LITTLE_SUN: "cloudLittleSun",
    WeatherCategory.CLOUDY_MUCH_SUN: "cloudMuchSun",
    WeatherCategory.FOG: "fog",
    WeatherCategory.UNKNOWN: "cloudLittleMoon",
}

_ICON_LOOKUP: dict[str, WeatherCategory] = {
    "sun": WeatherCategory.CLEAR,
    "cloud": WeatherCategory.OVERCAST,
    "cloudy": WeatherCategory.OVERCAST,
    "rain": WeatherCategory.RAIN,
    "snow": WeatherCategory.SNOW,
    "cloudLittleSun": WeatherCategory.CLOUDY_LITTLE_SUN,
    "cloudMuchSun": WeatherCategory.CLOUDY_MUCH_SUN,
    "fog": WeatherCategory.FOG,
    "forg": WeatherCategory.FOG,
}
