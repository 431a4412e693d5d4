"""Forecast chart models: raw documents, normalized charts and snapshots."""

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any

from surfcast.models.weather import WeatherCategory


@dataclass(frozen=True)
class RawDocument:
    """A decoded remote document: its id plus plain Python field values."""

    document_id: str
    fields: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class Chart:
    location_id: int
    time: datetime
    wind_speed: float
    wind_direction: float
    wave_height: float | None
    wave_period: float
    wave_direction: float
    air_temperature: float
    water_temperature: float
    weather: WeatherCategory


@dataclass(frozen=True)
class ChartSnapshot:
    """Chart embedded in a surf session. The location comes from the session."""

    time: datetime
    wind_speed: float
    wind_direction: float
    wave_height: float | None
    wave_period: float
    wave_direction: float
    air_temperature: float
    water_temperature: float
    weather: WeatherCategory

    @classmethod
    def from_chart(cls, chart: Chart) -> "ChartSnapshot":
        return cls(
            time=chart.time,
            wind_speed=chart.wind_speed,
            wind_direction=chart.wind_direction,
            wave_height=chart.wave_height,
            wave_period=chart.wave_period,
            wave_direction=chart.wave_direction,
            air_temperature=chart.air_temperature,
            water_temperature=chart.water_temperature,
            weather=chart.weather,
        )

    def to_chart(self, location_id: int) -> Chart:
        return Chart(
            location_id=location_id,
            time=self.time,
            wind_speed=self.wind_speed,
            wind_direction=self.wind_direction,
            wave_height=self.wave_height,
            wave_period=self.wave_period,
            wave_direction=self.wave_direction,
            air_temperature=self.air_temperature,
            water_temperature=self.water_temperature,
            weather=self.weather,
        )


@dataclass(frozen=True)
class DayBucket:
    day: date
    charts: list[Chart]


@dataclass(frozen=True)
class AverageConditions:
    wind_speed: float
    wave_height: float
    wave_period: float
    wind_direction: float | None  # None when directions cancel out
    wave_direction: float | None
    sample_count: int
