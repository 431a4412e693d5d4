"""Beach directory and per-location remote metadata models."""

from dataclasses import dataclass
from datetime import datetime

from surfcast.models.forecast import Chart


@dataclass(frozen=True)
class BeachRegion:
    slug: str  # "gangreung", "pohang", "jeju", "busan"
    display_name: str
    order: int


@dataclass(frozen=True)
class Beach:
    id: str  # "1001"
    region: BeachRegion
    region_name: str
    place: str

    @property
    def display_name(self) -> str:
        return f"{self.region_name} {self.place}"


@dataclass(frozen=True)
class RegionMetadata:
    location_id: int
    region: str
    place_name: str
    last_updated: datetime | None
    earliest_forecast: datetime | None
    latest_forecast: datetime | None
    next_forecast_time: datetime | None
    total_forecast_count: int
    status: str


@dataclass(frozen=True)
class BeachData:
    metadata: RegionMetadata
    charts: list[Chart]
    fetched_at: datetime
