"""Surf session models."""

from dataclasses import dataclass, field
from datetime import date, datetime

from surfcast.models.forecast import Chart, ChartSnapshot


@dataclass(frozen=True)
class SessionHandle:
    """Opaque reference to a persisted session."""

    row_id: int

    def __str__(self) -> str:
        return str(self.row_id)


@dataclass(frozen=True)
class Session:
    location_id: int
    date: date
    start_time: datetime
    end_time: datetime
    rating: int  # 1-5, validated by input layers only
    memo: str | None = None
    is_pinned: bool = False
    charts: list[ChartSnapshot] = field(default_factory=list)
    handle: SessionHandle | None = None

    def to_charts(self) -> list[Chart]:
        return [c.to_chart(self.location_id) for c in self.charts]


@dataclass(frozen=True)
class RecordView:
    handle: SessionHandle | None
    location_id: int
    date_label: str  # "10/31"
    day_of_week: str  # "Friday"
    rating: int
    rating_text: str
    is_pinned: bool
    memo: str | None
    charts: list[Chart]
