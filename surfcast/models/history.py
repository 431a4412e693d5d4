"""Session history filter and sort selections."""

from dataclasses import dataclass
from datetime import date, timedelta
from enum import StrEnum

from surfcast.models.session import Session
from surfcast.models.weather import WeatherCategory


class SortType(StrEnum):
    LATEST = "latest"
    OLDEST = "oldest"
    HIGH_RATING = "high-rating"
    LOW_RATING = "low-rating"


class DatePreset(StrEnum):
    TODAY = "today"
    LAST_7_DAYS = "last-7-days"
    THIS_MONTH = "this-month"
    LAST_MONTH = "last-month"

    def date_range(self, today: date) -> tuple[date, date]:
        """Half-open [start, end) day range for this preset."""
        if self == DatePreset.TODAY:
            return today, today + timedelta(days=1)
        if self == DatePreset.LAST_7_DAYS:
            return today - timedelta(days=6), today + timedelta(days=1)
        month_start = today.replace(day=1)
        if self == DatePreset.THIS_MONTH:
            return month_start, _next_month(month_start)
        previous_start = (month_start - timedelta(days=1)).replace(day=1)
        return previous_start, month_start


def _next_month(month_start: date) -> date:
    if month_start.month == 12:
        return month_start.replace(year=month_start.year + 1, month=1)
    return month_start.replace(month=month_start.month + 1)


class SessionFilter:
    """Base class for history filters."""

    def matches(self, session: Session, today: date) -> bool:
        raise NotImplementedError


@dataclass(frozen=True)
class AllSessions(SessionFilter):
    def matches(self, session: Session, today: date) -> bool:
        return True


@dataclass(frozen=True)
class PinnedOnly(SessionFilter):
    def matches(self, session: Session, today: date) -> bool:
        return session.is_pinned


@dataclass(frozen=True)
class MinRating(SessionFilter):
    rating: int

    def matches(self, session: Session, today: date) -> bool:
        return session.rating >= self.rating


@dataclass(frozen=True)
class WeatherFilter(SessionFilter):
    """Reserved: weather-based filtering is not defined yet, so nothing is removed."""

    weather: WeatherCategory | None = None

    def matches(self, session: Session, today: date) -> bool:
        return True


@dataclass(frozen=True)
class DatePresetFilter(SessionFilter):
    preset: DatePreset

    def matches(self, session: Session, today: date) -> bool:
        start, end = self.preset.date_range(today)
        return start <= session.date < end


@dataclass(frozen=True)
class DateRangeFilter(SessionFilter):
    start: date
    end: date  # inclusive

    def matches(self, session: Session, today: date) -> bool:
        return self.start <= session.date <= self.end
