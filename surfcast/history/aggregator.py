"""Session history filtering, sorting and day bucketing."""

from collections.abc import Iterable
from datetime import date, datetime, tzinfo

from surfcast.models.common import ensure_utc
from surfcast.models.forecast import Chart, DayBucket
from surfcast.models.history import SessionFilter, SortType
from surfcast.models.session import Session


def transform(
    sessions: Iterable[Session],
    session_filter: SessionFilter,
    sort_type: SortType,
    *,
    location_id: int | None = None,
    today: date | None = None,
) -> list[Session]:
    """Filter then sort sessions. Pure; applying it twice changes nothing.

    ``today`` anchors date presets and defaults to the current local date.
    """
    if today is None:
        today = date.today()

    selected = [
        s for s in sessions
        if (location_id is None or s.location_id == location_id)
        and session_filter.matches(s, today)
    ]
    return sort_sessions(selected, sort_type)


def sort_sessions(sessions: list[Session], sort_type: SortType) -> list[Session]:
    # sorted() is stable, so equal keys keep their input order
    if sort_type == SortType.LATEST:
        return sorted(sessions, key=_chronological, reverse=True)
    if sort_type == SortType.OLDEST:
        return sorted(sessions, key=_chronological)
    if sort_type == SortType.HIGH_RATING:
        return sorted(sessions, key=lambda s: s.rating, reverse=True)
    if sort_type == SortType.LOW_RATING:
        return sorted(sessions, key=lambda s: s.rating)
    raise ValueError(f"Unknown sort type: {sort_type}")


def _chronological(session: Session) -> tuple[date, datetime]:
    return session.date, ensure_utc(session.start_time)


def group_by_day(charts: Iterable[Chart], tz: tzinfo | None = None) -> list[DayBucket]:
    """Bucket charts by calendar day of their time, in ``tz`` when given.

    Buckets ascend by day and charts within a bucket ascend by time.
    """
    buckets: dict[date, list[Chart]] = {}
    for chart in sorted(charts, key=lambda c: c.time):
        moment = chart.time.astimezone(tz) if tz is not None else chart.time
        buckets.setdefault(moment.date(), []).append(chart)
    return [DayBucket(day=day, charts=buckets[day]) for day in sorted(buckets)]


def align_down_to_slot(moment: datetime, tz: tzinfo, slot_hours: int = 3) -> datetime:
    """Floor a moment to the start of its forecast slot in ``tz``."""
    local = ensure_utc(moment).astimezone(tz)
    floored = local.replace(
        hour=(local.hour // slot_hours) * slot_hours, minute=0, second=0, microsecond=0,
    )
    return floored


def charts_between(
    charts: Iterable[Chart],
    start: datetime,
    end: datetime,
    tz: tzinfo,
    slot_hours: int = 3,
) -> list[Chart]:
    """Charts covering a surf session, ascending by time.

    The lower bound is the forecast slot containing ``start`` so a session
    starting mid-slot still gets that slot's chart. Both bounds are inclusive.
    """
    lower = align_down_to_slot(start, tz, slot_hours)
    upper = ensure_utc(end)
    return sorted(
        (c for c in charts if lower <= c.time <= upper),
        key=lambda c: c.time,
    )
