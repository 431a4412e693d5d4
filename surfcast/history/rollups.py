"""Dashboard rollups over the session log."""

from collections.abc import Iterable

from surfcast.models.forecast import Chart
from surfcast.models.session import RecordView, Session

DEFAULT_RECENT_LIMIT = 10

RATING_TEXT = {
    5: "Best",
    4: "Good",
    3: "Okay",
    2: "Bad",
    1: "Worst",
}


def rating_text(rating: int) -> str:
    return RATING_TEXT.get(rating, "")


def recent_session_charts(
    sessions: Iterable[Session], limit: int = DEFAULT_RECENT_LIMIT
) -> list[Chart]:
    """Charts of the ``limit`` most recent sessions, newest chart first."""
    recent = sorted(sessions, key=lambda s: s.date, reverse=True)[:limit]
    return _newest_first(recent)


def pinned_session_charts(sessions: Iterable[Session]) -> list[Chart]:
    """Charts of every pinned session, newest chart first."""
    return _newest_first(s for s in sessions if s.is_pinned)


def _newest_first(sessions: Iterable[Session]) -> list[Chart]:
    charts = [c for s in sessions for c in s.to_charts()]
    charts.sort(key=lambda c: c.time, reverse=True)
    return charts


def record_view(session: Session) -> RecordView:
    return RecordView(
        handle=session.handle,
        location_id=session.location_id,
        date_label=f"{session.date.month}/{session.date.day}",
        day_of_week=session.date.strftime("%A"),
        rating=session.rating,
        rating_text=rating_text(session.rating),
        is_pinned=session.is_pinned,
        memo=session.memo,
        charts=session.to_charts(),
    )


def record_views(sessions: Iterable[Session]) -> list[RecordView]:
    return [record_view(s) for s in sessions]
