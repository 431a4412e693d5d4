"""Record a surf session together with the forecast charts that covered it."""

import logging
from datetime import date, datetime, tzinfo

from surfcast.history.aggregator import charts_between
from surfcast.ingest.forecast_fetcher import ForecastFetcher
from surfcast.models.common import ensure_utc
from surfcast.models.forecast import ChartSnapshot
from surfcast.models.session import Session, SessionHandle
from surfcast.storage.session_store import SessionStore

logger = logging.getLogger(__name__)


class SessionRecorder:
    def __init__(
        self,
        store: SessionStore,
        fetcher: ForecastFetcher,
        tz: tzinfo,
        slot_hours: int = 3,
    ):
        self.store = store
        self.fetcher = fetcher
        self.tz = tz
        self.slot_hours = slot_hours

    def record(
        self,
        location_id: int,
        start_time: datetime,
        end_time: datetime,
        rating: int,
        memo: str | None = None,
        surf_date: date | None = None,
    ) -> SessionHandle:
        """Fetch the beach's charts, keep those covering the window and save."""
        if ensure_utc(end_time) < ensure_utc(start_time):
            raise ValueError("Session end time is before its start time")

        data = self.fetcher.fetch(location_id)
        charts = charts_between(data.charts, start_time, end_time, self.tz, self.slot_hours)
        if not charts:
            logger.warning("No forecast charts cover session at %d", location_id)

        session = Session(
            location_id=location_id,
            date=surf_date or ensure_utc(start_time).astimezone(self.tz).date(),
            start_time=start_time,
            end_time=end_time,
            rating=rating,
            memo=memo,
            charts=[ChartSnapshot.from_chart(c) for c in charts],
        )
        return self.store.save(session)
