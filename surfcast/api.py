"""Surf forecast JSON API: beaches, forecasts, conditions and the session log."""

from dataclasses import replace
from datetime import timedelta
from zoneinfo import ZoneInfo

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware

from surfcast.config.schema import SurfcastConfig
from surfcast.history.aggregator import group_by_day, transform
from surfcast.history.rollups import pinned_session_charts, recent_session_charts, record_view
from surfcast.ingest.beach_repository import BeachRepository
from surfcast.ingest.conditions import ConditionsService
from surfcast.ingest.firestore_client import NotFound, RemoteError
from surfcast.ingest.forecast_fetcher import ForecastFetcher
from surfcast.models.common import utc_now
from surfcast.models.history import (
    AllSessions,
    DatePreset,
    DatePresetFilter,
    MinRating,
    PinnedOnly,
    SessionFilter,
    SortType,
)
from surfcast.models.session import SessionHandle
from surfcast.reporting.formatters import chart_to_dict, conditions_to_dict, session_to_dict
from surfcast.storage.session_store import SessionStore, StoreError


def _remote_error(e: RemoteError) -> HTTPException:
    if isinstance(e, NotFound):
        return HTTPException(404, str(e))
    return HTTPException(502, str(e))


def _store_error(e: StoreError) -> HTTPException:
    return HTTPException(500, str(e))


def create_app(
    config: SurfcastConfig,
    store: SessionStore,
    fetcher: ForecastFetcher,
    beach_repository: BeachRepository,
    conditions: ConditionsService | None = None,
) -> FastAPI:
    app = FastAPI(title="Surfcast", version="0.1.0")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    tz = ZoneInfo(config.history.display_timezone)
    if conditions is None:
        conditions = ConditionsService(
            fetcher,
            [b.id for b in config.enabled_beaches],
            max_workers=config.forecast.probe_workers,
        )

    # ── Remote forecast endpoints ───────────────────────────────

    @app.get("/api/beaches")
    def get_beaches(region: str | None = None):
        """Global beach directory, optionally for one region."""
        try:
            if region:
                beaches = beach_repository.fetch_beach_list(region)
            else:
                beaches = beach_repository.fetch_all_beaches()
        except RemoteError as e:
            raise _remote_error(e) from e
        return [
            {
                "id": b.id,
                "region": b.region.slug,
                "region_name": b.region_name,
                "region_order": b.region.order,
                "place": b.place,
                "display_name": b.display_name,
            }
            for b in beaches
        ]

    @app.get("/api/forecast/{beach_id}")
    def get_forecast(beach_id: int, hours: int | None = None):
        """Metadata plus charts of one beach, grouped by local day."""
        since = utc_now() - timedelta(hours=hours) if hours is not None else None
        try:
            data = fetcher.fetch(beach_id, since=since)
        except RemoteError as e:
            raise _remote_error(e) from e

        meta = data.metadata
        return {
            "location_id": meta.location_id,
            "region": meta.region,
            "place_name": meta.place_name,
            "status": meta.status,
            "last_updated": meta.last_updated.isoformat() if meta.last_updated else None,
            "total_forecast_count": meta.total_forecast_count,
            "fetched_at": data.fetched_at.isoformat(),
            "days": [
                {
                    "day": bucket.day.isoformat(),
                    "charts": [chart_to_dict(c) for c in bucket.charts],
                }
                for bucket in group_by_day(data.charts, tz)
            ],
        }

    @app.get("/api/conditions")
    def get_conditions():
        """Latest conditions averaged over the configured beaches."""
        return conditions_to_dict(conditions.current())

    # ── Session log endpoints ───────────────────────────────────

    @app.get("/api/sessions")
    def get_sessions(
        beach: int | None = None,
        pinned: bool = False,
        min_rating: int | None = None,
        preset: DatePreset | None = None,
        sort: SortType = SortType.LATEST,
    ):
        session_filter: SessionFilter = AllSessions()
        if pinned:
            session_filter = PinnedOnly()
        elif min_rating is not None:
            session_filter = MinRating(min_rating)
        elif preset is not None:
            session_filter = DatePresetFilter(preset)
        try:
            sessions = store.fetch_all()
        except StoreError as e:
            raise _store_error(e) from e
        return [
            session_to_dict(s)
            for s in transform(sessions, session_filter, sort, location_id=beach)
        ]

    @app.get("/api/sessions/recent-charts")
    def get_recent_charts():
        try:
            sessions = store.fetch_all()
        except StoreError as e:
            raise _store_error(e) from e
        charts = recent_session_charts(sessions, config.history.recent_session_limit)
        return [chart_to_dict(c) for c in charts]

    @app.get("/api/sessions/pinned-charts")
    def get_pinned_charts():
        try:
            sessions = store.fetch_all()
        except StoreError as e:
            raise _store_error(e) from e
        return [chart_to_dict(c) for c in pinned_session_charts(sessions)]

    @app.get("/api/sessions/{session_id}")
    def get_session(session_id: int):
        try:
            session = store.fetch_by_id(SessionHandle(session_id))
        except StoreError as e:
            raise _store_error(e) from e
        if session is None:
            raise HTTPException(404, f"Session {session_id} not found")
        view = record_view(session)
        data = session_to_dict(session)
        data.update({
            "date_label": view.date_label,
            "day_of_week": view.day_of_week,
            "rating_text": view.rating_text,
        })
        return data

    @app.delete("/api/sessions/{session_id}")
    def delete_session(session_id: int):
        handle = SessionHandle(session_id)
        try:
            if store.fetch_by_id(handle) is None:
                raise HTTPException(404, f"Session {session_id} not found")
            store.delete(handle)
        except StoreError as e:
            raise _store_error(e) from e
        return {"deleted": session_id}

    @app.post("/api/sessions/{session_id}/pin")
    def pin_session(session_id: int, pinned: bool = True):
        handle = SessionHandle(session_id)
        try:
            session = store.fetch_by_id(handle)
            if session is None:
                raise HTTPException(404, f"Session {session_id} not found")
            store.update(replace(session, is_pinned=pinned))
        except StoreError as e:
            raise _store_error(e) from e
        return {"id": session_id, "is_pinned": pinned}

    return app


if __name__ == "__main__":
    import uvicorn

    from surfcast.config.loader import load_config
    from surfcast.services import build_services

    _config = load_config("configs/default.yaml")
    _services = build_services(_config)
    uvicorn.run(
        create_app(_config, _services.store, _services.fetcher, _services.repository,
                   _services.conditions),
        host="0.0.0.0",
        port=8777,
    )
