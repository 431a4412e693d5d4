"""Wiring of the remote and local collaborators from a config."""

from dataclasses import dataclass
from pathlib import Path
from zoneinfo import ZoneInfo

from surfcast.config.schema import SurfcastConfig
from surfcast.history.recorder import SessionRecorder
from surfcast.ingest.beach_repository import BeachRepository
from surfcast.ingest.conditions import ConditionsService
from surfcast.ingest.firestore_client import FirestoreClient
from surfcast.ingest.forecast_fetcher import ForecastFetcher
from surfcast.ingest.region_locator import RegionLocator
from surfcast.storage.session_store import SessionStore


@dataclass
class Services:
    repository: BeachRepository
    fetcher: ForecastFetcher
    conditions: ConditionsService
    store: SessionStore
    recorder: SessionRecorder
    tz: ZoneInfo

    def close(self) -> None:
        self.store.close()


def build_remote(config: SurfcastConfig) -> tuple[BeachRepository, ForecastFetcher]:
    fs = config.firestore
    client = FirestoreClient(
        project_id=fs.project_id,
        database=fs.database,
        base_url=fs.base_url,
        api_key=fs.api_key or None,
        timeout=fs.timeout_seconds,
    )
    repository = BeachRepository(client)
    locator = RegionLocator(repository, max_workers=config.forecast.probe_workers)
    fetcher = ForecastFetcher(
        repository,
        locator,
        candidate_regions=config.region_slugs,
        lookback_hours=config.forecast.lookback_hours,
        max_documents=config.forecast.max_documents,
    )
    return repository, fetcher


def build_services(config: SurfcastConfig, db_path: str | Path | None = None) -> Services:
    repository, fetcher = build_remote(config)
    path = Path(db_path or config.storage.db_path)
    path.parent.mkdir(parents=True, exist_ok=True)
    store = SessionStore(path)
    tz = ZoneInfo(config.history.display_timezone)
    return Services(
        repository=repository,
        fetcher=fetcher,
        conditions=ConditionsService(
            fetcher,
            [b.id for b in config.enabled_beaches],
            max_workers=config.forecast.probe_workers,
        ),
        store=store,
        recorder=SessionRecorder(store, fetcher, tz, config.history.forecast_slot_hours),
        tz=tz,
    )
