"""Forecast fetcher: loads the metadata and normalized charts of one beach."""

import logging
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime, timedelta

from surfcast.forecast.normalizer import normalize
from surfcast.ingest.beach_repository import BeachRepository
from surfcast.ingest.firestore_client import LocationNotFound, NotFound
from surfcast.ingest.region_locator import RegionLocator
from surfcast.models.beach import BeachData
from surfcast.models.common import utc_now

logger = logging.getLogger(__name__)

DEFAULT_LOOKBACK_HOURS = 48


class ForecastFetcher:
    def __init__(
        self,
        repository: BeachRepository,
        locator: RegionLocator,
        candidate_regions: list[str],
        lookback_hours: int = DEFAULT_LOOKBACK_HOURS,
        max_documents: int | None = None,
    ):
        self.repository = repository
        self.locator = locator
        self.candidate_regions = list(candidate_regions)
        self.lookback_hours = lookback_hours
        self.max_documents = max_documents

    def fetch(self, location_id: int, since: datetime | None = None) -> BeachData:
        """Fetch a beach's metadata and forecast charts.

        Raises LocationNotFound when no candidate region holds the location and
        NotFound when the region has no metadata document. Nothing is cached.
        """
        region = self.locator.locate(location_id, self.candidate_regions)
        if region is None:
            raise LocationNotFound(location_id)

        if since is None:
            since = utc_now() - timedelta(hours=self.lookback_hours)

        with ThreadPoolExecutor(max_workers=2) as pool:
            metadata_future = pool.submit(
                self.repository.fetch_metadata, location_id, region
            )
            documents_future = pool.submit(
                self.repository.fetch_forecast_documents,
                location_id, region, since, self.max_documents,
            )
            # Wait for both before raising so no request outlives the call
            metadata_error = metadata_future.exception()
            documents_error = documents_future.exception()

        if metadata_error is not None:
            raise metadata_error
        if documents_error is not None:
            raise documents_error

        metadata = metadata_future.result()
        if metadata is None:
            raise NotFound(f"No metadata for location {location_id} in {region}")

        charts = normalize(documents_future.result(), location_id, region, since=since)
        logger.info(
            "Loaded %d charts for %s/%d (%s)",
            len(charts), region, location_id, metadata.place_name,
        )
        return BeachData(metadata=metadata, charts=charts, fetched_at=utc_now())
