"""Current conditions averaged over the configured beaches."""

import logging
from concurrent.futures import ThreadPoolExecutor

from surfcast.history.averaging import average_conditions
from surfcast.ingest.firestore_client import RemoteError
from surfcast.ingest.forecast_fetcher import ForecastFetcher
from surfcast.models.forecast import AverageConditions, Chart

logger = logging.getLogger(__name__)


class ConditionsService:
    """Fetches every known beach concurrently and averages their latest charts.

    A beach that fails to load is skipped; the average covers the rest.
    """

    def __init__(self, fetcher: ForecastFetcher, location_ids: list[int], max_workers: int = 4):
        self.fetcher = fetcher
        self.location_ids = list(location_ids)
        self.max_workers = max_workers

    def latest_charts(self) -> list[Chart]:
        if not self.location_ids:
            return []

        latest: list[Chart | None] = [None] * len(self.location_ids)
        workers = min(self.max_workers, len(self.location_ids))
        with ThreadPoolExecutor(max_workers=workers) as pool:
            futures = {
                pool.submit(self.fetcher.fetch, location_id): i
                for i, location_id in enumerate(self.location_ids)
            }
            for future, i in futures.items():
                try:
                    data = future.result()
                except RemoteError as e:
                    logger.warning("Skipping beach %d: %s", self.location_ids[i], e)
                    continue
                if data.charts:
                    latest[i] = data.charts[-1]

        return [c for c in latest if c is not None]

    def current(self) -> AverageConditions:
        return average_conditions(self.latest_charts())
