"""Resolve which region owns a location id."""

import logging
from concurrent.futures import ThreadPoolExecutor

from surfcast.ingest.beach_repository import BeachRepository
from surfcast.ingest.firestore_client import RemoteError

logger = logging.getLogger(__name__)


class RegionLocator:
    """Probes candidate regions for a location's metadata document.

    All probes run concurrently and are awaited before resolving, so the
    answer depends only on candidate order, never on completion order.
    """

    def __init__(self, repository: BeachRepository, max_workers: int = 4):
        self.repository = repository
        self.max_workers = max_workers

    def locate(self, location_id: int, candidate_regions: list[str]) -> str | None:
        if not candidate_regions:
            return None

        results: list[bool | None] = [None] * len(candidate_regions)
        errors: list[RemoteError | None] = [None] * len(candidate_regions)

        workers = min(self.max_workers, len(candidate_regions))
        with ThreadPoolExecutor(max_workers=workers) as pool:
            futures = {
                pool.submit(self.repository.metadata_exists, location_id, region): i
                for i, region in enumerate(candidate_regions)
            }
            for future, i in futures.items():
                try:
                    results[i] = future.result()
                except RemoteError as e:
                    logger.warning(
                        "Region probe %s for %d failed: %s",
                        candidate_regions[i], location_id, e,
                    )
                    errors[i] = e

        for region, found in zip(candidate_regions, results):
            if found:
                return region

        for error in errors:
            if error is not None:
                raise error
        return None
