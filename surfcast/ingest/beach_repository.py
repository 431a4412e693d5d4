"""Remote beach repository: metadata, forecast rows and the beach directory."""

import logging
from datetime import datetime
from typing import Any

from surfcast.ingest.firestore_client import (
    DecodingFailed,
    FirestoreClient,
    NotFound,
    field_filter,
)
from surfcast.ingest.firestore_values import decode_document, encode_value
from surfcast.models.beach import Beach, BeachRegion, RegionMetadata
from surfcast.models.forecast import RawDocument

logger = logging.getLogger(__name__)

REGIONS_COLLECTION = "regions"
METADATA_DOCUMENT = "_metadata"
BEACH_DIRECTORY_PATH = "_global_metadata/all_beaches"

_BEACH_ENTRY_FIELDS = ("id", "region", "region_name", "region_order", "display_name")


class BeachRepository:
    def __init__(self, client: FirestoreClient):
        self.client = client

    def metadata_exists(self, location_id: int, region: str) -> bool:
        """Probe whether a region holds the location's metadata document."""
        return self.client.get_document(_metadata_path(location_id, region)) is not None

    def fetch_metadata(self, location_id: int, region: str) -> RegionMetadata | None:
        raw = self.client.get_document(_metadata_path(location_id, region))
        if raw is None:
            return None
        return _parse_metadata(decode_document(raw).fields, location_id, region)

    def fetch_forecast_documents(
        self,
        location_id: int,
        region: str,
        since: datetime | None = None,
        limit: int | None = None,
    ) -> list[RawDocument]:
        """List forecast rows of one location ordered by timestamp ascending."""
        where = None
        if since is not None:
            where = field_filter("timestamp", "GREATER_THAN_OR_EQUAL", encode_value(since))
        raw_docs = self.client.run_query(
            parent_path=f"{REGIONS_COLLECTION}/{region}",
            collection_id=str(location_id),
            order_by="timestamp",
            where=where,
            limit=limit,
        )
        documents = [decode_document(d) for d in raw_docs]
        logger.debug(
            "Fetched %d forecast documents for %s/%d", len(documents), region, location_id,
        )
        return documents

    def fetch_all_beaches(self) -> list[Beach]:
        """Read the global beach directory. Invalid entries are skipped."""
        raw = self.client.get_document(BEACH_DIRECTORY_PATH)
        if raw is None:
            raise NotFound(f"Beach directory {BEACH_DIRECTORY_PATH} does not exist")

        data = decode_document(raw).fields
        entries = data.get("beaches")
        if not isinstance(entries, list):
            raise DecodingFailed("beaches field not found")

        regions: dict[str, BeachRegion] = {}
        beaches: list[Beach] = []
        for entry in entries:
            if not _is_valid_entry(entry):
                logger.warning("Skipping invalid beach entry: %s", entry)
                continue
            slug = entry["region"]
            region = regions.setdefault(
                slug,
                BeachRegion(
                    slug=slug,
                    display_name=entry["region_name"],
                    order=entry["region_order"],
                ),
            )
            beaches.append(Beach(
                id=entry["id"],
                region=region,
                region_name=entry["region_name"],
                place=entry["display_name"],
            ))

        logger.info("Loaded %d beaches in %d regions", len(beaches), len(regions))
        return beaches

    def fetch_beach_list(self, region: str) -> list[Beach]:
        return [b for b in self.fetch_all_beaches() if b.region.slug == region]


def _metadata_path(location_id: int, region: str) -> str:
    return f"{REGIONS_COLLECTION}/{region}/{location_id}/{METADATA_DOCUMENT}"


def _is_valid_entry(entry: Any) -> bool:
    if not isinstance(entry, dict):
        return False
    for key in _BEACH_ENTRY_FIELDS:
        value = entry.get(key)
        expected = int if key == "region_order" else str
        if isinstance(value, bool) or not isinstance(value, expected):
            return False
    return True


def _parse_metadata(data: dict[str, Any], location_id: int, region: str) -> RegionMetadata:
    beach_id = data.get("beach_id")
    total = data.get("total_forecasts")
    return RegionMetadata(
        location_id=beach_id if isinstance(beach_id, int) else location_id,
        region=data.get("region") or region,
        place_name=data.get("beach") or "",
        last_updated=_datetime(data.get("last_updated")),
        earliest_forecast=_datetime(data.get("earliest_forecast")),
        latest_forecast=_datetime(data.get("latest_forecast")),
        next_forecast_time=_datetime(data.get("next_forecast_time")),
        total_forecast_count=total if isinstance(total, int) else 0,
        status=data.get("status") or "",
    )


def _datetime(value: Any) -> datetime | None:
    return value if isinstance(value, datetime) else None
