"""Common types and helpers shared across models."""

from datetime import UTC, datetime


def utc_now() -> datetime:
    return datetime.now(UTC)


def ensure_utc(dt: datetime) -> datetime:
    """Return an aware UTC datetime. Naive values are taken to be UTC."""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=UTC)
    return dt.astimezone(UTC)


def parse_timestamp(iso_str: str | None) -> datetime | None:
    """Parse an ISO timestamp, handling various formats."""
    if not iso_str:
        return None
    try:
        return ensure_utc(datetime.fromisoformat(iso_str))
    except (ValueError, TypeError):
        return None
