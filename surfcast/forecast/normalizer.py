"""Forecast normalizer: raw remote forecast documents to canonical charts."""

import logging
import math
from collections.abc import Iterable
from datetime import datetime
from typing import Any

from surfcast.forecast import wave_period
from surfcast.forecast.sentinel import filter_sentinel
from surfcast.forecast.weather_classifier import classify
from surfcast.models.common import ensure_utc, parse_timestamp
from surfcast.models.forecast import Chart, RawDocument

logger = logging.getLogger(__name__)

METADATA_DOCUMENT_ID = "_metadata"

# Fields whose absence means the chart is padded with zeros
_CORE_FIELDS = ("wind_speed", "wind_direction", "air_temperature", "om_sea_surface_temperature")


def normalize(
    documents: Iterable[RawDocument],
    location_id: int,
    region: str,
    since: datetime | None = None,
) -> list[Chart]:
    """Normalize the forecast documents of one location into charts ordered by time.

    The metadata document is skipped, as are rows older than ``since`` and rows
    without a usable timestamp. Malformed numeric fields default instead of
    dropping the row.
    """
    since_utc = ensure_utc(since) if since is not None else None
    charts: list[Chart] = []
    dropped = 0

    for doc in documents:
        if doc.document_id == METADATA_DOCUMENT_ID:
            continue
        chart = normalize_document(doc, location_id)
        if chart is None:
            dropped += 1
            continue
        if since_utc is not None and chart.time < since_utc:
            continue
        charts.append(chart)

    if dropped:
        logger.warning(
            "Dropped %d forecast rows without a timestamp for %s/%d",
            dropped, region, location_id,
        )

    charts.sort(key=lambda c: c.time)
    return charts


def normalize_document(doc: RawDocument, location_id: int) -> Chart | None:
    """Build a chart from one forecast row. Returns None without a timestamp."""
    data = doc.fields
    time = _timestamp(data)
    if time is None:
        return None

    wind_speed = _float(data, "wind_speed")
    humidity = _float(data, "humidity")

    wave_height = filter_sentinel(_float(data, "wave_height"))
    if wave_height is None:
        wave_height = filter_sentinel(_float(data, "om_wave_height"))

    measured_period = _float(data, "wave_period")
    if measured_period is not None and measured_period > 0:
        period = measured_period
    else:
        period = wave_period.estimate(wind_speed) or 0.0

    weather = classify(
        sky=_int(data, "sky_condition") or 0,
        precip=_int(data, "precipitation_type") or 0,
        humidity=humidity,
        wind_speed=wind_speed,
        precip_probability=_float(data, "precipitation_probability"),
    )

    missing = [f for f in _CORE_FIELDS if _float(data, f) is None]
    if missing:
        logger.debug("Row %s missing %s, defaulting to 0", doc.document_id, missing)

    row_location = _int(data, "beach_id")
    return Chart(
        location_id=row_location if row_location is not None else location_id,
        time=time,
        wind_speed=wind_speed or 0.0,
        wind_direction=_float(data, "wind_direction") or 0.0,
        wave_height=wave_height,
        wave_period=period,
        wave_direction=_float(data, "om_wave_direction") or 0.0,
        air_temperature=_float(data, "air_temperature") or 0.0,
        water_temperature=_float(data, "om_sea_surface_temperature") or 0.0,
        weather=weather,
    )


def _timestamp(data: dict[str, Any]) -> datetime | None:
    value = data.get("timestamp")
    if isinstance(value, datetime):
        return ensure_utc(value)
    if isinstance(value, str):
        parsed = parse_timestamp(value)
        if parsed is not None:
            return parsed
    raw = data.get("datetime")
    return parse_timestamp(raw) if isinstance(raw, str) else None


def _float(data: dict[str, Any], key: str) -> float | None:
    value = data.get(key)
    # bool is an int subclass but never a reading
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    value = float(value)
    return value if math.isfinite(value) else None


def _int(data: dict[str, Any], key: str) -> int | None:
    value = data.get(key)
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return None
