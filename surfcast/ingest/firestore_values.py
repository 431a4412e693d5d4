"""Decode and encode Firestore REST typed values."""

import logging
from datetime import datetime
from typing import Any

from surfcast.models.common import ensure_utc, parse_timestamp
from surfcast.models.forecast import RawDocument

logger = logging.getLogger(__name__)


def decode_value(value: dict[str, Any]) -> Any:
    """Convert one typed value ({"integerValue": "3"}, ...) to a Python value."""
    if "nullValue" in value:
        return None
    if "booleanValue" in value:
        return bool(value["booleanValue"])
    if "integerValue" in value:
        return _number(int, value["integerValue"])
    if "doubleValue" in value:
        # NaN and Infinity arrive as strings
        return _number(float, value["doubleValue"])
    if "timestampValue" in value:
        return parse_timestamp(value["timestampValue"])
    if "stringValue" in value:
        return value["stringValue"]
    if "bytesValue" in value:
        return value["bytesValue"]
    if "referenceValue" in value:
        return value["referenceValue"]
    if "geoPointValue" in value:
        return dict(value["geoPointValue"])
    if "arrayValue" in value:
        return [decode_value(v) for v in value["arrayValue"].get("values", [])]
    if "mapValue" in value:
        return decode_fields(value["mapValue"].get("fields", {}))
    return None


def _number(kind: type, raw: Any) -> Any:
    try:
        return kind(raw)
    except (TypeError, ValueError):
        logger.debug("Undecodable %s value %r", kind.__name__, raw)
        return None


def decode_fields(fields: dict[str, Any]) -> dict[str, Any]:
    return {key: decode_value(v) for key, v in fields.items()}


def decode_document(document: dict[str, Any]) -> RawDocument:
    """Convert a REST document resource into a RawDocument."""
    name = document.get("name", "")
    return RawDocument(
        document_id=name.rsplit("/", 1)[-1],
        fields=decode_fields(document.get("fields", {})),
    )


def encode_value(value: Any) -> dict[str, Any]:
    """Convert a Python value to a typed value for structured queries."""
    if value is None:
        return {"nullValue": None}
    if isinstance(value, bool):
        return {"booleanValue": value}
    if isinstance(value, int):
        return {"integerValue": str(value)}
    if isinstance(value, float):
        return {"doubleValue": value}
    if isinstance(value, datetime):
        return {"timestampValue": ensure_utc(value).isoformat().replace("+00:00", "Z")}
    if isinstance(value, str):
        return {"stringValue": value}
    raise TypeError(f"Cannot encode {type(value).__name__} as a Firestore value")
