"""Firestore REST API client for the forecast document store."""

import logging
import os
from typing import Any

import httpx

logger = logging.getLogger(__name__)

FIRESTORE_BASE_URL = "https://firestore.googleapis.com/v1"
DEFAULT_DATABASE = "(default)"
API_KEY_ENV = "SURFCAST_FIRESTORE_API_KEY"

_HTTP_STATUS_NAMES = {
    400: "INVALID_ARGUMENT",
    401: "UNAUTHENTICATED",
    403: "PERMISSION_DENIED",
    404: "NOT_FOUND",
    409: "ALREADY_EXISTS",
    429: "RESOURCE_EXHAUSTED",
    499: "CANCELLED",
    500: "INTERNAL",
    503: "UNAVAILABLE",
    504: "DEADLINE_EXCEEDED",
}

_RETRYABLE_STATUSES = {"UNAVAILABLE", "DEADLINE_EXCEEDED", "RESOURCE_EXHAUSTED", "INTERNAL"}


class RemoteError(Exception):
    """Raised when the remote document store returns or causes an error."""

    def __init__(
        self,
        message: str,
        status: str = "UNKNOWN",
        http_status: int | None = None,
    ):
        super().__init__(message)
        self.status = status
        self.http_status = http_status

    @property
    def is_retryable(self) -> bool:
        return self.status in _RETRYABLE_STATUSES


class RemoteUnavailable(RemoteError):
    """Transport failure, or the service reported itself unavailable."""


class NotFound(RemoteError):
    def __init__(self, message: str, http_status: int | None = 404):
        super().__init__(message, "NOT_FOUND", http_status)


class LocationNotFound(NotFound):
    def __init__(self, location_id: int):
        super().__init__(f"Location {location_id} not found in any region", None)
        self.location_id = location_id


class DecodingFailed(RemoteError):
    def __init__(self, reason: str):
        super().__init__(f"Decoding failed: {reason}", "DECODING_FAILED")
        self.reason = reason


def map_error(resp: httpx.Response) -> RemoteError:
    """Map an error response onto the remote error taxonomy."""
    status = _HTTP_STATUS_NAMES.get(resp.status_code, "UNKNOWN")
    message = resp.text
    try:
        body = resp.json()
        error = body.get("error", {}) if isinstance(body, dict) else {}
        status = error.get("status") or status
        message = error.get("message") or message
    except ValueError:
        pass

    text = f"HTTP {resp.status_code} {status}: {message}"
    if status == "NOT_FOUND":
        return NotFound(text, resp.status_code)
    if status in ("UNAVAILABLE", "DEADLINE_EXCEEDED"):
        return RemoteUnavailable(text, status, resp.status_code)
    return RemoteError(text, status, resp.status_code)


class FirestoreClient:
    """Read-only wrapper around the Firestore v1 REST document API."""

    def __init__(
        self,
        project_id: str,
        database: str = DEFAULT_DATABASE,
        base_url: str = FIRESTORE_BASE_URL,
        api_key: str | None = None,
        timeout: float = 30.0,
    ):
        self.project_id = project_id
        self.database = database
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key or os.environ.get(API_KEY_ENV, "")
        self.timeout = timeout

    @property
    def documents_url(self) -> str:
        return (
            f"{self.base_url}/projects/{self.project_id}"
            f"/databases/{self.database}/documents"
        )

    def _params(self) -> dict[str, str]:
        return {"key": self.api_key} if self.api_key else {}

    def get_document(self, path: str) -> dict | None:
        """Fetch one document resource. Returns None if it does not exist."""
        url = f"{self.documents_url}/{path}"
        try:
            resp = httpx.get(url, params=self._params(), timeout=self.timeout)
        except httpx.RequestError as e:
            logger.error("Firestore request failed: GET %s -> %s", path, e)
            raise RemoteUnavailable(f"Request failed: {e}", "UNAVAILABLE") from e
        if resp.status_code == 404:
            return None
        if resp.status_code >= 400:
            error = map_error(resp)
            logger.error("Firestore GET %s failed: %s", path, error)
            raise error
        return self._json(resp)

    def run_query(
        self,
        parent_path: str,
        collection_id: str,
        order_by: str | None = None,
        where: dict[str, Any] | None = None,
        limit: int | None = None,
    ) -> list[dict]:
        """Run a structured query on a (sub)collection. Returns document resources.

        ``where`` is a ready-made Firestore filter object.
        """
        query: dict[str, Any] = {"from": [{"collectionId": collection_id}]}
        if where is not None:
            query["where"] = where
        if order_by is not None:
            query["orderBy"] = [
                {"field": {"fieldPath": order_by}, "direction": "ASCENDING"}
            ]
        if limit is not None:
            query["limit"] = limit

        url = f"{self.documents_url}/{parent_path}:runQuery"
        try:
            resp = httpx.post(
                url,
                params=self._params(),
                json={"structuredQuery": query},
                timeout=self.timeout,
            )
        except httpx.RequestError as e:
            logger.error("Firestore query failed: %s/%s -> %s", parent_path, collection_id, e)
            raise RemoteUnavailable(f"Request failed: {e}", "UNAVAILABLE") from e
        if resp.status_code >= 400:
            error = map_error(resp)
            logger.error("Firestore query %s/%s failed: %s", parent_path, collection_id, error)
            raise error

        data = self._json(resp)
        if not isinstance(data, list):
            raise DecodingFailed("runQuery response is not a list")
        # Entries without a document only carry readTime
        return [entry["document"] for entry in data if "document" in entry]

    @staticmethod
    def _json(resp: httpx.Response) -> Any:
        try:
            return resp.json()
        except ValueError as e:
            raise DecodingFailed(f"invalid JSON body: {e}") from e


def field_filter(field_path: str, op: str, value: dict[str, Any]) -> dict[str, Any]:
    """Build a single-field structured query filter."""
    return {
        "fieldFilter": {
            "field": {"fieldPath": field_path},
            "op": op,
            "value": value,
        }
    }
