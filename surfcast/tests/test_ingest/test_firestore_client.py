"""Tests for the Firestore REST client with mocked httpx."""

import json

import httpx
import pytest
import respx

from surfcast.ingest.firestore_client import (
    DecodingFailed,
    FirestoreClient,
    NotFound,
    RemoteError,
    RemoteUnavailable,
    field_filter,
)
from surfcast.tests.factories import DOCUMENTS_URL

METADATA_URL = f"{DOCUMENTS_URL}/regions/gangreung/1001/_metadata"
QUERY_URL = f"{DOCUMENTS_URL}/regions/gangreung:runQuery"


def _error(status: str, code: int, message: str = "boom") -> dict:
    return {"error": {"code": code, "message": message, "status": status}}


class TestGetDocument:
    @respx.mock
    def test_success(self, firestore: FirestoreClient, load_fixture):
        respx.get(METADATA_URL).mock(
            return_value=httpx.Response(200, json=load_fixture("metadata_1001.json"))
        )
        doc = firestore.get_document("regions/gangreung/1001/_metadata")
        assert doc is not None
        assert doc["fields"]["beach"]["stringValue"] == "Jumunjin"

    @respx.mock
    def test_sends_api_key(self, firestore: FirestoreClient):
        route = respx.get(METADATA_URL).mock(return_value=httpx.Response(200, json={}))
        firestore.get_document("regions/gangreung/1001/_metadata")
        assert route.calls[0].request.url.params["key"] == "k"

    @respx.mock
    def test_missing_document_is_none(self, firestore: FirestoreClient):
        respx.get(METADATA_URL).mock(
            return_value=httpx.Response(404, json=_error("NOT_FOUND", 404))
        )
        assert firestore.get_document("regions/gangreung/1001/_metadata") is None

    @respx.mock
    def test_permission_denied(self, firestore: FirestoreClient):
        respx.get(METADATA_URL).mock(
            return_value=httpx.Response(403, json=_error("PERMISSION_DENIED", 403))
        )
        with pytest.raises(RemoteError) as exc_info:
            firestore.get_document("regions/gangreung/1001/_metadata")
        assert exc_info.value.status == "PERMISSION_DENIED"
        assert exc_info.value.http_status == 403
        assert not exc_info.value.is_retryable

    @respx.mock
    def test_unavailable(self, firestore: FirestoreClient):
        respx.get(METADATA_URL).mock(
            return_value=httpx.Response(503, json=_error("UNAVAILABLE", 503))
        )
        with pytest.raises(RemoteUnavailable) as exc_info:
            firestore.get_document("regions/gangreung/1001/_metadata")
        assert exc_info.value.is_retryable

    @respx.mock
    def test_status_without_json_body(self, firestore: FirestoreClient):
        respx.get(METADATA_URL).mock(return_value=httpx.Response(504, text="gateway"))
        with pytest.raises(RemoteUnavailable) as exc_info:
            firestore.get_document("regions/gangreung/1001/_metadata")
        assert exc_info.value.status == "DEADLINE_EXCEEDED"

    @respx.mock
    def test_transport_error(self, firestore: FirestoreClient):
        respx.get(METADATA_URL).mock(side_effect=httpx.ConnectError("refused"))
        with pytest.raises(RemoteUnavailable) as exc_info:
            firestore.get_document("regions/gangreung/1001/_metadata")
        assert isinstance(exc_info.value.__cause__, httpx.ConnectError)

    @respx.mock
    def test_invalid_json(self, firestore: FirestoreClient):
        respx.get(METADATA_URL).mock(return_value=httpx.Response(200, text="not json"))
        with pytest.raises(DecodingFailed):
            firestore.get_document("regions/gangreung/1001/_metadata")

    @respx.mock
    def test_no_retry(self, firestore: FirestoreClient):
        route = respx.get(METADATA_URL).mock(
            return_value=httpx.Response(500, json=_error("INTERNAL", 500))
        )
        with pytest.raises(RemoteError):
            firestore.get_document("regions/gangreung/1001/_metadata")
        assert route.call_count == 1


class TestRunQuery:
    @respx.mock
    def test_query_body(self, firestore: FirestoreClient):
        route = respx.post(QUERY_URL).mock(return_value=httpx.Response(200, json=[]))
        where = field_filter("timestamp", "GREATER_THAN_OR_EQUAL",
                             {"timestampValue": "2025-10-31T00:00:00Z"})
        firestore.run_query("regions/gangreung", "1001", order_by="timestamp",
                            where=where, limit=50)

        body = json.loads(route.calls[0].request.content)
        query = body["structuredQuery"]
        assert query["from"] == [{"collectionId": "1001"}]
        assert query["orderBy"][0]["field"]["fieldPath"] == "timestamp"
        assert query["orderBy"][0]["direction"] == "ASCENDING"
        assert query["where"]["fieldFilter"]["op"] == "GREATER_THAN_OR_EQUAL"
        assert query["limit"] == 50

    @respx.mock
    def test_skips_entries_without_document(self, firestore: FirestoreClient, load_fixture):
        respx.post(QUERY_URL).mock(
            return_value=httpx.Response(200, json=load_fixture("forecast_query_1001.json"))
        )
        docs = firestore.run_query("regions/gangreung", "1001")
        assert len(docs) == 4

    @respx.mock
    def test_not_found(self, firestore: FirestoreClient):
        respx.post(QUERY_URL).mock(
            return_value=httpx.Response(404, json=_error("NOT_FOUND", 404))
        )
        with pytest.raises(NotFound):
            firestore.run_query("regions/gangreung", "1001")

    @respx.mock
    def test_non_list_response(self, firestore: FirestoreClient):
        respx.post(QUERY_URL).mock(return_value=httpx.Response(200, json={"oops": 1}))
        with pytest.raises(DecodingFailed):
            firestore.run_query("regions/gangreung", "1001")


class TestApiKeyFallback:
    def test_env_var(self, monkeypatch):
        monkeypatch.setenv("SURFCAST_FIRESTORE_API_KEY", "from-env")
        client = FirestoreClient(project_id="p")
        assert client.api_key == "from-env"

    def test_explicit_wins(self, monkeypatch):
        monkeypatch.setenv("SURFCAST_FIRESTORE_API_KEY", "from-env")
        client = FirestoreClient(project_id="p", api_key="explicit")
        assert client.api_key == "explicit"
