"""Tests for the beach forecast fetcher and the conditions service."""

from datetime import UTC, datetime, timedelta
from unittest.mock import MagicMock

import pytest

from surfcast.ingest.beach_repository import BeachRepository
from surfcast.ingest.conditions import ConditionsService
from surfcast.ingest.firestore_client import LocationNotFound, NotFound, RemoteUnavailable
from surfcast.ingest.forecast_fetcher import ForecastFetcher
from surfcast.ingest.region_locator import RegionLocator
from surfcast.models.beach import BeachData, RegionMetadata
from surfcast.models.forecast import RawDocument
from surfcast.tests.factories import make_chart

REGIONS = ["gangreung", "pohang"]


def _metadata(location_id: int = 1001) -> RegionMetadata:
    return RegionMetadata(
        location_id=location_id,
        region="gangreung",
        place_name="Jumunjin",
        last_updated=None,
        earliest_forecast=None,
        latest_forecast=None,
        next_forecast_time=None,
        total_forecast_count=2,
        status="active",
    )


def _row(hour: int, **fields) -> RawDocument:
    fields["timestamp"] = datetime.now(UTC).replace(minute=0, second=0, microsecond=0) \
        + timedelta(hours=hour)
    return RawDocument(document_id=f"row{hour}", fields=fields)


@pytest.fixture
def repo() -> MagicMock:
    repo = MagicMock(spec=BeachRepository)
    repo.fetch_metadata.return_value = _metadata()
    repo.fetch_forecast_documents.return_value = [
        RawDocument("_metadata", {"beach_id": 1001}),
        _row(3, wind_speed=4.0),
        _row(0, wind_speed=2.0),
    ]
    return repo


@pytest.fixture
def locator() -> MagicMock:
    locator = MagicMock(spec=RegionLocator)
    locator.locate.return_value = "gangreung"
    return locator


class TestForecastFetcher:
    def test_fetch(self, repo, locator):
        fetcher = ForecastFetcher(repo, locator, REGIONS, lookback_hours=6, max_documents=50)
        data = fetcher.fetch(1001)

        assert data.metadata.place_name == "Jumunjin"
        assert [c.wind_speed for c in data.charts] == [2.0, 4.0]
        locator.locate.assert_called_once_with(1001, REGIONS)

        location_id, region, since, limit = repo.fetch_forecast_documents.call_args.args
        assert (location_id, region, limit) == (1001, "gangreung", 50)
        assert datetime.now(UTC) - since >= timedelta(hours=6)

    def test_explicit_since(self, repo, locator):
        since = datetime.now(UTC) + timedelta(hours=1)
        data = ForecastFetcher(repo, locator, REGIONS).fetch(1001, since=since)
        assert [c.wind_speed for c in data.charts] == [4.0]

    def test_location_not_found(self, repo, locator):
        locator.locate.return_value = None
        with pytest.raises(LocationNotFound) as exc_info:
            ForecastFetcher(repo, locator, REGIONS).fetch(9999)
        assert exc_info.value.location_id == 9999
        repo.fetch_metadata.assert_not_called()

    def test_missing_metadata(self, repo, locator):
        repo.fetch_metadata.return_value = None
        with pytest.raises(NotFound):
            ForecastFetcher(repo, locator, REGIONS).fetch(1001)

    def test_forecast_failure_propagates(self, repo, locator):
        repo.fetch_forecast_documents.side_effect = RemoteUnavailable("down")
        with pytest.raises(RemoteUnavailable):
            ForecastFetcher(repo, locator, REGIONS).fetch(1001)

    def test_locator_failure_propagates(self, repo, locator):
        locator.locate.side_effect = RemoteUnavailable("down")
        with pytest.raises(RemoteUnavailable):
            ForecastFetcher(repo, locator, REGIONS).fetch(1001)


def _beach_data(*charts) -> BeachData:
    return BeachData(metadata=_metadata(), charts=list(charts), fetched_at=datetime.now(UTC))


class TestConditionsService:
    def test_averages_latest_chart_per_beach(self):
        fetcher = MagicMock(spec=ForecastFetcher)
        fetcher.fetch.side_effect = lambda location_id: {
            1001: _beach_data(
                make_chart(0, wind_speed=100.0),
                make_chart(3, wind_speed=2.0, wind_direction=350.0, wave_height=1.0),
            ),
            1002: _beach_data(
                make_chart(3, wind_speed=4.0, wind_direction=10.0, wave_height=2.0),
            ),
        }[location_id]

        avg = ConditionsService(fetcher, [1001, 1002]).current()
        assert avg.sample_count == 2
        assert avg.wind_speed == pytest.approx(3.0)
        assert avg.wave_height == pytest.approx(1.5)
        assert avg.wind_direction is not None
        assert min(avg.wind_direction, 360 - avg.wind_direction) == pytest.approx(0.0, abs=1e-9)

    def test_skips_failed_and_empty_beaches(self):
        fetcher = MagicMock(spec=ForecastFetcher)

        def fetch(location_id: int) -> BeachData:
            if location_id == 1001:
                raise RemoteUnavailable("down")
            if location_id == 1002:
                return _beach_data()
            return _beach_data(make_chart(3, wind_speed=5.0))

        fetcher.fetch.side_effect = fetch
        avg = ConditionsService(fetcher, [1001, 1002, 2001]).current()
        assert avg.sample_count == 1
        assert avg.wind_speed == 5.0

    def test_no_beaches_is_zero(self):
        avg = ConditionsService(MagicMock(spec=ForecastFetcher), []).current()
        assert avg.sample_count == 0
        assert avg.wind_speed == 0.0
        assert avg.wind_direction is None
