"""Tests for concurrent region resolution."""

import threading
import time
from unittest.mock import MagicMock

import pytest

from surfcast.ingest.beach_repository import BeachRepository
from surfcast.ingest.firestore_client import RemoteError, RemoteUnavailable
from surfcast.ingest.region_locator import RegionLocator

REGIONS = ["gangreung", "pohang", "jeju", "busan"]


def _repo(answers: dict) -> MagicMock:
    """Repository whose probe returns or raises per region."""
    repo = MagicMock(spec=BeachRepository)

    def probe(location_id: int, region: str) -> bool:
        answer = answers.get(region, False)
        if isinstance(answer, Exception):
            raise answer
        return answer

    repo.metadata_exists.side_effect = probe
    return repo


class TestLocate:
    def test_single_hit(self):
        locator = RegionLocator(_repo({"jeju": True}))
        assert locator.locate(3001, REGIONS) == "jeju"

    def test_first_in_candidate_order(self):
        locator = RegionLocator(_repo({"pohang": True, "gangreung": True}))
        assert locator.locate(1001, REGIONS) == "gangreung"

    def test_candidate_order_not_completion_order(self):
        repo = MagicMock(spec=BeachRepository)

        def probe(location_id: int, region: str) -> bool:
            if region == "gangreung":
                time.sleep(0.05)
            return region in ("gangreung", "busan")

        repo.metadata_exists.side_effect = probe
        assert RegionLocator(repo).locate(1001, REGIONS) == "gangreung"

    def test_none_when_absent(self):
        assert RegionLocator(_repo({})).locate(9999, REGIONS) is None

    def test_empty_candidates(self):
        repo = _repo({})
        assert RegionLocator(repo).locate(1, []) is None
        repo.metadata_exists.assert_not_called()

    def test_probes_every_candidate(self):
        repo = _repo({"gangreung": True})
        RegionLocator(repo).locate(1001, REGIONS)
        assert repo.metadata_exists.call_count == len(REGIONS)

    def test_hit_beats_failure(self):
        locator = RegionLocator(_repo({"gangreung": RemoteUnavailable("down"), "jeju": True}))
        assert locator.locate(3001, REGIONS) == "jeju"

    def test_first_failure_in_list_order_raised(self):
        first = RemoteError("denied", "PERMISSION_DENIED")
        second = RemoteUnavailable("down", "UNAVAILABLE")
        locator = RegionLocator(_repo({"pohang": first, "busan": second}))
        with pytest.raises(RemoteError) as exc_info:
            locator.locate(1001, REGIONS)
        assert exc_info.value is first

    def test_probes_run_concurrently(self):
        barrier = threading.Barrier(len(REGIONS), timeout=2)
        repo = MagicMock(spec=BeachRepository)

        def probe(location_id: int, region: str) -> bool:
            barrier.wait()
            return region == "busan"

        repo.metadata_exists.side_effect = probe
        assert RegionLocator(repo, max_workers=4).locate(4001, REGIONS) == "busan"
