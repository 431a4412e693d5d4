"""Shared test fixtures."""

import json
from collections.abc import Iterator
from pathlib import Path

import pytest
import yaml

from surfcast.config.defaults import DEFAULT_BEACHES, DEFAULT_REGIONS
from surfcast.config.schema import SurfcastConfig
from surfcast.ingest.firestore_client import FirestoreClient
from surfcast.storage.session_store import SessionStore
from surfcast.tests.factories import FIRESTORE_BASE


@pytest.fixture
def default_config() -> SurfcastConfig:
    """Return default SurfcastConfig with default regions and beaches."""
    return SurfcastConfig(regions=DEFAULT_REGIONS, beaches=DEFAULT_BEACHES)


@pytest.fixture
def config_yaml_path(tmp_path: Path) -> Path:
    """Write a minimal valid config YAML and return its path."""
    data = {
        "firestore": {"project_id": "test-project", "base_url": FIRESTORE_BASE},
        "forecast": {"lookback_hours": 24},
        "storage": {"db_path": str(tmp_path / "surfcast.db")},
    }
    path = tmp_path / "test_config.yaml"
    with open(path, "w") as f:
        yaml.dump(data, f)
    return path


@pytest.fixture
def fixtures_dir() -> Path:
    """Return the path to the test fixtures directory."""
    return Path(__file__).parent / "fixtures"


@pytest.fixture
def load_fixture(fixtures_dir: Path):
    def _load(name: str):
        with open(fixtures_dir / name) as f:
            return json.load(f)
    return _load


@pytest.fixture
def firestore() -> FirestoreClient:
    return FirestoreClient(project_id="test-project", base_url=FIRESTORE_BASE, api_key="k")


@pytest.fixture
def db_path(tmp_path: Path) -> Path:
    return tmp_path / "sessions.db"


@pytest.fixture
def store(db_path: Path) -> Iterator[SessionStore]:
    s = SessionStore(db_path)
    yield s
    s.close()
