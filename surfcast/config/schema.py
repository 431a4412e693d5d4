"""Pydantic v2 configuration schema with strict validation."""

from pydantic import BaseModel, Field


class RegionConfig(BaseModel):
    model_config = {"extra": "forbid"}

    slug: str
    name: str
    order: int = Field(default=0, ge=0)


class BeachConfig(BaseModel):
    model_config = {"extra": "forbid"}

    id: int = Field(gt=0)
    region: str
    name: str
    enabled: bool = True


class FirestoreConfig(BaseModel):
    model_config = {"extra": "forbid"}

    project_id: str = "dosurf"
    database: str = "(default)"
    base_url: str = "https://firestore.googleapis.com/v1"
    api_key: str = ""  # falls back to SURFCAST_FIRESTORE_API_KEY
    timeout_seconds: float = Field(default=30.0, gt=0.0)


class ForecastConfig(BaseModel):
    model_config = {"extra": "forbid"}

    lookback_hours: int = Field(default=48, ge=0)
    max_documents: int | None = Field(default=None, ge=1)
    probe_workers: int = Field(default=4, ge=1, le=32)


class StorageConfig(BaseModel):
    model_config = {"extra": "forbid"}

    db_path: str = "data/surfcast.db"


class HistoryConfig(BaseModel):
    model_config = {"extra": "forbid"}

    recent_session_limit: int = Field(default=10, ge=1)
    display_timezone: str = "Asia/Seoul"
    forecast_slot_hours: int = Field(default=3, ge=1, le=24)


class SurfcastConfig(BaseModel):
    model_config = {"extra": "forbid"}

    firestore: FirestoreConfig = FirestoreConfig()
    forecast: ForecastConfig = ForecastConfig()
    storage: StorageConfig = StorageConfig()
    history: HistoryConfig = HistoryConfig()
    regions: list[RegionConfig] = []
    beaches: list[BeachConfig] = []

    @property
    def region_slugs(self) -> list[str]:
        return [r.slug for r in sorted(self.regions, key=lambda r: r.order)]

    @property
    def enabled_beaches(self) -> list[BeachConfig]:
        return [b for b in self.beaches if b.enabled]
