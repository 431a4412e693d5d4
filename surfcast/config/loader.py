"""YAML config loader with runtime get/set."""

import hashlib
import json
from pathlib import Path
from typing import Any

import yaml

from surfcast.config.defaults import DEFAULT_BEACHES, DEFAULT_REGIONS
from surfcast.config.schema import SurfcastConfig


def load_config(path: str | Path | None = None) -> SurfcastConfig:
    """Load and validate config from a YAML file.

    If no regions or beaches are specified, injects DEFAULT_REGIONS and
    DEFAULT_BEACHES. With no path, returns the defaults.
    """
    raw: dict[str, Any] = {}
    if path is not None:
        with open(Path(path)) as f:
            raw = yaml.safe_load(f) or {}

    if not raw.get("regions"):
        raw["regions"] = [r.model_dump() for r in DEFAULT_REGIONS]
    if not raw.get("beaches"):
        raw["beaches"] = [b.model_dump() for b in DEFAULT_BEACHES]

    return SurfcastConfig(**raw)


def config_hash(config: SurfcastConfig) -> str:
    """Compute a deterministic SHA256 hash of the config."""
    data = config.model_dump_json(indent=None)
    return hashlib.sha256(data.encode()).hexdigest()[:16]


def get_config_value(config: SurfcastConfig, dotted_key: str) -> Any:
    """Get a config value by dotted key path. E.g. 'forecast.lookback_hours'."""
    obj: Any = config
    for part in dotted_key.split("."):
        if isinstance(obj, list):
            obj = obj[int(part)]
        elif isinstance(obj, dict):
            obj = obj[part]
        elif hasattr(obj, part):
            obj = getattr(obj, part)
        else:
            raise KeyError(f"Config key not found: {dotted_key}")
    return obj


def set_config_value(config: SurfcastConfig, dotted_key: str, value: Any) -> SurfcastConfig:
    """Set a config value by dotted key path and re-validate.

    Returns a new SurfcastConfig instance.
    """
    data = json.loads(config.model_dump_json())
    parts = dotted_key.split(".")
    target: Any = data
    for part in parts[:-1]:
        target = target[int(part)] if isinstance(target, list) else target[part]
    key: Any = int(parts[-1]) if isinstance(target, list) else parts[-1]
    if not isinstance(target, list) and key not in target:
        raise KeyError(f"Config key not found: {dotted_key}")

    old_value = target[key]
    if isinstance(value, str):
        if isinstance(old_value, bool):
            value = value.lower() in ("1", "true", "yes", "on")
        elif isinstance(old_value, int):
            value = int(value)
        elif isinstance(old_value, float):
            value = float(value)
    target[key] = value
    return SurfcastConfig(**data)


def save_config(config: SurfcastConfig, path: str | Path) -> None:
    """Write a config back to YAML in the layout load_config reads."""
    with open(Path(path), "w") as f:
        yaml.safe_dump(config.model_dump(mode="json"), f, sort_keys=False)
