# src/streetbite/config/settings.py
"""
Application settings (Pydantic).

Settings are loaded from `src/streetbite/config/defaults.yaml`, then optionally overridden by:
- environment variables (e.g., `STREETBITE_LOG_LEVEL`, `STREETBITE_CATALOG_PATH`)
- an external YAML file via `STREETBITE_CONFIG_PATH`

Design rule:
- Tuning knobs (score points, distance tiers) live in YAML, not hard-coded in ranking logic.
"""

from __future__ import annotations

import os
from functools import lru_cache
from importlib import resources
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, model_validator

from streetbite.core.env import load_dotenv_if_present


def _read_package_yaml(filename: str) -> dict[str, Any]:
    """Read a YAML file packaged inside `streetbite.config`."""
    text = resources.files("streetbite.config").joinpath(filename).read_text(encoding="utf-8")
    data = yaml.safe_load(text) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Invalid YAML root object for {filename}; expected a mapping.")
    return data


def _read_yaml_file(path: str | Path) -> dict[str, Any]:
    """Read a YAML file from disk and return its mapping root."""
    data = yaml.safe_load(Path(path).read_text(encoding="utf-8")) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Invalid YAML root object for {path}; expected a mapping.")
    return data


class AppSettings(BaseModel):
    name: str = "StreetBite"
    log_level: str = "INFO"


class CatalogSettings(BaseModel):
    path: str = "data/catalogs/vendors.json"
    live_locations_path: str | None = "data/catalogs/live_locations.json"


class ProximityTier(BaseModel):
    """A distance band: vendors closer than `max_km` earn `points`."""

    max_km: float = Field(..., gt=0)
    points: float = Field(..., ge=0)
    reason: str


class RankingSettings(BaseModel):
    proximity_tiers: list[ProximityTier] = Field(
        default_factory=lambda: [
            ProximityTier(max_km=1.0, points=50, reason="Very close to you"),
            ProximityTier(max_km=3.0, points=30, reason="Nearby location"),
        ]
    )
    beyond_tiers_points: float = Field(10, ge=0)
    beyond_tiers_reason: str = "Within your area"
    no_origin_points: float = Field(20, ge=0)
    no_origin_reason: str = "Popular choice"
    verified_points: float = Field(30, ge=0)
    verified_reason: str = "Verified vendor"
    wide_menu_min_items: int = Field(4, ge=0)
    wide_menu_points: float = Field(20, ge=0)
    wide_menu_reason: str = "Wide menu selection"
    trending_points: float = Field(25, ge=0)
    trending_reason: str = "Trending now"
    trending_probability: float = Field(0.3, ge=0, le=1)
    top_n_default: int = Field(3, ge=1)
    trending_limit_default: int = Field(5, ge=1)

    @model_validator(mode="after")
    def _validate_tier_order(self) -> "RankingSettings":
        bounds = [t.max_km for t in self.proximity_tiers]
        if bounds != sorted(bounds) or len(set(bounds)) != len(bounds):
            raise ValueError("ranking.proximity_tiers must have strictly increasing max_km")
        return self


class ProximitySettings(BaseModel):
    default_radius_km: float | None = Field(default=None, gt=0)
    grid_index_min_catalog_size: int = Field(500, ge=0)
    grid_cell_size_km: float = Field(1.0, gt=0)


class Settings(BaseModel):
    app: AppSettings = Field(default_factory=AppSettings)
    catalog: CatalogSettings = Field(default_factory=CatalogSettings)
    ranking: RankingSettings = Field(default_factory=RankingSettings)
    proximity: ProximitySettings = Field(default_factory=ProximitySettings)


def _apply_env_overrides(data: dict[str, Any]) -> dict[str, Any]:
    """Overlay selected environment variables onto raw settings payload.

    Note: We intentionally keep this whitelist small.
    """
    load_dotenv_if_present()
    data = dict(data)
    log_level = os.getenv("STREETBITE_LOG_LEVEL")
    if log_level:
        data.setdefault("app", {})["log_level"] = log_level

    catalog_path = os.getenv("STREETBITE_CATALOG_PATH")
    if catalog_path:
        data.setdefault("catalog", {})["path"] = catalog_path

    live_path = os.getenv("STREETBITE_LIVE_LOCATIONS_PATH")
    if live_path:
        data.setdefault("catalog", {})["live_locations_path"] = live_path

    return data


@lru_cache
def get_settings() -> Settings:
    """Load and validate settings (cached)."""
    load_dotenv_if_present()
    config_path = os.getenv("STREETBITE_CONFIG_PATH")
    raw = _read_yaml_file(config_path) if config_path else _read_package_yaml("defaults.yaml")
    raw = _apply_env_overrides(raw)
    return Settings.model_validate(raw)


@lru_cache
def get_logging_config() -> dict[str, Any]:
    """Load logging configuration (cached)."""
    return _read_package_yaml("logging.yaml")
