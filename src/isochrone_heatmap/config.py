"""
Application settings.

Values come from environment variables (or a local ``.env`` file), e.g.
``ODSAY_API_KEY=... MAX_TRANSIT_SAMPLES=120 isochrone-heatmap build ...``.
"""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Runtime configuration for the isochrone engine."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    app_name: str = "isochrone-heatmap"
    app_env: str = "development"
    debug: bool = False

    # Transit provider (ODsay). Empty key = walk-only mode.
    odsay_api_key: str = Field(default="", repr=False)

    # Grid
    grid_size_meters: float = Field(default=50, gt=0)
    min_radius_meters: float = Field(default=300, gt=0)
    max_radius_meters: float = Field(default=1000, gt=0)
    default_radius_meters: float = 800

    # Colour-scale range carried through to the UI
    min_max_minutes: float = 20
    max_max_minutes: float = 180
    default_max_minutes: float = 90

    default_time: str = "08:30"
    timezone: str = "Asia/Seoul"

    # Sampling and fan-out
    max_transit_samples: int = Field(default=90, ge=1)
    transit_concurrency: int = Field(default=5, ge=1)
    transit_timeout_seconds: float = Field(default=10, gt=0)

    # Walking model
    walking_speed_kmh: float = Field(default=4.5, gt=0)
    walk_detour_factor: float = Field(default=1.22, ge=1)
    max_transfer_walk_meters: float = 500

    # Route cache
    cache_ttl_seconds: float = 600
    cache_max_size: int = Field(default=5000, ge=1)
    schedule_bucket_minutes: int = Field(default=30, ge=1)

    # Tunable heuristics
    headway_weight: float = 0.5  # expected wait = half the headway
    idw_neighbors: int = Field(default=4, ge=1)
    idw_power: float = 2.0
    exact_match_meters: float = 1.0

    @property
    def walking_speed_m_per_min(self) -> float:
        """Walking speed in meters per minute."""
        return self.walking_speed_kmh * 1000 / 60

    @property
    def transit_enabled(self) -> bool:
        """True when a transit provider key is configured."""
        return bool(self.odsay_api_key)


@lru_cache
def get_settings() -> Settings:
    """Return the process-wide settings (read once)."""
    return Settings()
