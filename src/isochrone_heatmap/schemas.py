"""
Request and response models for the isochrone engine.

Pydantic models for the JSON boundary with the server/UI layer. Field names
are snake_case in Python and camelCase on the wire (``model_dump(by_alias=True)``).
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from isochrone_heatmap.analysis.composite import TravelMode  # noqa: TC001
from isochrone_heatmap.analysis.schedule import DayType, DepartureMode  # noqa: TC001


class InvalidRequestError(ValueError):
    """Rejected input; maps to an HTTP 400 at the server boundary."""

    status_code = 400


class CamelModel(BaseModel):
    """Base model serialized with camelCase keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class LatLng(BaseModel):
    """Geographic point in WGS84 degrees."""

    lat: float = Field(..., ge=-90, le=90, allow_inf_nan=False)
    lng: float = Field(..., ge=-180, le=180, allow_inf_nan=False)


class CellCorner(BaseModel):
    """Computed cell corner, without WGS84 bounds.

    Cells next to the antimeridian or a pole can fall outside the ranges an
    origin is validated against.
    """

    lat: float
    lng: float


# =============================================================================
# Request
# =============================================================================


class IsochroneRequest(CamelModel):
    """A validated, normalized isochrone request."""

    origin: LatLng
    radius_meters: float
    max_minutes: float
    departure_mode: DepartureMode = DepartureMode.NOW
    day_type: DayType = DayType.WEEKDAY
    time: str = "08:30"


# =============================================================================
# Response
# =============================================================================


class OutputCell(CamelModel):
    """One heatmap cell: center, bounding box, minutes and the faster mode."""

    lat: float
    lng: float
    sw: CellCorner
    ne: CellCorner
    minutes: float
    mode: TravelMode


class IsochroneSettings(CamelModel):
    """Effective parameters the result was computed with."""

    grid_size_meters: float
    radius_meters: float
    max_minutes: float
    max_transfer_walk_meters: float
    departure_mode: DepartureMode
    day_type: DayType
    time: str
    wait_multiplier: float
    transit_enabled: bool


class IsochroneStats(CamelModel):
    """Aggregate counts for one request."""

    total_grid_cells: int
    sampled_transit_cells: int
    valid_transit_samples: int
    cache_hits: int = 0
    cache_misses: int = 0
    api_failures: int = 0
    failure_reasons: dict[str, int] = Field(default_factory=dict)
    notes: list[str] = Field(default_factory=list)


class IsochroneResult(CamelModel):
    """Full engine output."""

    settings: IsochroneSettings
    stats: IsochroneStats
    cells: list[OutputCell] = Field(default_factory=list)

    def to_json_dict(self) -> dict[str, object]:
        """Plain JSON-ready dict with camelCase keys."""
        return self.model_dump(by_alias=True, mode="json")


class PublicConfig(CamelModel):
    """Bootstrap config for the map UI. Never carries API keys."""

    grid_size_meters: float
    min_radius_meters: float
    max_radius_meters: float
    transit_enabled: bool
