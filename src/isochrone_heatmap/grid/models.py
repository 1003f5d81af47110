"""Grid cell data models."""

from __future__ import annotations

import math
from dataclasses import dataclass, replace


@dataclass(frozen=True)
class GeoPoint:
    """WGS84 latitude/longitude pair in degrees."""

    lat: float
    lng: float


@dataclass(frozen=True)
class GridCell:
    """A square cell of the analysis grid, addressed by signed integer indices."""

    east_index: int
    north_index: int
    east_meters: float
    north_meters: float
    center: GeoPoint
    sw: GeoPoint
    ne: GeoPoint

    @property
    def is_origin(self) -> bool:
        """Whether this is the cell at the grid origin."""
        return self.east_index == 0 and self.north_index == 0

    @property
    def radial_meters(self) -> float:
        """Straight-line distance from the grid origin in meters."""
        return math.hypot(self.east_meters, self.north_meters)

    def with_transit(self, minutes: float, reason: str | None = None) -> SampleCell:
        """Return a resolved sample for this cell."""
        return SampleCell(
            cell=self,
            transit_minutes=minutes,
            failure_reason=None if reason is None else str(reason),
        )


@dataclass(frozen=True)
class SampleCell:
    """A grid cell that received a transit lookup.

    ``transit_minutes`` is ``math.inf`` when no usable route was found.
    """

    cell: GridCell
    transit_minutes: float
    failure_reason: str | None = None
    cache_hit: bool | None = None  # None = no lookup was made

    @property
    def is_valid(self) -> bool:
        """True when the sample carries a finite transit estimate."""
        return math.isfinite(self.transit_minutes)

    @property
    def east_meters(self) -> float:
        return self.cell.east_meters

    @property
    def north_meters(self) -> float:
        return self.cell.north_meters

    def marked(self, *, cache_hit: bool) -> SampleCell:
        """Copy of this sample recording whether the lookup hit the cache."""
        return replace(self, cache_hit=cache_hit)
