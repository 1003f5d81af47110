"""Circular grid generation around an origin point."""

from __future__ import annotations

import math

from isochrone_heatmap.grid.geometry import offset_latlng
from isochrone_heatmap.grid.models import GeoPoint, GridCell


def generate_grid(origin: GeoPoint, radius_meters: float, step_meters: float) -> list[GridCell]:
    """Build the square cells whose centers lie within ``radius_meters`` of ``origin``.

    Cells are laid out on a lattice of spacing ``step_meters`` and ordered
    row by row (south to north, west to east within a row). The lattice is
    cropped to a disk, not a square.

    Args:
        origin: Grid origin; the (0, 0) cell is centered on it.
        radius_meters: Crop radius in meters.
        step_meters: Cell edge length in meters.

    Returns:
        List of GridCell, deterministic for the same inputs.
    """
    half = step_meters / 2
    max_index = math.floor(radius_meters / step_meters)
    cells: list[GridCell] = []

    for north_index in range(-max_index, max_index + 1):
        for east_index in range(-max_index, max_index + 1):
            east_meters = east_index * step_meters
            north_meters = north_index * step_meters
            if math.hypot(east_meters, north_meters) > radius_meters:
                continue

            center = offset_latlng(origin, east_meters, north_meters)
            cells.append(
                GridCell(
                    east_index=east_index,
                    north_index=north_index,
                    east_meters=east_meters,
                    north_meters=north_meters,
                    center=center,
                    sw=offset_latlng(center, -half, -half),
                    ne=offset_latlng(center, half, half),
                )
            )

    return cells
