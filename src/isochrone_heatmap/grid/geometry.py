"""Meter offsets <-> lat/lng using the equirectangular approximation.

Accurate to well under a meter over the few-kilometer extents used here::

    dlat = dnorth / 111320
    dlng = deast / (111320 * cos(lat0))
"""

from __future__ import annotations

import math

from isochrone_heatmap.grid.models import GeoPoint

METERS_PER_DEGREE_LAT = 111_320


def offset_latlng(origin: GeoPoint, east_meters: float, north_meters: float) -> GeoPoint:
    """Shift ``origin`` by the given east/north offsets in meters."""
    lat_delta = north_meters / METERS_PER_DEGREE_LAT
    lng_delta = east_meters / (METERS_PER_DEGREE_LAT * math.cos(math.radians(origin.lat)))
    return GeoPoint(lat=origin.lat + lat_delta, lng=origin.lng + lng_delta)


def planar_distance(
    east_a: float, north_a: float, east_b: float, north_b: float
) -> float:
    """Euclidean distance in meters between two grid offsets."""
    return math.hypot(east_a - east_b, north_a - north_b)


def round_to(value: float, digits: int) -> float:
    """Round to ``digits`` decimals with ties going up (-2.5 -> -2, 2.5 -> 3)."""
    factor = 10**digits
    return math.floor(value * factor + 0.5) / factor
