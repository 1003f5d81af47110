"""Inverse-distance-weighted extension of sparse transit samples to the grid.

Each sample's transit time is penalized by the extra walk from the target cell
to the sample (last-mile correction), then the nearest samples are blended
with weights ``1 / distance**power``.
"""

from __future__ import annotations

import math
from typing import TYPE_CHECKING

from isochrone_heatmap.grid.geometry import planar_distance

if TYPE_CHECKING:
    from isochrone_heatmap.grid.models import GridCell, SampleCell

DEFAULT_NEIGHBORS = 4
DEFAULT_POWER = 2.0
EXACT_MATCH_METERS = 1.0


def walk_minutes(distance_meters: float, detour_factor: float, speed_m_per_min: float) -> float:
    """Walking time for a straight-line distance, inflated by the detour factor."""
    return distance_meters * detour_factor / speed_m_per_min


def interpolate_transit(
    target: GridCell,
    samples: list[SampleCell],
    *,
    detour_factor: float,
    speed_m_per_min: float,
    neighbors: int = DEFAULT_NEIGHBORS,
    power: float = DEFAULT_POWER,
    exact_match_meters: float = EXACT_MATCH_METERS,
) -> float:
    """Estimate transit minutes for ``target`` from valid ``samples``.

    Args:
        target: Cell to estimate.
        samples: Samples with finite ``transit_minutes``.
        detour_factor: Ratio of walked to straight-line distance.
        speed_m_per_min: Walking speed.
        neighbors: How many nearest samples to blend.
        power: Distance exponent of the weights.
        exact_match_meters: Samples closer than this are returned as-is.

    Returns:
        Estimated minutes, or ``math.inf`` when there are no samples.
    """
    if not samples:
        return math.inf

    candidates: list[tuple[float, float]] = []
    for sample in samples:
        distance = planar_distance(
            sample.east_meters, sample.north_meters, target.east_meters, target.north_meters
        )
        if distance < exact_match_meters:
            return sample.transit_minutes
        last_mile = walk_minutes(distance, detour_factor, speed_m_per_min)
        candidates.append((distance, sample.transit_minutes + last_mile))

    candidates.sort(key=lambda item: item[0])
    weighted = 0.0
    total_weight = 0.0
    for distance, minutes in candidates[:neighbors]:
        weight = 1 / distance**power
        weighted += minutes * weight
        total_weight += weight

    if total_weight <= 0:
        return math.inf
    return weighted / total_weight
