"""Per-cell walk/transit compositing and aggregate statistics."""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from enum import StrEnum
from typing import TYPE_CHECKING

from isochrone_heatmap.analysis.interpolate import walk_minutes
from isochrone_heatmap.datasources.odsay.models import FailureReason

if TYPE_CHECKING:
    from isochrone_heatmap.grid.models import GridCell, SampleCell


class TravelMode(StrEnum):
    WALK = "walk"
    TRANSIT = "transit"


@dataclass(frozen=True)
class CellEstimate:
    """Fastest travel time for one grid cell."""

    cell: GridCell
    minutes: float
    mode: TravelMode


@dataclass
class SampleStats:
    """Counts over one batch of sample lookups."""

    sampled: int = 0
    valid: int = 0
    cache_hits: int = 0
    cache_misses: int = 0
    failures: int = 0
    failure_reasons: Counter[str] = field(default_factory=Counter)


def composite_cell(
    cell: GridCell,
    transit_minutes: float,
    *,
    detour_factor: float,
    speed_m_per_min: float,
) -> CellEstimate:
    """Pick the faster of walking straight there and the transit estimate.

    Ties go to walking.
    """
    walk = walk_minutes(cell.radial_meters, detour_factor, speed_m_per_min)
    if walk <= transit_minutes:
        return CellEstimate(cell=cell, minutes=walk, mode=TravelMode.WALK)
    return CellEstimate(cell=cell, minutes=transit_minutes, mode=TravelMode.TRANSIT)


def adjusted_transit_minutes(
    base_minutes: float,
    interval_minutes: float,
    *,
    headway_weight: float,
    wait_multiplier: float,
) -> float:
    """In-vehicle time plus the expected (schedule-scaled) wait for a vehicle."""
    return base_minutes + interval_minutes * headway_weight * wait_multiplier


def summarize_samples(samples: list[SampleCell]) -> SampleStats:
    """Tally cache use and failures across resolved samples."""
    stats = SampleStats(sampled=len(samples))
    for sample in samples:
        if sample.is_valid:
            stats.valid += 1
        if sample.cache_hit is True:
            stats.cache_hits += 1
        elif sample.cache_hit is False:
            stats.cache_misses += 1
        reason = sample.failure_reason
        if reason is not None and reason != FailureReason.TOO_CLOSE:  # expected next to the origin
            stats.failures += 1
            stats.failure_reasons[reason] += 1
    return stats
