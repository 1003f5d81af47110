"""Travel-time modelling over the analysis grid.

Dependency rule: analysis/ works on grid models only. It never calls the
transit provider and does no I/O.

Modules:
  - schedule: departure day-type/time -> wait multiplier and cache time bucket
  - interpolate: sparse transit samples -> per-cell transit estimate (IDW)
  - composite: walk vs transit per cell, sample statistics
"""

from isochrone_heatmap.analysis.composite import (
    CellEstimate,
    SampleStats,
    TravelMode,
    adjusted_transit_minutes,
    composite_cell,
    summarize_samples,
)
from isochrone_heatmap.analysis.interpolate import interpolate_transit, walk_minutes
from isochrone_heatmap.analysis.schedule import (
    DayType,
    DepartureMode,
    ScheduleContext,
    normalize_day_type,
    normalize_time,
    resolve_schedule,
    time_bucket,
    wait_multiplier,
)

__all__ = [
    "CellEstimate",
    "DayType",
    "DepartureMode",
    "SampleStats",
    "ScheduleContext",
    "TravelMode",
    "adjusted_transit_minutes",
    "composite_cell",
    "interpolate_transit",
    "normalize_day_type",
    "normalize_time",
    "resolve_schedule",
    "summarize_samples",
    "time_bucket",
    "wait_multiplier",
    "walk_minutes",
]
