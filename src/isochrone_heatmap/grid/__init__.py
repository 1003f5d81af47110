"""Analysis grid: geometry, cell generation and sample selection.

Public API:
  - models: GeoPoint, GridCell, SampleCell
  - geometry: offset_latlng, planar_distance, round_to
  - generate: generate_grid
  - sampling: pick_sample_cells, sample_stride
"""

from isochrone_heatmap.grid.generate import generate_grid
from isochrone_heatmap.grid.geometry import (
    METERS_PER_DEGREE_LAT,
    offset_latlng,
    planar_distance,
    round_to,
)
from isochrone_heatmap.grid.models import GeoPoint, GridCell, SampleCell
from isochrone_heatmap.grid.sampling import pick_sample_cells, sample_stride

__all__ = [
    "METERS_PER_DEGREE_LAT",
    "GeoPoint",
    "GridCell",
    "SampleCell",
    "generate_grid",
    "offset_latlng",
    "pick_sample_cells",
    "planar_distance",
    "round_to",
    "sample_stride",
]
