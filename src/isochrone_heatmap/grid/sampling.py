"""Bounded selection of grid cells that get a real transit lookup."""

from __future__ import annotations

import math
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from isochrone_heatmap.grid.models import GridCell


def sample_stride(grid_size: int, max_samples: int) -> int:
    """Lattice stride that thins ``grid_size`` cells to roughly ``max_samples``."""
    return max(1, math.ceil(math.sqrt(grid_size / max_samples)))


def pick_sample_cells(cells: list[GridCell], max_samples: int) -> list[GridCell]:
    """Pick at most ``max_samples`` cells spread evenly over the grid.

    Keeps every cell whose east and north indices are both multiples of the
    stride, so coverage stays roughly uniform. The origin cell is always kept
    (when present in ``cells``) so the near-origin estimate is anchored by an
    actual lookup.
    """
    if len(cells) <= max_samples:
        return list(cells)

    stride = sample_stride(len(cells), max_samples)
    sampled = [
        cell
        for cell in cells
        if abs(cell.east_index) % stride == 0 and abs(cell.north_index) % stride == 0
    ][:max_samples]

    origin = next((cell for cell in cells if cell.is_origin), None)
    if origin is not None and not any(cell.is_origin for cell in sampled):
        # Truncation can push the origin past the cap; it takes the last slot.
        if len(sampled) >= max_samples:
            sampled[-1] = origin
        else:
            sampled.append(origin)

    return sampled
