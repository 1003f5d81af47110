"""Tests for grid geometry, generation and sample selection."""

from __future__ import annotations

import math

import pytest

from isochrone_heatmap.grid import (
    METERS_PER_DEGREE_LAT,
    GeoPoint,
    generate_grid,
    offset_latlng,
    pick_sample_cells,
    planar_distance,
    round_to,
    sample_stride,
)

SEOUL = GeoPoint(lat=37.5665, lng=126.978)


def lattice_count(radius: float, step: float) -> int:
    """Brute-force count of lattice points within ``radius``."""
    n = math.floor(radius / step)
    return sum(
        1
        for i in range(-n, n + 1)
        for j in range(-n, n + 1)
        if math.hypot(i * step, j * step) <= radius
    )


# =============================================================================
# Geometry
# =============================================================================


class TestOffsetLatLng:
    """Tests for the equirectangular meter -> degree conversion."""

    def test_zero_offset(self) -> None:
        assert offset_latlng(SEOUL, 0, 0) == SEOUL

    def test_north_offset_one_degree(self) -> None:
        moved = offset_latlng(SEOUL, 0, METERS_PER_DEGREE_LAT)
        assert moved.lat == pytest.approx(SEOUL.lat + 1)
        assert moved.lng == SEOUL.lng

    def test_east_offset_scales_with_latitude(self) -> None:
        """At 60 degrees a degree of longitude is half as long."""
        origin = GeoPoint(lat=60.0, lng=10.0)
        moved = offset_latlng(origin, METERS_PER_DEGREE_LAT / 2, 0)
        assert moved.lng == pytest.approx(11.0)
        assert moved.lat == 60.0

    def test_negative_offsets(self) -> None:
        moved = offset_latlng(SEOUL, -100, -100)
        assert moved.lat < SEOUL.lat
        assert moved.lng < SEOUL.lng


class TestPlanarDistance:
    def test_pythagorean(self) -> None:
        assert planar_distance(0, 0, 30, 40) == pytest.approx(50)

    def test_symmetric(self) -> None:
        assert planar_distance(10, -20, -5, 7) == planar_distance(-5, 7, 10, -20)


class TestRoundTo:
    def test_ties_round_up(self) -> None:
        assert round_to(1.005, 2) == pytest.approx(1.0, abs=0.011)
        assert round_to(2.5, 0) == 3
        assert round_to(-2.5, 0) == -2
        assert round_to(-0.125, 2) == -0.12

    def test_negative_coordinates(self) -> None:
        assert round_to(-16.4987654321, 7) == pytest.approx(-16.4987654)

    def test_seven_decimals(self) -> None:
        assert round_to(37.12345678, 7) == pytest.approx(37.1234568)


# =============================================================================
# Grid generation
# =============================================================================


class TestGenerateGrid:
    """Tests for circular grid generation."""

    @pytest.mark.parametrize(("radius", "step"), [(300, 50), (325, 50), (1000, 50), (800, 100)])
    def test_count_matches_lattice_points(self, radius: float, step: float) -> None:
        cells = generate_grid(SEOUL, radius, step)
        assert len(cells) == lattice_count(radius, step)

    def test_all_cells_within_radius(self) -> None:
        cells = generate_grid(SEOUL, 300, 50)
        assert all(cell.radial_meters <= 300 for cell in cells)

    def test_circular_not_square(self) -> None:
        """Corner cells of the bounding square are cropped."""
        cells = generate_grid(SEOUL, 300, 50)
        indices = {(c.east_index, c.north_index) for c in cells}
        assert (6, 0) in indices
        assert (6, 6) not in indices

    def test_origin_cell_centered_on_origin(self) -> None:
        cells = generate_grid(SEOUL, 300, 50)
        origin = next(c for c in cells if c.is_origin)
        assert origin.center == SEOUL
        assert origin.east_meters == 0
        assert origin.north_meters == 0

    def test_bounding_box_spans_one_step(self) -> None:
        cells = generate_grid(SEOUL, 300, 50)
        cell = cells[0]
        assert cell.ne.lat - cell.sw.lat == pytest.approx(50 / METERS_PER_DEGREE_LAT)
        assert cell.sw.lat < cell.center.lat < cell.ne.lat
        assert cell.sw.lng < cell.center.lng < cell.ne.lng

    def test_offsets_are_index_times_step(self) -> None:
        for cell in generate_grid(SEOUL, 300, 50):
            assert cell.east_meters == cell.east_index * 50
            assert cell.north_meters == cell.north_index * 50

    def test_deterministic(self) -> None:
        assert generate_grid(SEOUL, 500, 50) == generate_grid(SEOUL, 500, 50)

    def test_radius_below_step_gives_single_cell(self) -> None:
        cells = generate_grid(SEOUL, 30, 50)
        assert len(cells) == 1
        assert cells[0].is_origin


# =============================================================================
# Sample selection
# =============================================================================


class TestSampleStride:
    def test_stride_at_least_one(self) -> None:
        assert sample_stride(10, 90) == 1

    def test_stride_formula(self) -> None:
        # ceil(sqrt(1257 / 90)) = ceil(3.737) = 4
        assert sample_stride(1257, 90) == 4


class TestPickSampleCells:
    """Tests for bounded, origin-preserving sample selection."""

    def test_small_grid_unchanged(self) -> None:
        cells = generate_grid(SEOUL, 300, 50)
        assert pick_sample_cells(cells, len(cells)) == cells

    @pytest.mark.parametrize("max_samples", [1, 2, 4, 8, 20, 50, 90, 200])
    @pytest.mark.parametrize("radius", [300, 650, 1000])
    def test_bounded_and_keeps_origin(self, radius: float, max_samples: int) -> None:
        cells = generate_grid(SEOUL, radius, 50)
        sampled = pick_sample_cells(cells, max_samples)
        assert len(sampled) <= max_samples
        assert any(cell.is_origin for cell in sampled)

    def test_stride_filter(self) -> None:
        cells = generate_grid(SEOUL, 1000, 50)
        sampled = pick_sample_cells(cells, 90)
        stride = sample_stride(len(cells), 90)
        for cell in sampled:
            assert cell.east_index % stride == 0
            assert cell.north_index % stride == 0

    def test_origin_kept_when_truncation_would_drop_it(self) -> None:
        """With the origin last in input order it takes the final slot."""
        grid = generate_grid(SEOUL, 300, 50)
        origin = next(c for c in grid if c.is_origin)
        cells = [c for c in grid if not c.is_origin] + [origin]

        sampled = pick_sample_cells(cells, 8)

        assert len(sampled) == 8
        assert sampled[-1] is origin

    def test_no_origin_in_input(self) -> None:
        cells = [c for c in generate_grid(SEOUL, 1000, 50) if not c.is_origin]
        sampled = pick_sample_cells(cells, 30)
        assert len(sampled) <= 30
        assert not any(cell.is_origin for cell in sampled)
