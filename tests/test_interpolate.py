"""Tests for IDW interpolation and walk/transit compositing."""

from __future__ import annotations

import math

import pytest

from isochrone_heatmap.analysis import (
    TravelMode,
    adjusted_transit_minutes,
    composite_cell,
    interpolate_transit,
    summarize_samples,
    walk_minutes,
)
from isochrone_heatmap.datasources.odsay.models import FailureReason
from isochrone_heatmap.grid.models import GeoPoint, GridCell, SampleCell

DETOUR = 1.22
SPEED = 75.0  # 4.5 km/h in m/min
STEP = 50.0


def cell(east_index: int, north_index: int) -> GridCell:
    point = GeoPoint(lat=0.0, lng=0.0)
    return GridCell(
        east_index=east_index,
        north_index=north_index,
        east_meters=east_index * STEP,
        north_meters=north_index * STEP,
        center=point,
        sw=point,
        ne=point,
    )


def sample(east_index: int, north_index: int, minutes: float) -> SampleCell:
    return cell(east_index, north_index).with_transit(minutes)


def interpolate(target: GridCell, samples: list[SampleCell], **kwargs: float) -> float:
    return interpolate_transit(
        target, samples, detour_factor=DETOUR, speed_m_per_min=SPEED, **kwargs
    )


class TestWalkMinutes:
    def test_formula(self) -> None:
        assert walk_minutes(750, DETOUR, SPEED) == pytest.approx(750 * 1.22 / 75)

    def test_zero(self) -> None:
        assert walk_minutes(0, DETOUR, SPEED) == 0


class TestInterpolateTransit:
    """Tests for the IDW interpolator."""

    def test_no_samples(self) -> None:
        assert interpolate(cell(0, 0), []) == math.inf

    def test_exact_match_returns_sample_value(self) -> None:
        samples = [sample(0, 0, 12.5), sample(2, 0, 3.0)]
        assert interpolate(cell(0, 0), samples) == 12.5

    def test_equidistant_samples_average(self) -> None:
        samples = [sample(2, 0, 10), sample(0, 2, 20), sample(-2, 0, 15), sample(0, -2, 30)]
        last_mile = 100 * DETOUR / SPEED
        assert interpolate(cell(0, 0), samples) == pytest.approx(18.75 + last_mile)

    def test_nearer_sample_dominates(self) -> None:
        samples = [sample(1, 0, 10), sample(4, 0, 40)]
        result = interpolate(cell(0, 0), samples)
        near = 10 + 50 * DETOUR / SPEED
        far = 40 + 200 * DETOUR / SPEED
        # weights 1/50^2 and 1/200^2 -> 16:1
        assert result == pytest.approx((near * 16 + far) / 17)

    def test_only_nearest_four_used(self) -> None:
        base = [sample(1, 0, 10), sample(0, 1, 12), sample(-1, 0, 14), sample(0, -1, 16)]
        far = sample(10, 10, 500)
        assert interpolate(cell(0, 0), [*base, far]) == pytest.approx(
            interpolate(cell(0, 0), base)
        )

    def test_bounded_by_corrected_neighbours(self) -> None:
        samples = [sample(3, 1, 8), sample(-2, 4, 25), sample(5, -5, 14), sample(-6, -1, 19)]
        target = cell(1, 0)
        corrected = [
            s.transit_minutes
            + math.hypot(s.east_meters - target.east_meters, s.north_meters - target.north_meters)
            * DETOUR
            / SPEED
            for s in samples
        ]
        result = interpolate(target, samples)
        assert min(corrected) <= result <= max(corrected)

    def test_configurable_neighbours(self) -> None:
        samples = [sample(1, 0, 10), sample(4, 0, 40)]
        assert interpolate(cell(0, 0), samples, neighbors=1) == pytest.approx(
            10 + 50 * DETOUR / SPEED
        )


class TestCompositeCell:
    """Tests for picking the faster mode per cell."""

    def test_origin_is_walk(self) -> None:
        estimate = composite_cell(cell(0, 0), math.inf, detour_factor=DETOUR, speed_m_per_min=SPEED)
        assert estimate.mode == TravelMode.WALK
        assert estimate.minutes == 0

    def test_transit_faster(self) -> None:
        target = cell(20, 0)  # 1 km: ~16.3 min walk
        estimate = composite_cell(target, 9.0, detour_factor=DETOUR, speed_m_per_min=SPEED)
        assert estimate.mode == TravelMode.TRANSIT
        assert estimate.minutes == 9.0

    def test_walk_faster(self) -> None:
        estimate = composite_cell(cell(2, 0), 30.0, detour_factor=DETOUR, speed_m_per_min=SPEED)
        assert estimate.mode == TravelMode.WALK
        assert estimate.minutes == pytest.approx(100 * DETOUR / SPEED)

    def test_tie_goes_to_walk(self) -> None:
        target = cell(3, 4)  # 250 m
        walk = 250 * DETOUR / SPEED
        estimate = composite_cell(target, walk, detour_factor=DETOUR, speed_m_per_min=SPEED)
        assert estimate.mode == TravelMode.WALK


class TestAdjustedTransitMinutes:
    def test_half_headway_scaled(self) -> None:
        result = adjusted_transit_minutes(20, 10, headway_weight=0.5, wait_multiplier=1.4)
        assert result == pytest.approx(27)


class TestSummarizeSamples:
    """Tests for per-batch statistics."""

    def test_counts(self) -> None:
        samples = [
            cell(0, 0).with_transit(math.inf, FailureReason.TOO_CLOSE).marked(cache_hit=False),
            cell(1, 0).with_transit(12).marked(cache_hit=True),
            cell(2, 0).with_transit(math.inf, FailureReason.NO_PATH).marked(cache_hit=False),
            cell(3, 0).with_transit(math.inf, "http_500").marked(cache_hit=True),
            cell(4, 0).with_transit(math.inf, FailureReason.NETWORK_ERROR),
        ]

        stats = summarize_samples(samples)

        assert stats.sampled == 5
        assert stats.valid == 1
        assert stats.cache_hits == 2
        assert stats.cache_misses == 2
        assert stats.failures == 3
        assert dict(stats.failure_reasons) == {"no_path": 1, "http_500": 1, "network_error": 1}

    def test_walk_only_samples(self) -> None:
        stats = summarize_samples([cell(0, 0).with_transit(math.inf)])
        assert stats.failures == 0
        assert stats.cache_hits == stats.cache_misses == 0
