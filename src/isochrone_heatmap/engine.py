"""Isochrone engine: origin + radius + schedule -> per-cell travel times.

Pipeline::

    generate_grid -> pick_sample_cells
        -> run_with_concurrency(lookup via RouteCache -> ODsay -> select_best_path)
        -> interpolate_transit (every cell) -> composite_cell -> IsochroneResult

Only the sampled cells hit the transit provider; every other cell gets an
interpolated estimate. Provider failures never fail a request, they only make
that sample fall back to walking time and show up in ``stats``.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Callable
from functools import partial
from typing import TYPE_CHECKING, Any

from pydantic import ValidationError

from isochrone_heatmap.analysis.composite import (
    adjusted_transit_minutes,
    composite_cell,
    summarize_samples,
)
from isochrone_heatmap.analysis.interpolate import interpolate_transit
from isochrone_heatmap.analysis.schedule import (
    DepartureMode,
    ScheduleContext,
    normalize_day_type,
    normalize_time,
    resolve_schedule,
)
from isochrone_heatmap.cache import RouteCache, RouteQuery
from isochrone_heatmap.config import Settings, get_settings
from isochrone_heatmap.datasources.odsay.models import FailureReason, RouteResult
from isochrone_heatmap.datasources.odsay.routes import fetch_route
from isochrone_heatmap.grid.generate import generate_grid
from isochrone_heatmap.grid.geometry import round_to
from isochrone_heatmap.grid.models import GeoPoint, GridCell, SampleCell
from isochrone_heatmap.grid.sampling import pick_sample_cells
from isochrone_heatmap.schemas import (
    CellCorner,
    InvalidRequestError,
    IsochroneRequest,
    IsochroneResult,
    IsochroneSettings,
    IsochroneStats,
    LatLng,
    OutputCell,
    PublicConfig,
)
from isochrone_heatmap.services.concurrency import run_with_concurrency

if TYPE_CHECKING:
    from datetime import datetime

    from isochrone_heatmap.analysis.composite import CellEstimate

logger = logging.getLogger(__name__)

#: ``(origin, destination) -> RouteResult``; must not raise for provider failures
RouteLookup = Callable[[GeoPoint, GeoPoint], RouteResult]

COORD_DECIMALS = 7
MINUTE_DECIMALS = 2

NOTE_TRANSIT_DISABLED = (
    "ODSAY_API_KEY is not set; showing walking times only, without public transit."
)


def _finite_or_none(value: Any) -> float | None:
    if isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return number if math.isfinite(number) else None


def clamp(value: Any, low: float, high: float) -> float:
    """Clamp a loosely typed number into [low, high]; non-numbers become ``low``."""
    number = _finite_or_none(value)
    if number is None:
        return low
    return min(high, max(low, number))


def parse_request(body: Any, settings: Settings) -> IsochroneRequest:
    """Validate and normalize a raw request body.

    Coordinates must be valid; everything else is clamped or defaulted.

    Raises:
        InvalidRequestError: If the body is not an object or the origin is invalid.
    """
    if not isinstance(body, dict) or not body:
        msg = "Request body is empty."
        raise InvalidRequestError(msg)

    origin = body.get("origin")
    if not isinstance(origin, dict):
        origin = {}
    try:
        point = LatLng.model_validate(
            {"lat": _finite_or_none(origin.get("lat")), "lng": _finite_or_none(origin.get("lng"))}
        )
    except ValidationError as exc:
        fields = ", ".join(sorted({str(err["loc"][0]) for err in exc.errors()}))
        msg = f"Origin coordinates are invalid ({fields})."
        raise InvalidRequestError(msg) from exc

    departure_mode = (
        DepartureMode.CUSTOM if body.get("departureMode") == "custom" else DepartureMode.NOW
    )
    return IsochroneRequest(
        origin=point,
        radius_meters=clamp(
            body.get("radiusMeters") or settings.default_radius_meters,
            settings.min_radius_meters,
            settings.max_radius_meters,
        ),
        max_minutes=clamp(
            body.get("maxMinutes") or settings.default_max_minutes,
            settings.min_max_minutes,
            settings.max_max_minutes,
        ),
        departure_mode=departure_mode,
        day_type=normalize_day_type(body.get("dayType")),
        time=normalize_time(body.get("time") or settings.default_time, settings.default_time),
    )


def to_output_cell(estimate: CellEstimate) -> OutputCell:
    """Round an estimate for publication."""
    cell = estimate.cell
    return OutputCell(
        lat=round_to(cell.center.lat, COORD_DECIMALS),
        lng=round_to(cell.center.lng, COORD_DECIMALS),
        sw=CellCorner(
            lat=round_to(cell.sw.lat, COORD_DECIMALS), lng=round_to(cell.sw.lng, COORD_DECIMALS)
        ),
        ne=CellCorner(
            lat=round_to(cell.ne.lat, COORD_DECIMALS), lng=round_to(cell.ne.lng, COORD_DECIMALS)
        ),
        minutes=round_to(estimate.minutes, MINUTE_DECIMALS),
        mode=estimate.mode,
    )


class IsochroneEngine:
    """Computes isochrone heatmaps; holds the process-wide route cache.

    Build one per process and share it between requests::

        engine = IsochroneEngine(get_settings())
        result = engine.build({"origin": {"lat": 37.5665, "lng": 126.978}})

    Args:
        settings: Runtime configuration (defaults to ``get_settings()``).
        cache: Route cache; a new one sized from ``settings`` if omitted.
        route_lookup: Replaces the ODsay client. Supplying one enables transit
            even without an API key.
    """

    def __init__(
        self,
        settings: Settings | None = None,
        cache: RouteCache | None = None,
        route_lookup: RouteLookup | None = None,
    ) -> None:
        self.settings = settings or get_settings()
        self.cache = cache or RouteCache(
            ttl_seconds=self.settings.cache_ttl_seconds,
            max_size=self.settings.cache_max_size,
        )
        self.transit_enabled = route_lookup is not None or self.settings.transit_enabled
        self.route_lookup: RouteLookup = route_lookup or partial(
            fetch_route,
            api_key=self.settings.odsay_api_key,
            timeout=self.settings.transit_timeout_seconds,
            max_walk_meters=self.settings.max_transfer_walk_meters,
            headway_weight=self.settings.headway_weight,
        )

    def public_config(self) -> PublicConfig:
        return PublicConfig(
            grid_size_meters=self.settings.grid_size_meters,
            min_radius_meters=self.settings.min_radius_meters,
            max_radius_meters=self.settings.max_radius_meters,
            transit_enabled=self.transit_enabled,
        )

    def lookup(self, query: RouteQuery) -> tuple[RouteResult, bool]:
        """Cached route lookup. Returns the result and whether it was a cache hit."""
        cached = self.cache.get(query)
        if cached is not None:
            return cached, True
        result = self.route_lookup(query.origin, query.destination)
        self.cache.put(query, result)
        return result, False

    def resolve_sample(
        self, origin: GeoPoint, cell: GridCell, schedule: ScheduleContext
    ) -> SampleCell:
        """Look up transit time from ``origin`` to the center of ``cell``."""
        query = RouteQuery(
            origin=origin,
            destination=cell.center,
            day_type=schedule.day_type,
            time_bucket=schedule.time_bucket,
        )
        route, hit = self.lookup(query)
        if not route.ok:
            logger.debug(
                "No transit for cell (%d, %d): %s", cell.east_index, cell.north_index, route.reason
            )
            return cell.with_transit(math.inf, route.reason).marked(cache_hit=hit)

        minutes = adjusted_transit_minutes(
            route.base_minutes,
            route.interval_minutes,
            headway_weight=self.settings.headway_weight,
            wait_multiplier=schedule.wait_multiplier,
        )
        return cell.with_transit(minutes).marked(cache_hit=hit)

    def sample_transit(
        self, origin: GeoPoint, cells: list[GridCell], schedule: ScheduleContext
    ) -> list[SampleCell]:
        """Resolve every sample cell with bounded concurrency, in input order."""
        if not self.transit_enabled:
            return [cell.with_transit(math.inf) for cell in cells]

        return run_with_concurrency(
            cells,
            self.settings.transit_concurrency,
            lambda cell: self.resolve_sample(origin, cell, schedule),
            on_error=lambda cell, _exc: cell.with_transit(
                math.inf, FailureReason.NETWORK_ERROR
            ).marked(cache_hit=False),
        )

    def build(self, body: Any, *, now: datetime | None = None) -> IsochroneResult:
        """Compute the heatmap for a raw request body or an IsochroneRequest.

        Raises:
            InvalidRequestError: If the request is rejected by validation.
        """
        settings = self.settings
        request = body if isinstance(body, IsochroneRequest) else parse_request(body, settings)
        schedule = resolve_schedule(
            request.departure_mode,
            request.day_type,
            request.time,
            now=now,
            timezone=settings.timezone,
            bucket_minutes=settings.schedule_bucket_minutes,
        )
        origin = GeoPoint(lat=request.origin.lat, lng=request.origin.lng)

        grid = generate_grid(origin, request.radius_meters, settings.grid_size_meters)
        sampled = pick_sample_cells(grid, settings.max_transit_samples)
        samples = self.sample_transit(origin, sampled, schedule)
        valid = [sample for sample in samples if sample.is_valid]

        estimates = [
            composite_cell(
                cell,
                interpolate_transit(
                    cell,
                    valid,
                    detour_factor=settings.walk_detour_factor,
                    speed_m_per_min=settings.walking_speed_m_per_min,
                    neighbors=settings.idw_neighbors,
                    power=settings.idw_power,
                    exact_match_meters=settings.exact_match_meters,
                ),
                detour_factor=settings.walk_detour_factor,
                speed_m_per_min=settings.walking_speed_m_per_min,
            )
            for cell in grid
        ]

        sample_stats = summarize_samples(samples)
        notes = [] if self.transit_enabled else [NOTE_TRANSIT_DISABLED]
        logger.info(
            "Isochrone at (%.5f, %.5f) r=%.0fm: %d cells, %d/%d valid samples, %d failures",
            origin.lat,
            origin.lng,
            request.radius_meters,
            len(grid),
            sample_stats.valid,
            sample_stats.sampled,
            sample_stats.failures,
        )

        return IsochroneResult(
            settings=IsochroneSettings(
                grid_size_meters=settings.grid_size_meters,
                radius_meters=request.radius_meters,
                max_minutes=request.max_minutes,
                max_transfer_walk_meters=settings.max_transfer_walk_meters,
                departure_mode=request.departure_mode,
                day_type=schedule.day_type,
                time=schedule.time,
                wait_multiplier=round_to(schedule.wait_multiplier, 2),
                transit_enabled=self.transit_enabled,
            ),
            stats=IsochroneStats(
                total_grid_cells=len(grid),
                sampled_transit_cells=len(sampled),
                valid_transit_samples=len(valid),
                cache_hits=sample_stats.cache_hits,
                cache_misses=sample_stats.cache_misses,
                api_failures=sample_stats.failures,
                failure_reasons=dict(sample_stats.failure_reasons),
                notes=notes,
            ),
            cells=[to_output_cell(estimate) for estimate in estimates],
        )
