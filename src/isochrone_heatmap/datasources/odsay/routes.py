"""Transit route lookup and best-path extraction.

``fetch_route`` performs one origin -> destination search and always returns
a RouteResult: provider errors, HTTP failures and timeouts become failure
values so a single bad sample never aborts a whole grid.
"""

from __future__ import annotations

import logging
import time
from typing import TYPE_CHECKING, Any

import requests

from isochrone_heatmap.datasources.odsay.client import (
    ACCEPTED_PATH_TYPES,
    ERROR_NO_PATH,
    ERROR_TOO_CLOSE,
    EXCLUDED_TRAFFIC_TYPES,
    ODSAY_BASE_URL,
    SCHEDULED_TRAFFIC_TYPES,
    TrafficType,
    build_params,
)
from isochrone_heatmap.datasources.odsay.models import (
    FailureReason,
    Lane,
    RouteResult,
    SearchResult,
    SubPath,
    TransitPath,
    to_int,
)
from isochrone_heatmap.services.http import session as default_session

if TYPE_CHECKING:
    from isochrone_heatmap.grid.models import GeoPoint

logger = logging.getLogger(__name__)

DEFAULT_MAX_WALK_METERS = 500
DEFAULT_HEADWAY_WEIGHT = 0.5


# =============================================================================
# Best-path extraction (pure)
# =============================================================================


def has_excluded_leg(path: TransitPath) -> bool:
    """Whether any leg uses an intercity mode we do not model."""
    return any(leg.traffic_type in EXCLUDED_TRAFFIC_TYPES for leg in path.sub_paths)


def has_long_walk(path: TransitPath, max_walk_meters: float) -> bool:
    """Whether the path's total walk or any single walking leg is too long."""
    if path.info.total_walk is not None and path.info.total_walk > max_walk_meters:
        return True
    return any(
        leg.traffic_type == TrafficType.WALK
        and leg.distance is not None
        and leg.distance > max_walk_meters
        for leg in path.sub_paths
    )


def base_minutes(path: TransitPath) -> float | None:
    """Door-to-door minutes: provider total, else the sum of leg times."""
    if path.info.total_time is not None:
        return path.info.total_time
    times = [leg.section_time for leg in path.sub_paths if leg.section_time is not None]
    return sum(times) if times else None


def lane_interval(lanes: tuple[Lane, ...]) -> float | None:
    """Shortest positive headway among a leg's alternative lines."""
    intervals = [
        lane.interval_time
        for lane in lanes
        if lane.interval_time is not None and lane.interval_time > 0
    ]
    return min(intervals) if intervals else None


def leg_interval(leg: SubPath) -> float | None:
    if leg.interval_time is not None and leg.interval_time > 0:
        return leg.interval_time
    return lane_interval(leg.lanes)


def interval_minutes(path: TransitPath) -> float:
    """Total headway: provider total if positive, else summed over bus/subway legs."""
    total = path.info.total_interval_time
    if total is not None and total > 0:
        return total

    summed = 0.0
    for leg in path.sub_paths:
        if leg.traffic_type not in SCHEDULED_TRAFFIC_TYPES:
            continue
        interval = leg_interval(leg)
        if interval is not None:
            summed += interval
    return summed


def select_best_path(
    result: SearchResult,
    *,
    max_walk_meters: float = DEFAULT_MAX_WALK_METERS,
    headway_weight: float = DEFAULT_HEADWAY_WEIGHT,
) -> RouteResult:
    """Pick the usable candidate with the lowest ``base + weight * interval``.

    Candidates are dropped when their path type is not a city transit type,
    when they use an intercity leg, when they walk more than
    ``max_walk_meters`` (in total or in any one leg) or when no travel time
    can be read.
    """
    if result.search_type is not None and result.search_type != 0:
        return RouteResult.failure(FailureReason.OUTSIDE_CITY_NETWORK)

    best: RouteResult | None = None
    for path in result.paths:
        if path.path_type is not None and path.path_type not in ACCEPTED_PATH_TYPES:
            continue
        if has_excluded_leg(path) or has_long_walk(path, max_walk_meters):
            continue

        base = base_minutes(path)
        if base is None:
            continue

        candidate = RouteResult.success(base, interval_minutes(path))
        if best is None or candidate.score(headway_weight) < best.score(headway_weight):
            best = candidate

    if best is None:
        return RouteResult.failure(FailureReason.NO_VALID_PATH)
    return best


# =============================================================================
# Provider call
# =============================================================================


def parse_error(error: Any) -> RouteResult:
    """Map a provider ``error`` payload (object or list of objects) to a failure."""
    if isinstance(error, list):
        error = error[0] if error else {}
    if not isinstance(error, dict):
        return RouteResult.failure(FailureReason.PROVIDER_ERROR)

    code = to_int(error.get("code"))
    if code == ERROR_TOO_CLOSE:
        return RouteResult.failure(FailureReason.TOO_CLOSE)
    if code == ERROR_NO_PATH:
        return RouteResult.failure(FailureReason.NO_PATH)
    message = error.get("message") or error.get("msg")
    return RouteResult.failure(str(message) if message else FailureReason.PROVIDER_ERROR)


def parse_response(
    payload: Any,
    *,
    max_walk_meters: float = DEFAULT_MAX_WALK_METERS,
    headway_weight: float = DEFAULT_HEADWAY_WEIGHT,
) -> RouteResult:
    """Turn a decoded provider response into a RouteResult."""
    if not isinstance(payload, dict):
        return RouteResult.failure(FailureReason.PROVIDER_ERROR)
    if payload.get("error"):
        return parse_error(payload["error"])
    return select_best_path(
        SearchResult.from_dict(payload.get("result")),
        max_walk_meters=max_walk_meters,
        headway_weight=headway_weight,
    )


def fetch_route(
    origin: GeoPoint,
    destination: GeoPoint,
    *,
    api_key: str,
    timeout: float = 10,
    max_walk_meters: float = DEFAULT_MAX_WALK_METERS,
    headway_weight: float = DEFAULT_HEADWAY_WEIGHT,
    session: requests.Session | None = None,
) -> RouteResult:
    """
    Search public transit routes from ``origin`` to ``destination``.

    Args:
        origin: Start point.
        destination: End point.
        api_key: ODsay API key; empty means no request is made.
        timeout: Deadline in seconds for the whole call; a slower answer
            counts as a timeout.
        max_walk_meters: Walking limit used to reject candidates.
        headway_weight: Fraction of the headway counted as expected wait.
        session: HTTP session (defaults to the shared single-attempt session).

    Returns:
        The best usable route, or a failure with its reason.
    """
    if not api_key:
        return RouteResult.failure(FailureReason.MISSING_KEY)

    params = build_params(origin.lat, origin.lng, destination.lat, destination.lng, api_key)
    http = session or default_session
    started = time.monotonic()
    try:
        resp = http.get(ODSAY_BASE_URL, params=params, timeout=timeout)
    except requests.Timeout:
        return RouteResult.failure(FailureReason.TIMEOUT)
    except requests.RequestException as exc:
        logger.debug("Transit lookup failed: %s", exc)
        return RouteResult.failure(FailureReason.NETWORK_ERROR)

    if time.monotonic() - started > timeout:
        logger.debug("Transit lookup exceeded %ss", timeout)
        return RouteResult.failure(FailureReason.TIMEOUT)

    if not resp.ok:
        return RouteResult.failure(f"http_{resp.status_code}")

    try:
        payload = resp.json()
    except ValueError:
        return RouteResult.failure(FailureReason.NETWORK_ERROR)

    return parse_response(payload, max_walk_meters=max_walk_meters, headway_weight=headway_weight)
