"""Route search response schema and lookup outcomes.

The provider returns loosely typed JSON (numbers sometimes as strings, fields
missing per path type). Each dataclass below names the fields we read;
``from_dict`` coerces them and turns anything non-numeric into ``None``.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any


def to_number(value: Any) -> float | None:
    """Coerce a JSON scalar to a finite float, or None."""
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return number if math.isfinite(number) else None


def to_int(value: Any) -> int | None:
    number = to_number(value)
    return int(number) if number is not None else None


def _as_list(value: Any) -> list[Any]:
    return value if isinstance(value, list) else []


def _as_dict(value: Any) -> dict[str, Any]:
    return value if isinstance(value, dict) else {}


# =============================================================================
# Response schema
# =============================================================================


@dataclass(frozen=True)
class Lane:
    """One alternative line serving a leg."""

    interval_time: float | None = None

    @classmethod
    def from_dict(cls, data: Any) -> Lane:
        return cls(interval_time=to_number(_as_dict(data).get("intervalTime")))


@dataclass(frozen=True)
class SubPath:
    """A single leg (walk, bus ride, subway ride, ...)."""

    traffic_type: int | None = None
    section_time: float | None = None
    distance: float | None = None
    interval_time: float | None = None
    lanes: tuple[Lane, ...] = ()

    @classmethod
    def from_dict(cls, data: Any) -> SubPath:
        d = _as_dict(data)
        return cls(
            traffic_type=to_int(d.get("trafficType")),
            section_time=to_number(d.get("sectionTime")),
            distance=to_number(d.get("distance")),
            interval_time=to_number(d.get("intervalTime")),
            lanes=tuple(Lane.from_dict(lane) for lane in _as_list(d.get("lane"))),
        )


@dataclass(frozen=True)
class PathInfo:
    """Path-level totals supplied by the provider."""

    total_time: float | None = None
    total_interval_time: float | None = None
    total_walk: float | None = None

    @classmethod
    def from_dict(cls, data: Any) -> PathInfo:
        d = _as_dict(data)
        return cls(
            total_time=to_number(d.get("totalTime")),
            total_interval_time=to_number(d.get("totalIntervalTime")),
            total_walk=to_number(d.get("totalWalk")),
        )


@dataclass(frozen=True)
class TransitPath:
    """One candidate itinerary."""

    path_type: int | None = None
    info: PathInfo = field(default_factory=PathInfo)
    sub_paths: tuple[SubPath, ...] = ()

    @classmethod
    def from_dict(cls, data: Any) -> TransitPath:
        d = _as_dict(data)
        return cls(
            path_type=to_int(d.get("pathType")),
            info=PathInfo.from_dict(d.get("info")),
            sub_paths=tuple(SubPath.from_dict(s) for s in _as_list(d.get("subPath"))),
        )


@dataclass(frozen=True)
class SearchResult:
    """The ``result`` object of a successful search."""

    search_type: int | None = None
    paths: tuple[TransitPath, ...] = ()

    @classmethod
    def from_dict(cls, data: Any) -> SearchResult:
        d = _as_dict(data)
        return cls(
            search_type=to_int(d.get("searchType")),
            paths=tuple(TransitPath.from_dict(p) for p in _as_list(d.get("path"))),
        )


# =============================================================================
# Lookup outcome
# =============================================================================


class FailureReason(StrEnum):
    """Why a lookup produced no usable route.

    HTTP failures use ``http_<status>`` and unknown provider errors carry the
    provider's own message; both are plain strings.
    """

    MISSING_KEY = "missing_key"
    TIMEOUT = "timeout"
    NETWORK_ERROR = "network_error"
    TOO_CLOSE = "too_close"
    NO_PATH = "no_path"
    OUTSIDE_CITY_NETWORK = "outside_city_network"
    NO_VALID_PATH = "no_valid_path"
    PROVIDER_ERROR = "provider_error"


@dataclass(frozen=True)
class RouteResult:
    """Either a usable route (``ok``) or a failure reason, never both."""

    ok: bool
    base_minutes: float = 0.0
    interval_minutes: float = 0.0
    reason: str | None = None

    @classmethod
    def success(cls, base_minutes: float, interval_minutes: float) -> RouteResult:
        return cls(ok=True, base_minutes=base_minutes, interval_minutes=max(0.0, interval_minutes))

    @classmethod
    def failure(cls, reason: str) -> RouteResult:
        return cls(ok=False, reason=str(reason))

    def score(self, headway_weight: float = 0.5) -> float:
        """Travel time plus the expected wait (a fraction of the headway)."""
        return self.base_minutes + headway_weight * self.interval_minutes
