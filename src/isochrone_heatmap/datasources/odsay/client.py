"""ODsay public transit API constants and shared configuration.

API docs: https://lab.odsay.com/guide/releaseReference#searchPubTransPathT
Requires an API key: ODSAY_API_KEY env var.
"""

from __future__ import annotations

from enum import IntEnum

ODSAY_BASE_URL = "https://api.odsay.com/v1/api/searchPubTransPathT"

# Fixed search parameters: all path types, sorted by recommendation
SEARCH_PARAMS = {
    "SearchType": "0",
    "SearchPathType": "0",
    "OPT": "0",
}

# Provider error codes that are per-query outcomes, not faults
ERROR_TOO_CLOSE = -98  # origin and destination within ~700 m
ERROR_NO_PATH = -99


class TrafficType(IntEnum):
    """Transport mode of a single leg (``subPath[].trafficType``)."""

    SUBWAY = 1
    BUS = 2
    WALK = 3
    TRAIN = 4
    EXPRESS_BUS = 5
    INTERCITY_BUS = 6
    AIR = 7


class PathType(IntEnum):
    """Overall kind of a candidate path (``path[].pathType``)."""

    SUBWAY = 1
    BUS = 2
    BUS_AND_SUBWAY = 3


#: Intercity modes the heatmap does not model
EXCLUDED_TRAFFIC_TYPES = frozenset(
    {TrafficType.TRAIN, TrafficType.EXPRESS_BUS, TrafficType.INTERCITY_BUS, TrafficType.AIR}
)

#: Legs that contribute a headway wait
SCHEDULED_TRAFFIC_TYPES = frozenset({TrafficType.SUBWAY, TrafficType.BUS})

ACCEPTED_PATH_TYPES = frozenset(PathType)


def build_params(
    origin_lat: float,
    origin_lng: float,
    dest_lat: float,
    dest_lng: float,
    api_key: str,
) -> dict[str, str]:
    """Query-string parameters for one origin -> destination search."""
    return {
        "SX": str(origin_lng),
        "SY": str(origin_lat),
        "EX": str(dest_lng),
        "EY": str(dest_lat),
        **SEARCH_PARAMS,
        "apiKey": api_key,
    }
