"""ODsay public transit route data source.

Public API:
  - client: endpoint, traffic/path type codes, query parameters
  - models: SearchResult, TransitPath, PathInfo, SubPath, Lane,
            RouteResult, FailureReason
  - routes: fetch_route, parse_response, select_best_path
"""

from isochrone_heatmap.datasources.odsay.client import (
    EXCLUDED_TRAFFIC_TYPES,
    ODSAY_BASE_URL,
    PathType,
    TrafficType,
    build_params,
)
from isochrone_heatmap.datasources.odsay.models import (
    FailureReason,
    Lane,
    PathInfo,
    RouteResult,
    SearchResult,
    SubPath,
    TransitPath,
)
from isochrone_heatmap.datasources.odsay.routes import (
    fetch_route,
    parse_response,
    select_best_path,
)

__all__ = [
    "EXCLUDED_TRAFFIC_TYPES",
    "ODSAY_BASE_URL",
    "FailureReason",
    "Lane",
    "PathInfo",
    "PathType",
    "RouteResult",
    "SearchResult",
    "SubPath",
    "TrafficType",
    "TransitPath",
    "build_params",
    "fetch_route",
    "parse_response",
    "select_best_path",
]
