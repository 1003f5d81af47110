"""Isochrone Heatmap - walking and public transit travel-time grids.

Architecture::

    grid/          Geometry, circular grid generation, sample selection
    analysis/      Schedule model, IDW interpolation, walk/transit compositing
    datasources/   External APIs (ODsay transit route search)
    cache.py       In-memory route cache with TTL and size cap
    services/      Shared HTTP session with retry, bounded worker pool
    engine.py      Request validation and the end-to-end pipeline
    flows/         Prefect flow that computes a heatmap and saves it as JSON

Data flow: grid -> sampled cells -> (cache -> datasource) -> analysis -> result
"""

__version__ = "0.1.0"

from isochrone_heatmap.config import Settings, get_settings
from isochrone_heatmap.engine import IsochroneEngine
from isochrone_heatmap.schemas import InvalidRequestError, IsochroneResult

__all__ = [
    "InvalidRequestError",
    "IsochroneEngine",
    "IsochroneResult",
    "Settings",
    "__version__",
    "get_settings",
]
