"""In-memory route cache with TTL and a size cap.

Entries expire ``ttl_seconds`` after they were written; an expired entry is
dropped when it is read. When a write pushes the cache past ``max_size`` the
oldest-inserted entry is evicted. Reads never refresh an entry's position, so
this is insertion-order eviction rather than LRU.

One instance is shared by every request in the process. Entries are immutable
and replaced whole, so a single lock around the dict is all the coordination
concurrent workers need.
"""

from __future__ import annotations

import threading
import time
from dataclasses import dataclass
from typing import TYPE_CHECKING

from isochrone_heatmap.grid.geometry import round_to

if TYPE_CHECKING:
    from collections.abc import Callable

    from isochrone_heatmap.analysis.schedule import DayType
    from isochrone_heatmap.datasources.odsay.models import RouteResult
    from isochrone_heatmap.grid.models import GeoPoint

KEY_DECIMALS = 5  # ~1 m, well under the grid step

CacheKey = tuple[float, float, float, float, str, int]


@dataclass(frozen=True)
class RouteQuery:
    """Everything that identifies one transit lookup."""

    origin: GeoPoint
    destination: GeoPoint
    day_type: DayType
    time_bucket: int

    def cache_key(self) -> CacheKey:
        """Rounded coordinates plus schedule bucket."""
        return (
            round_to(self.origin.lat, KEY_DECIMALS),
            round_to(self.origin.lng, KEY_DECIMALS),
            round_to(self.destination.lat, KEY_DECIMALS),
            round_to(self.destination.lng, KEY_DECIMALS),
            str(self.day_type),
            self.time_bucket,
        )


@dataclass(frozen=True)
class CacheEntry:
    value: RouteResult
    created_at: float


class RouteCache:
    """TTL + max-size cache of RouteResult keyed by RouteQuery."""

    def __init__(
        self,
        ttl_seconds: float = 600,
        max_size: int = 5000,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if max_size < 1:
            msg = f"max_size must be at least 1, got {max_size}"
            raise ValueError(msg)
        self.ttl_seconds = ttl_seconds
        self.max_size = max_size
        self._clock = clock
        self._entries: dict[CacheKey, CacheEntry] = {}
        self._lock = threading.Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def get(self, query: RouteQuery) -> RouteResult | None:
        """Return the cached result, or None if absent or expired."""
        key = query.cache_key()
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            if self._clock() - entry.created_at > self.ttl_seconds:
                del self._entries[key]
                return None
            return entry.value

    def put(self, query: RouteQuery, value: RouteResult) -> None:
        """Store ``value``, evicting the oldest entry if over capacity."""
        key = query.cache_key()
        with self._lock:
            # An overwritten key moves to the newest slot
            self._entries.pop(key, None)
            self._entries[key] = CacheEntry(value=value, created_at=self._clock())
            if len(self._entries) > self.max_size:
                oldest = next(iter(self._entries))
                del self._entries[oldest]

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()
