"""
Shared HTTP client for transit lookups.

Provides a pre-configured ``requests.Session`` with a pooled adapter sized for
the lookup fan-out and a default timeout on every request. Each lookup gets a
single attempt: a caller's timeout must bound the whole call, and a sample
that fails simply falls back to walking time.

Usage::

    from isochrone_heatmap.services.http import session

    resp = session.get("https://api.example.com/v1/data", timeout=10)
    resp.raise_for_status()
"""

from __future__ import annotations

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from isochrone_heatmap import __version__

#: Default retry strategy: one attempt. ``read=False`` re-raises read timeouts
#: as-is so they surface as ``timeout`` rather than a connection error.
DEFAULT_RETRY = Retry(
    total=0,
    read=False,
    raise_on_status=False,  # caller maps the final status to http_<status>
)

DEFAULT_TIMEOUT = 10  # seconds

#: Enough pooled connections for the transit fan-out.
POOL_SIZE = 16


def create_session(
    retry: Retry | None = None,
    timeout: float = DEFAULT_TIMEOUT,
) -> requests.Session:
    """
    Build a ``requests.Session`` with retry adapter mounted.

    Args:
        retry: Custom retry strategy (defaults to ``DEFAULT_RETRY``).
        timeout: Default timeout applied to every request.
    """
    s = requests.Session()
    adapter = HTTPAdapter(
        max_retries=retry or DEFAULT_RETRY,
        pool_connections=POOL_SIZE,
        pool_maxsize=POOL_SIZE,
    )
    s.mount("https://", adapter)
    s.mount("http://", adapter)
    s.headers["User-Agent"] = f"isochrone-heatmap/{__version__}"

    # Inject a default timeout so no call can hang a worker forever.
    _original_send = s.send

    def _send_with_timeout(
        prepared: requests.PreparedRequest, **kwargs: object
    ) -> requests.Response:
        kwargs.setdefault("timeout", timeout)
        return _original_send(prepared, **kwargs)  # type: ignore[arg-type]

    s.send = _send_with_timeout  # type: ignore[method-assign]
    return s


#: Module-level session, shared by all worker threads.
session: requests.Session = create_session()
