"""Fixed-size worker pool over a shared cursor.

``run_with_concurrency`` starts ``min(limit, len(items))`` threads. Each one
claims the next unprocessed index from a shared counter, runs the worker on
that item and stores the result in the matching slot, so the output order is
the input order whatever the completion order. The call returns once every
slot is filled; nothing partial is ever exposed.
"""

from __future__ import annotations

import itertools
import logging
import threading
from concurrent.futures import ThreadPoolExecutor
from typing import TYPE_CHECKING, TypeVar

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence

logger = logging.getLogger(__name__)

T = TypeVar("T")
R = TypeVar("R")


def run_with_concurrency(
    items: Sequence[T],
    limit: int,
    worker: Callable[[T], R],
    *,
    on_error: Callable[[T, Exception], R] | None = None,
) -> list[R]:
    """Apply ``worker`` to every item with at most ``limit`` running at once.

    Args:
        items: Inputs, processed each exactly once.
        limit: Maximum concurrent workers (values below 1 act as 1).
        worker: Blocking function run on a pool thread.
        on_error: Turns a worker exception into a result for that item.
            Without it the first exception is re-raised after all workers
            have stopped.

    Returns:
        Results in input order.
    """
    if not items:
        return []

    size = max(1, min(limit, len(items)))
    results: list[R | None] = [None] * len(items)
    cursor = itertools.count()
    cursor_lock = threading.Lock()
    errors: list[Exception] = []

    def claim() -> int:
        with cursor_lock:
            return next(cursor)

    def drain() -> None:
        while True:
            index = claim()
            if index >= len(items) or errors:
                return
            item = items[index]
            try:
                results[index] = worker(item)
            except Exception as exc:
                if on_error is None:
                    errors.append(exc)
                    return
                logger.warning("Worker failed on item %d", index, exc_info=True)
                results[index] = on_error(item, exc)

    with ThreadPoolExecutor(max_workers=size, thread_name_prefix="isochrone-worker") as pool:
        futures = [pool.submit(drain) for _ in range(size)]
    for future in futures:
        future.result()

    if errors:
        raise errors[0]
    return results  # type: ignore[return-value]
