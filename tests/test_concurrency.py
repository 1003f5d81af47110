"""Tests for the bounded worker pool."""

from __future__ import annotations

import random
import threading
import time
from collections import Counter

import pytest

from isochrone_heatmap.services.concurrency import run_with_concurrency


class TestRunWithConcurrency:
    """Ordering, completeness and concurrency bounds."""

    def test_empty(self) -> None:
        assert run_with_concurrency([], 5, lambda x: x) == []

    @pytest.mark.parametrize(("n", "limit"), [(1, 1), (10, 1), (10, 3), (10, 10), (25, 5)])
    def test_preserves_order_with_random_latency(self, n: int, limit: int) -> None:
        rng = random.Random(n * 31 + limit)
        delays = [rng.uniform(0, 0.01) for _ in range(n)]

        def worker(i: int) -> int:
            time.sleep(delays[i])
            return i * i

        assert run_with_concurrency(list(range(n)), limit, worker) == [i * i for i in range(n)]

    def test_each_item_processed_once(self) -> None:
        seen: Counter[int] = Counter()
        lock = threading.Lock()

        def worker(i: int) -> int:
            with lock:
                seen[i] += 1
            return i

        run_with_concurrency(list(range(40)), 6, worker)
        assert seen == Counter(range(40))

    def test_never_exceeds_limit(self) -> None:
        active = 0
        peak = 0
        lock = threading.Lock()

        def worker(i: int) -> int:
            nonlocal active, peak
            with lock:
                active += 1
                peak = max(peak, active)
            time.sleep(0.005)
            with lock:
                active -= 1
            return i

        run_with_concurrency(list(range(30)), 3, worker)
        assert 1 <= peak <= 3

    def test_limit_larger_than_items(self) -> None:
        assert run_with_concurrency([1, 2], 10, lambda x: x + 1) == [2, 3]

    def test_limit_below_one_runs_serially(self) -> None:
        assert run_with_concurrency([1, 2, 3], 0, lambda x: -x) == [-1, -2, -3]


class TestWorkerErrors:
    """Failures are converted per item or re-raised after the pool stops."""

    def test_on_error_converts_failure(self) -> None:
        def worker(i: int) -> str:
            if i == 2:
                raise RuntimeError("boom")
            return f"ok-{i}"

        result = run_with_concurrency(
            [0, 1, 2, 3], 2, worker, on_error=lambda item, exc: f"failed-{item}:{exc}"
        )
        assert result == ["ok-0", "ok-1", "failed-2:boom", "ok-3"]

    def test_reraises_without_on_error(self) -> None:
        def worker(i: int) -> int:
            if i == 5:
                raise ValueError("bad item")
            return i

        with pytest.raises(ValueError, match="bad item"):
            run_with_concurrency(list(range(10)), 3, worker)
