"""Unit tests for FieldPlanCache.

Tests cover:
- Cache hits (a plan is built once per record type)
- LRU eviction (silent eviction at max_size; evicted types rebuild on next access)
- Instance isolation (separate caches and comparators do not share state)
- Properties (max_size and curr_size return correct values)
- Concurrent access from several threads
"""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass

from structural_diff.cache import FieldPlanCache, RecordPlan
from structural_diff.comparator import Comparator

# ---------------------------------------------------------------------------
# Spy helper
# ---------------------------------------------------------------------------


@dataclass
class A:
    x: int = 0


@dataclass
class B:
    y: int = 0


def _make_spy_build() -> tuple[list[type], object]:
    """Return (call_log, build) where build records every type it plans."""
    call_log: list[type] = []

    def build(record_type: type) -> RecordPlan:
        call_log.append(record_type)
        return RecordPlan(fields=(), identity=None)

    return call_log, build


# ---------------------------------------------------------------------------
# Tests
# ---------------------------------------------------------------------------


class TestCacheHits:
    def test_built_once_per_type(self) -> None:
        call_log, build = _make_spy_build()
        cache = FieldPlanCache(build)  # type: ignore[arg-type]
        first = cache.get(A)
        second = cache.get(A)
        assert first is second
        assert call_log == [A]

    def test_distinct_types_built_separately(self) -> None:
        call_log, build = _make_spy_build()
        cache = FieldPlanCache(build)  # type: ignore[arg-type]
        cache.get(A)
        cache.get(B)
        assert call_log == [A, B]
        assert cache.curr_size == 2


class TestEviction:
    def test_least_recently_used_evicted(self) -> None:
        call_log, build = _make_spy_build()
        cache = FieldPlanCache(build, max_size=1)  # type: ignore[arg-type]
        cache.get(A)
        cache.get(B)
        assert cache.curr_size == 1
        cache.get(A)
        assert call_log == [A, B, A]

    def test_max_size_property(self) -> None:
        _, build = _make_spy_build()
        assert FieldPlanCache(build, max_size=7).max_size == 7  # type: ignore[arg-type]


class TestIsolation:
    def test_separate_caches(self) -> None:
        log_one, build_one = _make_spy_build()
        log_two, build_two = _make_spy_build()
        FieldPlanCache(build_one).get(A)  # type: ignore[arg-type]
        FieldPlanCache(build_two).get(A)  # type: ignore[arg-type]
        assert log_one == [A]
        assert log_two == [A]

    def test_comparators_do_not_share_plans(self) -> None:
        one, two = Comparator(), Comparator()
        one.compare(A(1), A(2))
        assert one.plan_cache.curr_size == 1
        assert two.plan_cache.curr_size == 0


class TestConcurrency:
    def test_parallel_gets_return_equal_plans(self) -> None:
        _, build = _make_spy_build()
        cache = FieldPlanCache(build)  # type: ignore[arg-type]
        with ThreadPoolExecutor(max_workers=8) as pool:
            plans = list(pool.map(lambda _: cache.get(A), range(64)))
        assert all(p == plans[0] for p in plans)
        assert cache.curr_size == 1
