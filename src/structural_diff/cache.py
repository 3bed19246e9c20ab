"""FieldPlanCache: thread-safe LRU cache of resolved record field plans.

Resolving a record type's fields means walking its dataclass fields and
parsing every annotation.  The result depends only on the type and the
comparator's configuration, so each ``Comparator`` keeps one plan per record
type in its own ``LRUCache``.  Two comparators never share a cache.

A comparator may serve concurrent comparisons, so every cache access is
guarded by a lock.  Plans are immutable once built.

Example::

    from structural_diff.cache import FieldPlanCache

    cache = FieldPlanCache(build=lambda record_type: plan_for(record_type), max_size=64)
    plan = cache.get(MyRecord)        # built on first access
    plan_again = cache.get(MyRecord)  # served from memory
"""

from __future__ import annotations

import threading
from collections.abc import Callable
from dataclasses import dataclass

from cachetools import LRUCache

from structural_diff.values.fields import FieldDescriptor

__all__ = ["FieldPlan", "FieldPlanCache", "RecordPlan"]


@dataclass(frozen=True, slots=True)
class FieldPlan:
    """One record field as the engine compares it.

    Attributes:
        key:        Externally visible name (tag-resolved, or declared name).
        descriptor: The underlying field descriptor.
        identity:   True if the field carries the identity option.
    """

    key: str
    descriptor: FieldDescriptor
    identity: bool


@dataclass(frozen=True, slots=True)
class RecordPlan:
    """Resolved plan for one record type.

    Attributes:
        fields:   Fields to compare, in declaration order.  Private fields are
                  already dropped when the configuration skips them.
        identity: The first field carrying the identity option, if any.  It
                  is looked up over all fields, private ones included.
    """

    fields: tuple[FieldPlan, ...]
    identity: FieldPlan | None


class FieldPlanCache:
    """LRU-backed, lock-guarded cache mapping record types to their plans.

    Args:
        build: Callable producing the plan for a record type on a miss.
        max_size: Maximum number of record types held.  When exceeded, the
            least-recently-used plan is silently evicted.
    """

    def __init__(self, build: Callable[[type], RecordPlan], max_size: int = 256) -> None:
        self._build = build
        self._cache: LRUCache[type, RecordPlan] = LRUCache(maxsize=max_size)
        self._lock = threading.Lock()

    @property
    def max_size(self) -> int:
        """The maximum number of plans this cache can hold."""
        return int(self._cache.maxsize)

    @property
    def curr_size(self) -> int:
        """The current number of plans stored in the cache."""
        with self._lock:
            return int(self._cache.currsize)

    def get(self, record_type: type) -> RecordPlan:
        """Return the plan for ``record_type``, building it on first access.

        The build runs outside the lock; if two threads miss at once both
        build and the first stored plan wins.  Plans for one type are equal,
        so this only costs duplicate work.
        """
        with self._lock:
            plan = self._cache.get(record_type)
        if plan is not None:
            return plan

        plan = self._build(record_type)
        with self._lock:
            return self._cache.setdefault(record_type, plan)
