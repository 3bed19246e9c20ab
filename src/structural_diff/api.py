"""Public API functions for structural-diff.

This module provides the user-facing functions ``compare`` and ``is_equal``.
Each call creates a fresh ``Comparator`` so that no state is shared between
calls.  Callers comparing many values under one configuration should build a
``Comparator`` once and reuse it.
"""

from __future__ import annotations

from typing import Any

from structural_diff.algorithm.config import ComparatorConfig
from structural_diff.comparator import Comparator
from structural_diff.result import summarize
from structural_diff.tree.nodes import DiffNode

__all__ = ["compare", "is_equal"]


def compare(
    left: Any,
    right: Any,
    config: ComparatorConfig | None = None,
) -> DiffNode:
    """Compare two values and return the root of their diff tree.

    Args:
        left:   Old value.
        right:  New value of the same shape.
        config: Comparison configuration. Defaults to ``ComparatorConfig()`` when None.

    Returns:
        The root ``DiffNode``.

    Raises:
        DiffError: On the first fatal error (see ``Comparator.compare``).
    """
    return Comparator(config=config).compare(left, right)


def is_equal(
    left: Any,
    right: Any,
    config: ComparatorConfig | None = None,
) -> bool:
    """Return True if the two values are structurally identical.

    Raises:
        DiffError: When the values cannot be compared at all.
    """
    return summarize(compare(left, right, config=config)).is_equal
