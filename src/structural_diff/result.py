"""DiffSummary dataclass: a flat overview of a diff tree.

This module provides the summary type returned by ``summarize()`` calls.
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass

from structural_diff.tree.nodes import DiffNode, Status

__all__ = ["DiffSummary", "summarize"]


@dataclass(frozen=True, slots=True)
class DiffSummary:
    """Flat overview of a diff tree.

    Attributes:
        created: Number of changed leaves present only on the new side.
        deleted: Number of changed leaves present only on the old side.
        modified: Number of leaves present on both sides with different values.
        changed_paths: ``/``-joined paths (root key excluded) of every changed
            leaf, in tree order.
    """

    created: int
    deleted: int
    modified: int
    changed_paths: list[str]

    @property
    def total(self) -> int:
        return self.created + self.deleted + self.modified

    @property
    def is_equal(self) -> bool:
        return self.total == 0


def summarize(root: DiffNode) -> DiffSummary:
    """Count the changed leaves of ``root`` and list their paths."""
    counts: Counter[Status] = Counter()
    paths: list[str] = []
    for path, node in root.changes():
        counts[node.status] += 1
        paths.append("/".join(path))
    return DiffSummary(
        created=counts[Status.CREATED],
        deleted=counts[Status.DELETED],
        modified=counts[Status.MODIFIED],
        changed_paths=paths,
    )
