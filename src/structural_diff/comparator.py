"""Comparator: orchestrator that wires configuration, field-plan cache and engine.

A ``Comparator`` is built once and may serve any number of independent
comparisons, including concurrent ones.  Its configuration is immutable; the
only state it owns is the field-plan cache, which is lock-guarded and never
affects results.  Every ``compare()`` call builds and returns a fresh diff
tree that the comparator does not keep.
"""

from __future__ import annotations

import logging
from typing import Any

from structural_diff.algorithm.config import ComparatorConfig
from structural_diff.algorithm.engine import DiffEngine
from structural_diff.cache import FieldPlanCache
from structural_diff.errors import DiffError
from structural_diff.tree.nodes import DiffNode

__all__ = ["Comparator"]

logger = logging.getLogger(__name__)


class Comparator:
    """Structural comparator for values of presumed-matching shape.

    Example::

        from dataclasses import dataclass, field
        from structural_diff import Comparator

        @dataclass
        class Item:
            id: int = field(metadata={"cmp": "id,id"})
            name: str = field(default="", metadata={"json": "n"})

        cmp = Comparator()
        root = cmp.compare([Item(1, "a")], [Item(1, "b")])
        root.child("1").child("n").status   # Status.MODIFIED
    """

    def __init__(self, config: ComparatorConfig | None = None) -> None:
        """Initialise the comparator.

        Args:
            config: Comparison configuration.  Defaults to ``ComparatorConfig()``.
        """
        self._config: ComparatorConfig = (
            config if config is not None else ComparatorConfig()
        )
        self._engine = DiffEngine(self._config)

    @property
    def config(self) -> ComparatorConfig:
        return self._config

    @property
    def plan_cache(self) -> FieldPlanCache:
        """The per-instance record field-plan cache."""
        return self._engine.plans

    def compare(self, left: Any, right: Any) -> DiffNode:
        """Compare ``left`` (old) with ``right`` (new) and return the diff tree.

        Args:
            left:  Old value (record, sequence, mapping, scalar, ref, or None).
            right: New value of the same shape.

        Returns:
            The root ``DiffNode``, keyed by ``config.root_key``.  An Equal root
            without non-Equal descendants means the inputs are structurally
            identical.

        Raises:
            TypeMismatchError: Incompatible or unsupported kinds met.
            CycleDetectedError: A reference cycle was entered twice on one branch.
            UnsupportedSequenceShapeError: A sequence mixes identity-bearing
                and plain elements.
            DuplicateKeyError: Two positions rendered to the same key.

            In every case ``err.tree`` holds the partial tree built so far.
        """
        logger.debug(
            "comparison started: %s vs %s",
            type(left).__qualname__,
            type(right).__qualname__,
        )
        try:
            root = self._engine.run(left, right)
        except DiffError as err:
            logger.debug("comparison aborted: %s", err)
            raise
        logger.debug("comparison finished: root %s", root.status)
        return root
