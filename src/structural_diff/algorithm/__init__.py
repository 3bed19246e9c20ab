"""algorithm subpackage: public API for the comparison engine.

Provides the recursive engine, its configuration, the kind-pair dispatch rule
and sequence alignment.  Import from this module (not from sub-modules
directly) to stay on the stable public interface.

Example::

    from structural_diff.algorithm import ComparatorConfig, DiffEngine

    engine = DiffEngine(ComparatorConfig(respect_sequence_order=True))
    root = engine.run([1, 2], [1, 3])
    # root.child("1").status == "modified"
"""

from __future__ import annotations

from structural_diff.algorithm.alignment import AlignmentMode
from structural_diff.algorithm.config import ComparatorConfig
from structural_diff.algorithm.dispatch import select_kind
from structural_diff.algorithm.engine import DiffEngine

__all__ = ["AlignmentMode", "ComparatorConfig", "DiffEngine", "select_kind"]
