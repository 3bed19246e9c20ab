"""Structural diff - hierarchical, annotation-driven comparison of Python values."""

from __future__ import annotations

import logging

from structural_diff.algorithm.config import ComparatorConfig
from structural_diff.api import compare, is_equal
from structural_diff.comparator import Comparator
from structural_diff.errors import (
    CycleDetectedError,
    DiffError,
    DuplicateKeyError,
    TypeMismatchError,
    UnsupportedSequenceShapeError,
)
from structural_diff.result import DiffSummary, summarize
from structural_diff.tree.nodes import DiffNode, Status
from structural_diff.values.kinds import Kind
from structural_diff.values.refs import Dynamic, Ref

logging.getLogger(__name__).addHandler(logging.NullHandler())

__version__: str = "0.1.0"
__all__: list[str] = [
    "Comparator",
    "ComparatorConfig",
    "CycleDetectedError",
    "DiffError",
    "DiffNode",
    "DiffSummary",
    "DuplicateKeyError",
    "Dynamic",
    "Kind",
    "Ref",
    "Status",
    "TypeMismatchError",
    "UnsupportedSequenceShapeError",
    "compare",
    "is_equal",
    "summarize",
]
