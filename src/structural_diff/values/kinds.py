"""Kind classification and indirection resolution for compared values.

``kind_of`` maps any Python value onto the closed ``Kind`` set the
dispatcher understands.  The classification order is significant:

1. ``None``                               -> ABSENT
2. ``bool`` / ``numpy.bool_``             -> BOOLEAN  (before INTEGER: bool subclasses int)
3. ``numbers.Integral`` (incl. numpy ints)-> INTEGER
4. ``str``                                -> TEXT
5. ``Ref`` / ``weakref.ref``              -> INDIRECTION
6. ``Dynamic``                            -> DYNAMIC
7. dataclass instance                     -> RECORD
8. ``Mapping``                            -> MAPPING
9. ``list`` / ``tuple`` / 1-D ndarray     -> SEQUENCE
10. anything else                         -> UNSUPPORTED
"""

from __future__ import annotations

import dataclasses
import numbers
import weakref
from collections.abc import Mapping
from enum import StrEnum, auto
from typing import Any

import numpy as np

from structural_diff.errors import CycleDetectedError
from structural_diff.values.refs import Dynamic, Ref

__all__ = [
    "Kind",
    "deref",
    "is_tracked",
    "kind_of",
    "native",
    "resolve_indirection",
    "sequence_items",
]


class Kind(StrEnum):
    """Coarse shape classification of a compared value."""

    ABSENT = auto()
    BOOLEAN = auto()
    INTEGER = auto()
    TEXT = auto()
    RECORD = auto()
    SEQUENCE = auto()
    MAPPING = auto()
    INDIRECTION = auto()
    DYNAMIC = auto()
    UNSUPPORTED = auto()


# Kinds whose values are containers or references and therefore can take part
# in a cycle.  The walk records their identities per branch.
_TRACKED = frozenset(
    {Kind.RECORD, Kind.SEQUENCE, Kind.MAPPING, Kind.INDIRECTION, Kind.DYNAMIC}
)


def kind_of(value: Any) -> Kind:
    """Return the Kind of ``value``."""
    if value is None:
        return Kind.ABSENT

    # CRITICAL: bool MUST be checked before int: bool subclasses int
    if isinstance(value, (bool, np.bool_)):
        return Kind.BOOLEAN

    if isinstance(value, numbers.Integral):
        return Kind.INTEGER

    if isinstance(value, str):
        return Kind.TEXT

    if isinstance(value, (Ref, weakref.ReferenceType)):
        return Kind.INDIRECTION

    if isinstance(value, Dynamic):
        return Kind.DYNAMIC

    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return Kind.RECORD

    if isinstance(value, Mapping):
        return Kind.MAPPING

    if isinstance(value, (list, tuple)):
        return Kind.SEQUENCE

    if isinstance(value, np.ndarray) and value.ndim == 1:
        return Kind.SEQUENCE

    return Kind.UNSUPPORTED


def is_tracked(value: Any) -> bool:
    """Return True if ``value`` is a container or reference that may form a cycle."""
    return kind_of(value) in _TRACKED


def deref(value: Any) -> Any:
    """Follow exactly one level of indirection or dynamic wrapping.

    Returns None for a nil ``Ref`` or a dead weak reference.  Values of any
    other kind are returned unchanged.
    """
    if isinstance(value, Ref):
        return value.target
    if isinstance(value, weakref.ReferenceType):
        return value()
    if isinstance(value, Dynamic):
        return value.value
    return value


def resolve_indirection(value: Any) -> Any:
    """Follow indirections and dynamic wrappers down to a concrete value.

    Used to peek inside a value (e.g. a sequence's first element) without
    committing to a full comparison.

    Raises:
        CycleDetectedError: If the chain revisits a wrapper it already passed.
    """
    seen: set[int] = set()
    while kind_of(value) in (Kind.INDIRECTION, Kind.DYNAMIC):
        if id(value) in seen:
            raise CycleDetectedError(())
        seen.add(id(value))
        value = deref(value)
    return value


def sequence_items(value: Any) -> list[Any]:
    """Return the elements of a SEQUENCE value (empty list for None)."""
    if value is None:
        return []
    return list(value)


def native(value: Any) -> Any:
    """Convert numpy scalars to their Python equivalents for leaf recording."""
    if isinstance(value, np.generic):
        return value.item()
    return value
