"""Sequence alignment: mode selection and identity indexing.

Two alignment modes exist for a pair of sequences:

- POSITIONAL: element ``i`` of one side is compared with element ``i`` of
  the other; surplus elements are Created or Deleted.
- IDENTITY:   every element is a record carrying an identity field; both
  sides are indexed by the identity value's text and compared key by key, so
  reordering, insertion and removal are reported per identity rather than as
  positional rewrites.

The mode is chosen once per sequence pair, before iterating, from the first
element of each non-empty side.  Every other element must then agree with the
chosen mode; a sequence mixing identity-bearing and plain elements raises
``UnsupportedSequenceShapeError``.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from enum import StrEnum, auto
from typing import Any

from structural_diff.cache import FieldPlan
from structural_diff.errors import DuplicateKeyError, UnsupportedSequenceShapeError
from structural_diff.values.fields import read_field
from structural_diff.values.kinds import native, resolve_indirection

__all__ = ["AlignmentMode", "IdentityProbe", "index_by_identity", "select_mode"]

# Returns (resolved record, identity field) for an identity-bearing element,
# None for any other element.
IdentityProbe = Callable[[Any], tuple[Any, FieldPlan] | None]


class AlignmentMode(StrEnum):
    """How the elements of two sequences are paired up."""

    POSITIONAL = auto()
    IDENTITY = auto()


def select_mode(
    left: Sequence[Any],
    right: Sequence[Any],
    probe: IdentityProbe,
    respect_order: bool,
) -> AlignmentMode:
    """Choose the alignment mode for a sequence pair.

    Args:
        left:          Elements of the old side (empty if absent).
        right:         Elements of the new side (empty if absent).
        probe:         Identity probe for a single element.
        respect_order: When True the result is always POSITIONAL and elements
                       are not inspected.

    Returns:
        IDENTITY if the first element of either non-empty side is an
        identity-bearing record, else POSITIONAL.

    Raises:
        UnsupportedSequenceShapeError: If any element disagrees with the mode
            chosen from the first elements.
    """
    if respect_order:
        return AlignmentMode.POSITIONAL

    by_identity = any(probe(items[0]) is not None for items in (left, right) if items)
    mode = AlignmentMode.IDENTITY if by_identity else AlignmentMode.POSITIONAL

    for side, items in (("old", left), ("new", right)):
        for index, item in enumerate(items):
            if (probe(item) is not None) != by_identity:
                expected = "an identity-bearing record" if by_identity else "a plain element"
                msg = (
                    f"element {index} of the {side} sequence is not {expected}; "
                    f"sequence elements must agree on identity fields"
                )
                raise UnsupportedSequenceShapeError(msg)

    return mode


def index_by_identity(
    items: Sequence[Any],
    probe: IdentityProbe,
    side: str,
) -> dict[str, Any]:
    """Map each element's identity text to the element itself.

    The identity value is read from the resolved record (private identity
    fields included), resolved through any indirection, and rendered with
    ``str()``.  The original (possibly wrapped) element is stored.

    Raises:
        UnsupportedSequenceShapeError: If an element carries no identity.
        DuplicateKeyError: If two elements share an identity text.
    """
    indexed: dict[str, Any] = {}
    for index, item in enumerate(items):
        probed = probe(item)
        if probed is None:
            msg = f"element {index} of the {side} sequence has no identity field"
            raise UnsupportedSequenceShapeError(msg)
        record, identity = probed
        value, _ = read_field(record, identity.descriptor)
        key = str(native(resolve_indirection(value)))
        if key in indexed:
            raise DuplicateKeyError(
                key, f"identity value appears twice in the {side} sequence"
            )
        indexed[key] = item
    return indexed
