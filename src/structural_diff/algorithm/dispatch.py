"""Kind-pair dispatch rule for the comparison engine.

A pair of kinds is routed to a comparator when either side is ABSENT or both
sides share one recognised kind.  ABSENT paired with a recognised kind always
routes to that kind's comparator, so one-sided presence is reported as
Created/Deleted instead of failing.  Any other pair is a type mismatch.

The rule is mutually exclusive over the recognised kinds, so the order in
which the engine's table lists its comparators never affects the result.
"""

from __future__ import annotations

from structural_diff.values.kinds import Kind

__all__ = ["RECOGNISED_KINDS", "select_kind"]

RECOGNISED_KINDS = frozenset(
    {
        Kind.BOOLEAN,
        Kind.INTEGER,
        Kind.TEXT,
        Kind.RECORD,
        Kind.SEQUENCE,
        Kind.MAPPING,
        Kind.INDIRECTION,
        Kind.DYNAMIC,
    }
)


def select_kind(left: Kind, right: Kind) -> Kind | None:
    """Return the kind whose comparator handles the pair, or None on mismatch.

    Returns ``Kind.ABSENT`` when both sides are absent.
    """
    if left is Kind.ABSENT and right is Kind.ABSENT:
        return Kind.ABSENT
    if left is Kind.ABSENT:
        return right if right in RECOGNISED_KINDS else None
    if right is Kind.ABSENT:
        return left if left in RECOGNISED_KINDS else None
    if left is right and left in RECOGNISED_KINDS:
        return left
    return None
