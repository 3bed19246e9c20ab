"""Exception hierarchy raised by the structural comparison walk.

Every error is fatal for the walk: the first one raised aborts the traversal
and propagates to the caller of ``Comparator.compare()``.  The comparator
attaches whatever part of the diff tree was already built to the ``tree``
attribute before re-raising, so callers can inspect it for diagnostics.  The
partial tree is not guaranteed to be complete.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from structural_diff.tree.nodes import DiffNode
    from structural_diff.values.kinds import Kind

__all__ = [
    "CycleDetectedError",
    "DiffError",
    "DuplicateKeyError",
    "TypeMismatchError",
    "UnsupportedSequenceShapeError",
]


class DiffError(Exception):
    """Base class for all structural comparison failures.

    Attributes:
        tree: Root of the partially built diff tree, or None until the
            comparator fills it in on the way out.
    """

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.tree: DiffNode | None = None


class TypeMismatchError(DiffError, TypeError):
    """Two values of concrete but incompatible kinds met at the same position.

    Also raised when either side is of a kind the dispatcher does not
    recognise, and when two records of different dataclass types are compared.
    """

    def __init__(
        self,
        left_kind: Kind,
        right_kind: Kind,
        left_type: str = "",
        right_type: str = "",
    ) -> None:
        self.left_kind = left_kind
        self.right_kind = right_kind
        self.left_type = left_type
        self.right_type = right_type
        detail = ""
        if left_type or right_type:
            detail = f" ({left_type} vs {right_type})"
        super().__init__(f"type mismatch: {left_kind} vs {right_kind}{detail}")


class CycleDetectedError(DiffError):
    """A reference chain revisited an already entered pair on the same branch."""

    def __init__(self, path: tuple[str, ...]) -> None:
        self.path = path
        where = "/".join(path) or "<root>"
        super().__init__(f"cycle detected at {where}")


class UnsupportedSequenceShapeError(DiffError, ValueError):
    """Elements of a sequence disagree on whether they carry an identity field."""


class DuplicateKeyError(DiffError, ValueError):
    """Two distinct positions rendered to the same key at one tree depth.

    Raised for duplicate identity values inside one side of an
    identity-aligned sequence, for mapping keys whose text forms collide, and
    for record fields whose tags resolve to the same name.
    """

    def __init__(self, key: str, reason: str) -> None:
        self.key = key
        super().__init__(f"duplicate key {key!r}: {reason}")
