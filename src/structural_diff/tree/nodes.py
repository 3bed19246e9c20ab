"""DiffNode dataclass and Status StrEnum for the structural diff tree.

One ``DiffNode`` exists per compared position in the walk.  Leaves carry the
old and new values for changed positions; composite nodes (records,
sequences, mappings) carry children keyed by their externally visible name.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
from enum import StrEnum, auto
from typing import Any

from structural_diff.errors import DuplicateKeyError

__all__ = ["DiffNode", "Status"]


class Status(StrEnum):
    """Comparison outcome of a single position.

    - EQUAL    -> "equal"    : both sides exist and are equal
    - CREATED  -> "created"  : only the new (right) side exists
    - DELETED  -> "deleted"  : only the old (left) side exists
    - MODIFIED -> "modified" : both sides exist but differ
    """

    EQUAL = auto()
    CREATED = auto()
    DELETED = auto()
    MODIFIED = auto()

    def inverted(self) -> Status:
        """Return the status seen from the opposite direction."""
        if self is Status.CREATED:
            return Status.DELETED
        if self is Status.DELETED:
            return Status.CREATED
        return self


@dataclass(slots=True)
class DiffNode:
    """A node in the structural diff tree.

    Attributes:
        key:       Externally visible name of this position (field name, index
                   or identity text, mapping key text, or the root key).
        status:    Outcome for this position (see Status).
        old_value: Left-side leaf value; set only on changed leaves.
        new_value: Right-side leaf value; set only on changed leaves.
        children:  Child nodes keyed by ``child.key``.  Must use
                   field(default_factory=dict) so each node owns its mapping.
    """

    key: str
    status: Status = Status.EQUAL
    old_value: Any = None
    new_value: Any = None
    children: dict[str, DiffNode] = field(default_factory=dict)

    @property
    def is_leaf(self) -> bool:
        return not self.children

    def add_child(self, node: DiffNode) -> DiffNode:
        """Attach ``node`` under its key and return it.

        Raises:
            DuplicateKeyError: If a child with the same key already exists.
        """
        if node.key in self.children:
            raise DuplicateKeyError(node.key, f"already present under {self.key!r}")
        self.children[node.key] = node
        return node

    def child(self, key: str) -> DiffNode | None:
        return self.children.get(key)

    def sort_children(self) -> None:
        """Reorder children by key text so output is reproducible."""
        self.children = dict(sorted(self.children.items()))

    def roll_up(self) -> None:
        """Derive a composite's status from its children.

        Only valid when both sides of the composite exist: the node becomes
        MODIFIED if any child is not EQUAL, else EQUAL.
        """
        changed = any(c.status is not Status.EQUAL for c in self.children.values())
        self.status = Status.MODIFIED if changed else Status.EQUAL

    # ------------------------------------------------------------------
    # Traversal
    # ------------------------------------------------------------------

    def walk(
        self, path: tuple[str, ...] = ()
    ) -> Iterator[tuple[tuple[str, ...], DiffNode]]:
        """Yield ``(path, node)`` pairs depth-first, this node first.

        The path of this node is ``path`` itself; children extend it with
        their key.
        """
        yield path, self
        for key, node in self.children.items():
            yield from node.walk((*path, key))

    def changes(self) -> Iterator[tuple[tuple[str, ...], DiffNode]]:
        """Yield every non-EQUAL leaf below (and including) this node."""
        for path, node in self.walk():
            if node.is_leaf and node.status is not Status.EQUAL:
                yield path, node

    def inverted(self) -> DiffNode:
        """Return a new tree describing the comparison with sides swapped.

        CREATED and DELETED trade places, MODIFIED leaves swap their values,
        EQUAL nodes are unchanged.
        """
        node = DiffNode(
            key=self.key,
            status=self.status.inverted(),
            old_value=self.new_value,
            new_value=self.old_value,
        )
        for key, child in self.children.items():
            node.children[key] = child.inverted()
        return node

    def to_dict(self) -> dict[str, Any]:
        """Return a plain-data view ``{key, status, old_value?, new_value?, children}``.

        Value entries are present only when the corresponding side was
        recorded on a changed leaf.  ``children`` is a list in key order.
        """
        out: dict[str, Any] = {"key": self.key, "status": str(self.status)}
        if self.status in (Status.DELETED, Status.MODIFIED) and self.is_leaf:
            out["old_value"] = self.old_value
        if self.status in (Status.CREATED, Status.MODIFIED) and self.is_leaf:
            out["new_value"] = self.new_value
        out["children"] = [c.to_dict() for c in self.children.values()]
        return out
