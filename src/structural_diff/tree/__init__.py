"""Tree subpackage for the structural diff output.

Re-exports the public API for the tree module:
- DiffNode: dataclass representing one compared position
- Status: StrEnum of the four comparison outcomes
"""

from structural_diff.tree.nodes import DiffNode, Status

__all__ = ["DiffNode", "Status"]
