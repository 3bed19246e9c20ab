"""Explicit indirection and dynamic-slot wrappers.

Python names are already references, so the comparison engine needs explicit
markers for the two wrapper kinds it distinguishes:

- ``Ref``: an optional, pointer-like reference.  ``Ref()`` (or ``Ref(None)``)
  is a nil reference.  ``weakref.ref`` objects are treated the same way; a
  dead weak reference is nil.
- ``Dynamic``: a slot whose concrete type varies at runtime.  The engine
  unwraps it and dispatches on the held value.

Both are mutable so that reference cycles can be expressed
(``r = Ref(); r.target = Ref(r)``).
"""

from __future__ import annotations

from typing import Any

__all__ = ["Dynamic", "Ref"]


class Ref:
    """Pointer-like reference to another value, or nil."""

    __slots__ = ("target",)

    def __init__(self, target: Any = None) -> None:
        self.target = target

    @property
    def is_nil(self) -> bool:
        return self.target is None

    def __repr__(self) -> str:
        # Nested refs may be cyclic; never recurse into the target's repr.
        if self.target is None:
            return "Ref(nil)"
        return f"Ref(<{type(self.target).__name__}>)"


class Dynamic:
    """A dynamically typed slot holding a concrete value."""

    __slots__ = ("value",)

    def __init__(self, value: Any = None) -> None:
        self.value = value

    def __repr__(self) -> str:
        return f"Dynamic(<{type(self.value).__name__}>)"
