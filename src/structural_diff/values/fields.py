"""Field enumeration and reading for record (dataclass) values."""

from __future__ import annotations

import dataclasses
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

__all__ = ["FieldDescriptor", "read_field", "record_fields"]

_UNSET = object()


@dataclass(frozen=True, slots=True)
class FieldDescriptor:
    """Declared field of a record type.

    Attributes:
        name:     Declared attribute name.
        metadata: The dataclass field metadata (annotations live here).
        private:  True for underscore-prefixed names, the Python convention
                  for fields not meant to be read from outside their class.
    """

    name: str
    metadata: Mapping[str, Any]
    private: bool


def record_fields(record: Any) -> list[FieldDescriptor]:
    """Return the descriptors of a dataclass instance or type, in declaration order."""
    return [
        FieldDescriptor(
            name=f.name,
            metadata=f.metadata,
            private=f.name.startswith("_"),
        )
        for f in dataclasses.fields(record)
    ]


def read_field(record: Any, descriptor: FieldDescriptor) -> tuple[Any, bool]:
    """Read a field's value, including private ones.

    Returns:
        ``(value, True)`` on success; ``(None, False)`` when the attribute was
        never assigned (e.g. an ``init=False`` field without a default).
    """
    value = getattr(record, descriptor.name, _UNSET)
    if value is _UNSET:
        return None, False
    return value, True
