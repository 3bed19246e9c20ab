"""ComparatorConfig: immutable configuration for structural comparison.

A single ``ComparatorConfig`` may be shared by any number of comparators and
concurrent comparisons; it is frozen and validated on construction.
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from typing import Any

__all__ = [
    "DEFAULT_FALLBACK_TAG_NAMES",
    "DEFAULT_ID_OPTION",
    "DEFAULT_ROOT_KEY",
    "DEFAULT_TAG_NAME",
    "ComparatorConfig",
]

DEFAULT_TAG_NAME = "cmp"
DEFAULT_FALLBACK_TAG_NAMES = ("json", "yaml")
DEFAULT_ID_OPTION = "id"
DEFAULT_ROOT_KEY = "$"


@dataclass(frozen=True, slots=True)
class ComparatorConfig:
    """Immutable configuration for the comparison engine.

    Attributes:
        tag_name: Primary annotation key consulted for field names and the
            identity option.
        fallback_tag_names: Annotation keys tried in order when ``tag_name``
            yields no field name.  Not consulted for options.
        id_option: Option string marking a field as the identity of its
            record when the record is a sequence element.  Matched
            case-insensitively.
        root_key: Reserved key of the root node.
        respect_sequence_order: When True, sequences are always compared
            positionally, even if their elements carry an identity field.
        skip_private_fields: When True, underscore-prefixed record fields are
            left out of the comparison instead of being read.
        max_cache_size: Number of record types whose resolved field plans are
            kept per comparator.  Infrastructure only; never affects results.
    """

    tag_name: str = DEFAULT_TAG_NAME
    fallback_tag_names: tuple[str, ...] = DEFAULT_FALLBACK_TAG_NAMES
    id_option: str = DEFAULT_ID_OPTION
    root_key: str = DEFAULT_ROOT_KEY
    respect_sequence_order: bool = False
    skip_private_fields: bool = False
    max_cache_size: int = 256

    def __post_init__(self) -> None:
        if not self.tag_name.strip():
            msg = "tag_name must be a non-empty string"
            raise ValueError(msg)
        if not isinstance(self.fallback_tag_names, tuple):
            # Accept any iterable of names; store a tuple.
            object.__setattr__(
                self, "fallback_tag_names", tuple(self.fallback_tag_names)
            )
        if any(not name.strip() for name in self.fallback_tag_names):
            msg = f"fallback_tag_names must not contain empty names, got {self.fallback_tag_names!r}"
            raise ValueError(msg)
        if not self.id_option.strip() or "," in self.id_option:
            msg = f"id_option must be a non-empty string without commas, got {self.id_option!r}"
            raise ValueError(msg)
        if not self.root_key:
            msg = "root_key must be a non-empty string"
            raise ValueError(msg)
        if self.max_cache_size < 1:
            msg = f"max_cache_size must be >= 1, got {self.max_cache_size}"
            raise ValueError(msg)

    def with_options(self, **changes: Any) -> ComparatorConfig:
        """Return a validated copy with ``changes`` applied."""
        return dataclasses.replace(self, **changes)
