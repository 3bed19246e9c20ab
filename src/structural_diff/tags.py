"""Tag resolution: external field names and options from field annotations.

Annotations live in dataclass field metadata in one of two forms:

- a per-key mapping entry::

      id: int = field(metadata={"cmp": "id,id"})

- a conventional tag string under the ``"tag"`` metadata key, holding
  space-separated ``key:"value"`` pairs::

      name: str = field(metadata={"tag": 'cmp:"n" json:"name"'})

A per-key entry wins over the same key inside the tag string.  Annotation
text has the shape ``<name>[,<option>...]``.
"""

from __future__ import annotations

import re
from collections.abc import Iterable

from structural_diff.values.fields import FieldDescriptor

__all__ = ["TAG_STRING_KEY", "has_option", "lookup", "parse_tag", "resolved_name"]

# Metadata key holding a conventional tag string.
TAG_STRING_KEY = "tag"

# Matches one ``key:"value"`` pair; the value may contain escaped quotes.
_TAG_PAIR = re.compile(r'([^\s:"]+):"((?:[^"\\]|\\.)*)"')

_OPTION_SEP = ","


def parse_tag(tag: str) -> dict[str, str]:
    """Parse a conventional tag string into a key -> annotation mapping.

    Malformed fragments between well-formed pairs are ignored.  When a key
    appears twice the first occurrence wins.

    Example::

        parse_tag('cmp:"n,id" json:"name"')  # {"cmp": "n,id", "json": "name"}
    """
    pairs: dict[str, str] = {}
    for match in _TAG_PAIR.finditer(tag):
        key, value = match.group(1), match.group(2)
        pairs.setdefault(key, value.replace('\\"', '"'))
    return pairs


def lookup(descriptor: FieldDescriptor, key: str) -> str:
    """Return the annotation text stored for ``key``, or ``""`` when absent."""
    value = descriptor.metadata.get(key)
    if isinstance(value, str):
        return value
    tag = descriptor.metadata.get(TAG_STRING_KEY)
    if isinstance(tag, str):
        return parse_tag(tag).get(key, "")
    return ""


def resolved_name(
    tag_key: str,
    fallback_keys: Iterable[str],
    descriptor: FieldDescriptor,
) -> str:
    """Return the externally visible name of a field.

    Tries ``tag_key`` first, then each of ``fallback_keys`` in order.  The
    first annotation whose text before the option separator is non-empty
    wins.  Returns ``""`` when no annotation names the field; callers decide
    the fallback policy.
    """
    for key in (tag_key, *fallback_keys):
        name = lookup(descriptor, key).split(_OPTION_SEP, 1)[0]
        if name:
            return name
    return ""


def has_option(tag_key: str, descriptor: FieldDescriptor, option: str) -> bool:
    """Return True if the ``tag_key`` annotation lists ``option``.

    Only the segments after the name are options.  Each is trimmed and
    compared case-insensitively.
    """
    segments = lookup(descriptor, tag_key).split(_OPTION_SEP)
    if len(segments) < 2:
        return False
    wanted = option.strip().lower()
    return any(seg.strip().lower() == wanted for seg in segments[1:])
