"""Value inspection: kind classification, field access, reference wrappers.

Re-exports:
- Kind, kind_of, resolve_indirection: shape classification
- FieldDescriptor, record_fields, read_field: record field access
- Ref, Dynamic: explicit indirection and dynamic-slot wrappers
"""

from structural_diff.values.fields import FieldDescriptor, read_field, record_fields
from structural_diff.values.kinds import Kind, kind_of, resolve_indirection
from structural_diff.values.refs import Dynamic, Ref

__all__ = [
    "Dynamic",
    "FieldDescriptor",
    "Kind",
    "Ref",
    "kind_of",
    "read_field",
    "record_fields",
    "resolve_indirection",
]
