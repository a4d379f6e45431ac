"""
Core metadata types: field descriptors and table references.
"""

from .fields import (
    AUTO_INCREMENT,
    BoundField,
    ColumnKind,
    DMType,
    FieldDescriptor,
    FieldError,
    coerce_kind,
    is_blank_value,
)
from .tables import TableReference, split_table_name

__all__ = [
    "AUTO_INCREMENT",
    "BoundField",
    "ColumnKind",
    "DMType",
    "FieldDescriptor",
    "FieldError",
    "TableReference",
    "coerce_kind",
    "is_blank_value",
    "split_table_name",
]
