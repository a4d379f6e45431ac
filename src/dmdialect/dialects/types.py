"""
Column type resolution for the DM dialect.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Final

from ..core.fields import AUTO_INCREMENT, ColumnKind, DMType, FieldDescriptor
from .base import TypeResolutionError

# Sizes at or above this are stored as LOBs.
MAX_VARYING_SIZE: Final[int] = 32768

SMALL_INTEGER_KINDS: Final[frozenset[ColumnKind]] = frozenset(
    {
        ColumnKind.INT,
        ColumnKind.INT8,
        ColumnKind.INT16,
        ColumnKind.INT32,
        ColumnKind.UINT,
        ColumnKind.UINT8,
        ColumnKind.UINT16,
        ColumnKind.UINTPTR,
    }
)
LARGE_INTEGER_KINDS: Final[frozenset[ColumnKind]] = frozenset(
    {ColumnKind.INT64, ColumnKind.UINT32, ColumnKind.UINT64}
)
FLOAT_KINDS: Final[frozenset[ColumnKind]] = frozenset({ColumnKind.FLOAT32, ColumnKind.FLOAT64})


@dataclass(frozen=True)
class ResolvedColumnType:
    """
    Result of type resolution.

    ``auto_increment`` reports that the column was rendered as an identity
    column; callers decide whether to record that on the field.
    """

    sql_type: str
    auto_increment: bool = False

    def __str__(self) -> str:
        return self.sql_type


def can_auto_increment(field: FieldDescriptor) -> bool:
    value = field.tag_get(AUTO_INCREMENT)
    if value is not None:
        return value.lower() != "false"
    return field.primary_key


def _varying(base: str, lob: str, size: int | None) -> str:
    if size is not None and 0 < size < MAX_VARYING_SIZE:
        return f"{base}({size})"
    return lob


def _base_type(field: FieldDescriptor) -> tuple[str, bool]:
    if field.db_type:
        return field.db_type, False

    kind = field.kind
    if isinstance(kind, DMType):
        return kind.value, False

    if kind is ColumnKind.BOOLEAN:
        return "BIT", False
    if kind in SMALL_INTEGER_KINDS:
        if can_auto_increment(field):
            return "INT IDENTITY(1,1)", True
        return "INT", False
    if kind in LARGE_INTEGER_KINDS:
        if can_auto_increment(field):
            return "BIGINT IDENTITY(1,1)", True
        return "BIGINT", False
    if kind in FLOAT_KINDS:
        return "DOUBLE", False
    if kind is ColumnKind.STRING:
        return _varying("VARCHAR", "CLOB", field.size), False
    if kind is ColumnKind.TIME:
        return "TIMESTAMP WITH TIME ZONE", False
    if kind is ColumnKind.BYTES:
        return _varying("VARBINARY", "BLOB", field.size), False

    raise TypeResolutionError(
        f"invalid sql type {kind.name} ({kind.value}) in field {field.name} for dm"
    )


def resolve_column_type(field: FieldDescriptor) -> ResolvedColumnType:
    """
    Resolve the DM column type for ``field`` without modifying it.
    """
    sql_type, auto_increment = _base_type(field)
    additional = field.additional_type().strip()
    if additional:
        sql_type = f"{sql_type} {additional}"
    return ResolvedColumnType(sql_type=sql_type, auto_increment=auto_increment)
