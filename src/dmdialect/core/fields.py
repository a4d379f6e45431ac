"""
Field descriptors consumed by the DM dialect.

A :class:`FieldDescriptor` carries the metadata the dialect needs to render a
column: the value kind, an optional size, tag settings and key/nullability
flags. A :class:`BoundField` pairs a descriptor with the value supplied for a
single insert.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional, Union


class FieldError(Exception):
    """Raised when a field descriptor is misconfigured."""


class ColumnKind(enum.Enum):
    """
    Value kinds understood by the type mapper.
    """

    BOOLEAN = "bool"
    INT = "int"
    INT8 = "int8"
    INT16 = "int16"
    INT32 = "int32"
    INT64 = "int64"
    UINT = "uint"
    UINT8 = "uint8"
    UINT16 = "uint16"
    UINT32 = "uint32"
    UINT64 = "uint64"
    UINTPTR = "uintptr"
    FLOAT32 = "float32"
    FLOAT64 = "float64"
    STRING = "string"
    BYTES = "bytes"
    TIME = "time"
    # Composite value with no native column type; needs an explicit db_type.
    OBJECT = "object"


class DMType(enum.Enum):
    """
    DM-native value kinds with a fixed column type.
    """

    TIMESTAMP = "TIMESTAMP"
    DECIMAL = "DECIMAL"
    BLOB = "BLOB"
    CLOB = "CLOB"
    INTERVAL_YM = "INTERVAL YEAR TO MONTH"
    INTERVAL_DT = "INTERVAL DAY TO SECOND"


FieldKind = Union[ColumnKind, DMType]

AUTO_INCREMENT = "AUTO_INCREMENT"


def coerce_kind(kind: Any) -> FieldKind:
    """
    Normalize ``kind`` into a :class:`ColumnKind` or :class:`DMType`.

    Accepts enum members, enum values (``"int64"``) and member names
    (``"INT64"``, ``"INTERVAL_YM"``).
    """
    if isinstance(kind, (ColumnKind, DMType)):
        return kind
    if isinstance(kind, str):
        for enum_cls in (ColumnKind, DMType):
            try:
                return enum_cls(kind)
            except ValueError:
                pass
            try:
                return enum_cls[kind.upper()]
            except KeyError:
                pass
    raise FieldError(f"Unsupported field kind {kind!r}")


@dataclass
class FieldDescriptor:
    """
    Column metadata for a single field.

    ``tag_settings`` is mutable. The host framework records
    inferred settings such as ``AUTO_INCREMENT`` on it after type resolution.
    """

    name: str
    kind: FieldKind
    size: Optional[int] = None
    primary_key: bool = False
    nullable: bool = True
    unique: bool = False
    db_type: Optional[str] = None
    db_default: Any = None
    db_column: Optional[str] = None
    tag_settings: Dict[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not self.name:
            raise FieldError("Field name is required.")
        self.kind = coerce_kind(self.kind)
        if self.size is not None and self.size < 0:
            raise FieldError(f"Field '{self.name}' has negative size {self.size}")
        self.tag_settings = {key.upper(): value for key, value in self.tag_settings.items()}

    # Tag settings --------------------------------------------------------
    def tag_get(self, key: str) -> Optional[str]:
        return self.tag_settings.get(key.upper())

    def tag_set(self, key: str, value: str) -> None:
        self.tag_settings[key.upper()] = value

    def has_tag(self, key: str) -> bool:
        return key.upper() in self.tag_settings

    # Rendering helpers ---------------------------------------------------
    def column_name(self) -> str:
        return self.db_column or self.name

    def additional_type(self) -> str:
        """
        Column modifiers appended after the resolved type.
        """
        parts = []
        if not self.nullable and not self.primary_key:
            parts.append("NOT NULL")
        if self.unique and not self.primary_key:
            parts.append("UNIQUE")
        if self.db_default is not None:
            parts.append(f"DEFAULT {_render_default(self.db_default)}")
        return " ".join(parts)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "FieldDescriptor":
        params = dict(data)
        try:
            name = params.pop("name")
            kind = params.pop("kind")
        except KeyError as exc:
            raise FieldError(f"Field definition missing {exc.args[0]!r}") from exc
        return cls(name=name, kind=kind, **params)


def _render_default(value: Any) -> str:
    if isinstance(value, bool):
        return "1" if value else "0"
    if isinstance(value, str):
        escaped = value.replace("'", "''")
        return f"'{escaped}'"
    return str(value)


def is_blank_value(value: Any) -> bool:
    """
    Whether ``value`` counts as "not supplied" for an insert.
    """
    if value is None or value is False:
        return True
    if isinstance(value, (str, bytes, bytearray)):
        return len(value) == 0
    if isinstance(value, (int, float)):
        return value == 0
    return False


@dataclass
class BoundField:
    descriptor: FieldDescriptor
    value: Any = None

    @property
    def name(self) -> str:
        return self.descriptor.name

    @property
    def primary_key(self) -> bool:
        return self.descriptor.primary_key

    @property
    def is_blank(self) -> bool:
        return is_blank_value(self.value)
