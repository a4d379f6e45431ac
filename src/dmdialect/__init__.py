"""
dmdialect public package initialization.

A SQL dialect for the DM (Dameng) database engine together with the thin
adapter, transaction and schema layers that drive it.
"""

from .adapters import ConnectionConfig, DMAdapter  # noqa: F401
from .core import BoundField, ColumnKind, DMType, FieldDescriptor, FieldError  # noqa: F401
from .dialects import (  # noqa: F401
    DMDialect,
    IntrospectionError,
    PaginationError,
    TypeResolutionError,
    get_dialect,
)
from .hooks import HookDispatcher, install_identity_insert_hooks  # noqa: F401
from .persistence import Session, TransactionManager  # noqa: F401
from .schema import SchemaBuilder  # noqa: F401
from .utils import build_key_name  # noqa: F401

__all__ = [
    "BoundField",
    "ColumnKind",
    "ConnectionConfig",
    "DMAdapter",
    "DMDialect",
    "DMType",
    "FieldDescriptor",
    "FieldError",
    "HookDispatcher",
    "IntrospectionError",
    "PaginationError",
    "SchemaBuilder",
    "Session",
    "TransactionManager",
    "TypeResolutionError",
    "build_key_name",
    "get_dialect",
    "install_identity_insert_hooks",
]
