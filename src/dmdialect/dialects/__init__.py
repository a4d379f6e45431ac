"""
Dialect strategy registry.
"""

from __future__ import annotations

from typing import Callable, Dict

from .base import (
    Dialect,
    DialectCapabilities,
    DialectError,
    IntrospectionError,
    PaginationError,
    QueryExecutor,
    TypeResolutionError,
)
from .dm import DMDialect
from .introspection import SchemaIntrospector
from .pagination import limit_and_offset_sql
from .types import ResolvedColumnType, resolve_column_type

_REGISTRY: Dict[str, Callable[..., Dialect]] = {"dm": DMDialect}


def get_dialect(name: str, **kwargs) -> Dialect:
    try:
        factory = _REGISTRY[name]
    except KeyError as exc:
        raise DialectError(f"Unknown dialect '{name}'") from exc
    return factory(**kwargs)


__all__ = [
    "DMDialect",
    "Dialect",
    "DialectCapabilities",
    "DialectError",
    "IntrospectionError",
    "PaginationError",
    "QueryExecutor",
    "ResolvedColumnType",
    "SchemaIntrospector",
    "TypeResolutionError",
    "get_dialect",
    "limit_and_offset_sql",
    "resolve_column_type",
]
