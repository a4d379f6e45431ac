"""
Dialect strategy interfaces describing SQL generation behaviors.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from ..core.fields import FieldDescriptor
    from .types import ResolvedColumnType


class DialectError(RuntimeError):
    """Base error for dialect failures."""


class TypeResolutionError(DialectError):
    """Raised when no column type can be resolved for a field."""


class PaginationError(DialectError, ValueError):
    """Raised when a limit or offset value is not an integer."""


class IntrospectionError(DialectError):
    """Raised by strict introspection when a catalog query fails."""


@dataclass(frozen=True)
class DialectCapabilities:
    """
    Feature flags describing backend capabilities.
    """

    supports_savepoints: bool = True


class QueryExecutor(Protocol):
    """
    Minimal execution capability the dialect needs from its host.
    """

    def execute(self, sql: str, params: Any = None) -> Any: ...


class Dialect(Protocol):
    """
    Capability set consumed by the persistence and schema layers.
    """

    @property
    def name(self) -> str: ...

    @property
    def param_style(self) -> str: ...

    @property
    def capabilities(self) -> DialectCapabilities: ...

    def set_db(self, db: QueryExecutor) -> None: ...

    def bind_var(self, position: int) -> str: ...

    def quote(self, key: str) -> str: ...

    def format_table(self, table_name: str) -> str: ...

    def resolve_column_type(self, field: "FieldDescriptor") -> "ResolvedColumnType": ...

    def data_type_of(self, field: "FieldDescriptor") -> str: ...

    def has_index(self, table_name: str, index_name: str) -> bool: ...

    def has_foreign_key(self, table_name: str, foreign_key_name: str) -> bool: ...

    def remove_index(self, table_name: str, index_name: str) -> None: ...

    def has_table(self, table_name: str) -> bool: ...

    def has_column(self, table_name: str, column_name: str) -> bool: ...

    def modify_column(self, table_name: str, column_name: str, column_type: str) -> None: ...

    def current_database(self) -> str: ...

    def limit_and_offset_sql(self, limit: Any, offset: Any) -> str: ...

    def select_from_dummy_table(self) -> str: ...

    def last_insert_id_output_interstitial(
        self, table_name: str, column_name: str, columns: list[str]
    ) -> str: ...

    def last_insert_id_returning_suffix(self, table_name: str, column_name: str) -> str: ...

    def default_value_str(self) -> str: ...

    def build_key_name(self, kind: str, table_name: str, *fields: str) -> str: ...

    def normalize_index_and_column(self, index_name: str, column_name: str) -> tuple[str, str]: ...
