"""
DM (Dameng) dialect implementation.

Best used against databases created with ``CASE_SENSITIVE=N``: the host layer
does not quote identifiers consistently, and DM folds unquoted names to upper
case.
"""

from __future__ import annotations

from typing import Any, Final, Optional

from ..core.fields import AUTO_INCREMENT, FieldDescriptor
from ..utils import build_key_name, get_logger
from .base import DialectCapabilities, QueryExecutor
from .introspection import SchemaIntrospector
from .pagination import limit_and_offset_sql
from .types import ResolvedColumnType, resolve_column_type


class DMDialect:
    """
    DM dialect using qmark placeholders and double-quoted identifiers.
    """

    name: Final[str] = "dm"
    param_style: Final[str] = "qmark"
    capabilities: Final[DialectCapabilities] = DialectCapabilities(supports_savepoints=True)

    def __init__(self, db: Optional[QueryExecutor] = None, *, strict_introspection: bool = False) -> None:
        self.introspector = SchemaIntrospector(db, strict=strict_introspection)
        self.logger = get_logger("dialects.dm")

    @property
    def db(self) -> Optional[QueryExecutor]:
        return self.introspector.db

    def set_db(self, db: QueryExecutor) -> None:
        self.introspector.db = db

    # ------------------------------------------------------------------ #
    # SQL text
    # ------------------------------------------------------------------ #
    def bind_var(self, position: int) -> str:
        return "?"

    def quote(self, key: str) -> str:
        return f'"{key}"'

    def format_table(self, table_name: str) -> str:
        if "." in table_name:
            schema, table = table_name.split(".", 1)
            return f"{self.quote(schema)}.{self.quote(table)}"
        return self.quote(table_name)

    def limit_and_offset_sql(self, limit: Any, offset: Any) -> str:
        return limit_and_offset_sql(limit, offset)

    def select_from_dummy_table(self) -> str:
        return "FROM DUAL"

    def last_insert_id_output_interstitial(
        self, table_name: str, column_name: str, columns: list[str]
    ) -> str:
        return ""

    def last_insert_id_returning_suffix(self, table_name: str, column_name: str) -> str:
        return ""

    def default_value_str(self) -> str:
        return "DEFAULT VALUES"

    def build_key_name(self, kind: str, table_name: str, *fields: str) -> str:
        return build_key_name(kind, table_name, *fields)

    def normalize_index_and_column(self, index_name: str, column_name: str) -> tuple[str, str]:
        return index_name, column_name

    # ------------------------------------------------------------------ #
    # Types
    # ------------------------------------------------------------------ #
    def resolve_column_type(self, field: FieldDescriptor) -> ResolvedColumnType:
        return resolve_column_type(field)

    def data_type_of(self, field: FieldDescriptor) -> str:
        """
        Resolve the column type and record an inferred identity column on
        the field's tag settings.
        """
        resolved = resolve_column_type(field)
        if resolved.auto_increment and not field.has_tag(AUTO_INCREMENT):
            self.logger.debug("Inferred %s for field %s", AUTO_INCREMENT, field.name)
            field.tag_set(AUTO_INCREMENT, AUTO_INCREMENT)
        return resolved.sql_type

    # ------------------------------------------------------------------ #
    # Introspection and DDL
    # ------------------------------------------------------------------ #
    def has_table(self, table_name: str) -> bool:
        return self.introspector.has_table(table_name)

    def has_column(self, table_name: str, column_name: str) -> bool:
        return self.introspector.has_column(table_name, column_name)

    def has_index(self, table_name: str, index_name: str) -> bool:
        return self.introspector.has_index(table_name, index_name)

    def has_foreign_key(self, table_name: str, foreign_key_name: str) -> bool:
        return self.introspector.has_foreign_key(table_name, foreign_key_name)

    def remove_index(self, table_name: str, index_name: str) -> None:
        self.introspector.remove_index(table_name, index_name)

    def modify_column(self, table_name: str, column_name: str, column_type: str) -> None:
        self.introspector.modify_column(table_name, column_name, column_type)

    def current_database(self) -> str:
        return self.introspector.current_database()

    def split_table_name(self, table_name: str) -> tuple[str, str]:
        return self.introspector.split_table_name(table_name)
