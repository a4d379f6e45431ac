"""
Schema builder converting field descriptors into DM DDL.
"""

from __future__ import annotations

from typing import List, Sequence

from ..core.fields import FieldDescriptor
from ..dialects.base import Dialect, DialectError
from ..utils import get_logger


class SchemaBuilder:
    """
    Produces DM-specific SQL for schema manipulation and applies it through
    the dialect's database handle.
    """

    def __init__(self, dialect: Dialect) -> None:
        self.dialect = dialect
        self.logger = get_logger("schema.builder")

    # ------------------------------------------------------------------ #
    # SQL generation
    # ------------------------------------------------------------------ #
    def create_table_sql(self, table_name: str, fields: Sequence[FieldDescriptor]) -> str:
        if not fields:
            raise ValueError(f"Table '{table_name}' needs at least one field.")
        pieces = self._render_columns(fields)
        primary_keys = [self.dialect.quote(f.column_name()) for f in fields if f.primary_key]
        if primary_keys:
            pieces.append(f"PRIMARY KEY ({', '.join(primary_keys)})")
        table = self.dialect.format_table(table_name)
        return f"CREATE TABLE {table} ({', '.join(pieces)})"

    def index_name(self, table_name: str, columns: Sequence[str], *, unique: bool = False) -> str:
        kind = "uix" if unique else "idx"
        return self.dialect.build_key_name(kind, table_name, *columns)

    def create_index_sql(
        self, table_name: str, columns: Sequence[str], *, unique: bool = False
    ) -> str:
        if not columns:
            raise ValueError("An index needs at least one column.")
        name = self.index_name(table_name, columns, unique=unique)
        column_list = ", ".join(self.dialect.quote(column) for column in columns)
        prefix = "CREATE UNIQUE INDEX" if unique else "CREATE INDEX"
        return f"{prefix} {self.dialect.quote(name)} ON {self.dialect.format_table(table_name)} ({column_list})"

    def drop_table_sql(self, table_name: str) -> str:
        table = self.dialect.format_table(table_name)
        self.logger.warning(
            "DROP TABLE generated for %s; confirm destructive migration before applying.",
            table,
        )
        return f"DROP TABLE {table}"

    # ------------------------------------------------------------------ #
    # Applying changes
    # ------------------------------------------------------------------ #
    def ensure_table(self, table_name: str, fields: Sequence[FieldDescriptor]) -> bool:
        """
        Create ``table_name`` unless the catalog already lists it.

        Returns ``True`` when the table was created.
        """
        if self.dialect.has_table(table_name):
            self.logger.debug("Table %s already exists", table_name)
            return False
        self._db().execute(self.create_table_sql(table_name, fields))
        self.logger.info("Created table %s", table_name)
        return True

    def ensure_index(
        self, table_name: str, columns: Sequence[str], *, unique: bool = False
    ) -> bool:
        name = self.index_name(table_name, columns, unique=unique)
        if self.dialect.has_index(table_name, name):
            return False
        self._db().execute(self.create_index_sql(table_name, columns, unique=unique))
        self.logger.info("Created index %s on %s", name, table_name)
        return True

    def drop_index(self, table_name: str, columns: Sequence[str], *, unique: bool = False) -> None:
        self.dialect.remove_index(table_name, self.index_name(table_name, columns, unique=unique))

    def alter_column(self, table_name: str, field: FieldDescriptor) -> None:
        self.dialect.modify_column(
            self.dialect.format_table(table_name),
            self.dialect.quote(field.column_name()),
            self.dialect.data_type_of(field),
        )

    # ------------------------------------------------------------------ #
    def _render_columns(self, fields: Sequence[FieldDescriptor]) -> List[str]:
        return [
            f"{self.dialect.quote(field.column_name())} {self.dialect.data_type_of(field)}"
            for field in fields
        ]

    def _db(self):
        db = getattr(self.dialect, "db", None)
        if db is None:
            raise DialectError("Dialect has no database handle; call set_db() first.")
        return db
