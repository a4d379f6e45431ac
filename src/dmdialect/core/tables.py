"""
Table name handling for schema-qualified references.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Optional


@dataclass(frozen=True)
class TableReference:
    schema: Optional[str]
    table: str

    @classmethod
    def parse(cls, name: str) -> "TableReference":
        """
        Split on the first ``.``; an unqualified name has no schema.
        """
        if "." in name:
            schema, table = name.split(".", 1)
            return cls(schema=schema, table=table)
        return cls(schema=None, table=name)

    @property
    def qualified(self) -> bool:
        return self.schema is not None


def split_table_name(name: str, current_schema: Callable[[], str]) -> tuple[str, str]:
    """
    Return ``(schema, table)`` for ``name``.

    ``current_schema`` is only called when ``name`` carries no schema.
    """
    ref = TableReference.parse(name)
    if ref.schema is not None:
        return ref.schema, ref.table
    return current_schema(), ref.table
