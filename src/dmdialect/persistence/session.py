"""
Session coordinating the adapter, transactions, and dialect hooks.
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import Any, Iterable, Mapping, Optional, Sequence

from ..adapters.base import ConnectionConfig, DatabaseAdapter
from ..core.fields import BoundField, FieldDescriptor
from ..dialects.base import Dialect
from ..hooks import HookDispatcher, install_identity_insert_hooks
from ..security.redaction import redact_params
from ..utils import get_logger, time_call
from .transaction import TransactionManager


class Session:
    """
    Executes statements and inserts rows through a DM adapter.

    When no dispatcher is supplied the session builds one with the
    identity-insert hooks installed.
    """

    def __init__(
        self,
        adapter: DatabaseAdapter,
        *,
        connection_config: Optional[ConnectionConfig] = None,
        hooks: Optional[HookDispatcher] = None,
    ) -> None:
        self.adapter = adapter
        self.dialect: Dialect = adapter.dialect
        self.hooks = hooks if hooks is not None else install_identity_insert_hooks(HookDispatcher())
        self.transaction_manager = TransactionManager(adapter, self.dialect, self.hooks)
        self.logger = get_logger("persistence.session")
        if connection_config is not None:
            self.adapter.connect(connection_config)

    # ------------------------------------------------------------------ #
    # Context management
    # ------------------------------------------------------------------ #
    def __enter__(self) -> "Session":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def close(self) -> None:
        self.adapter.close()

    # ------------------------------------------------------------------ #
    def execute(self, sql: str, params: Iterable[Any] | None = None):
        param_list = list(params or [])
        with time_call(
            "session.execute", self.logger, sql=sql, params=redact_params(param_list), threshold_ms=200
        ):
            return self.adapter.execute(sql, param_list)

    @contextmanager
    def transaction(self):
        with self.transaction_manager.transaction():
            yield self

    # ------------------------------------------------------------------ #
    def insert(
        self,
        table_name: str,
        fields: Sequence[FieldDescriptor],
        values: Mapping[str, Any],
    ) -> Any:
        """
        Insert one row and return its primary key value.

        Blank identity keys are left to the database; an explicit key value
        on an identity column is written under ``SET IDENTITY_INSERT``.
        """
        bound_fields = [BoundField(descriptor, values.get(descriptor.name)) for descriptor in fields]
        pk_field = next((bound for bound in bound_fields if bound.primary_key), None)

        with self.transaction_manager.scope(table_name, bound_fields):
            columns = []
            params = []
            for bound in bound_fields:
                if bound.primary_key and bound.is_blank:
                    continue
                columns.append(self.dialect.quote(bound.descriptor.column_name()))
                params.append(bound.value)

            table = self.dialect.format_table(table_name)
            if columns:
                placeholders = ", ".join(self.dialect.bind_var(i + 1) for i in range(len(columns)))
                sql = f"INSERT INTO {table} ({', '.join(columns)}) VALUES ({placeholders})"
            else:
                sql = f"INSERT INTO {table} {self.dialect.default_value_str()}"
            cursor = self.execute(sql, params)

            if pk_field is None:
                return None
            if not pk_field.is_blank:
                return pk_field.value
            resolved = self.dialect.resolve_column_type(pk_field.descriptor)
            if not resolved.auto_increment:
                return None
            return self.adapter.last_insert_id(
                cursor, table_name, pk_field.descriptor.column_name()
            )
