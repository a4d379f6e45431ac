"""
DM database adapter implementation.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Sequence

from ..dialects.dm import DMDialect
from ..security.redaction import redact_params
from ..utils import get_logger, time_call
from ..utils.performance import resolve_slow_query_ms
from .base import (
    AdapterConfigurationError,
    AdapterConnectionError,
    AdapterExecutionError,
    ConnectionConfig,
    DatabaseAdapter,
)


def _load_driver():
    try:
        import dmPython  # type: ignore[import-not-found]

        return dmPython
    except ImportError:
        return None


@dataclass
class DMConnectionState:
    connection: Any
    config: ConnectionConfig
    driver: Any


class DMAdapter(DatabaseAdapter):
    """
    Adapter wrapping the ``dmPython`` DB-API driver.

    The adapter is handed to its dialect as the query executor so catalog
    lookups run on the same connection as the rest of the session.
    """

    def __init__(self, slow_query_ms: int | None = None) -> None:
        self.dialect = DMDialect()
        self._state: DMConnectionState | None = None
        self.logger = get_logger("adapters.dm")
        self.slow_query_ms = resolve_slow_query_ms(default=100, override=slow_query_ms)

    # ------------------------------------------------------------------ #
    # Connection management
    # ------------------------------------------------------------------ #
    def connect(self, config: ConnectionConfig) -> Any:
        driver = _load_driver()
        if driver is None:
            raise AdapterConfigurationError("dmPython is required to use DMAdapter.")
        connect_kwargs = config.connect_kwargs()

        self.logger.info(
            "Connecting to DM %s (autocommit=%s)",
            config.describe(),
            config.autocommit,
        )

        try:
            connection = driver.connect(**connect_kwargs)
        except Exception as exc:
            raise AdapterConnectionError("Failed to connect to DM.") from exc

        self._state = DMConnectionState(connection, config, driver)
        self.dialect.introspector.strict = config.strict_introspection
        self.dialect.set_db(self)
        return connection

    def close(self) -> None:
        if self._state:
            try:
                self._state.connection.close()
            finally:
                self._state = None

    def _ensure_connection(self):
        if not self._state:
            raise AdapterConnectionError("DMAdapter is not connected.")
        return self._state.connection

    # ------------------------------------------------------------------ #
    # Execution helpers
    # ------------------------------------------------------------------ #
    def execute(self, sql: str, params: Sequence[Any] | None = None):
        connection = self._ensure_connection()
        cursor = connection.cursor()
        params = list(params or ())
        self._validate_params(sql, params)
        with time_call(
            "dm.execute",
            self.logger,
            sql=sql,
            params=redact_params(params),
            threshold_ms=self.slow_query_ms,
        ):
            if params:
                cursor.execute(sql, params)
            else:
                cursor.execute(sql)
        return cursor

    # ------------------------------------------------------------------ #
    # Transactions
    # ------------------------------------------------------------------ #
    def begin(self) -> None:
        # DM opens a transaction implicitly with the first statement.
        if self._state and self._state.config.autocommit:
            self.logger.debug("begin() ignored on autocommit connection")
            return
        self._ensure_connection()

    def commit(self) -> None:
        connection = self._ensure_connection()
        connection.commit()

    def rollback(self) -> None:
        connection = self._ensure_connection()
        connection.rollback()

    def last_insert_id(self, cursor: Any, table: str, pk_column: str) -> Any:
        row = self.execute("SELECT SCOPE_IDENTITY()").fetchone()
        if not row or row[0] is None:
            raise AdapterExecutionError(f"No identity value available after insert into {table}.")
        return row[0]

    # ------------------------------------------------------------------ #
    @staticmethod
    def _count_placeholders(sql: str) -> int:
        count = 0
        idx = 0
        in_string = False
        while idx < len(sql):
            char = sql[idx]
            if in_string:
                if char == "'":
                    in_string = False
            elif char == "'":
                in_string = True
            elif sql.startswith("/*", idx):
                end = sql.find("*/", idx + 2)
                idx = len(sql) if end == -1 else end + 2
                continue
            elif char == "?":
                count += 1
            idx += 1
        return count

    def _validate_params(self, sql: str, params: Sequence[Any]) -> None:
        placeholder_count = self._count_placeholders(sql)
        if placeholder_count == 0:
            if params:
                raise AdapterExecutionError(
                    "Parameters provided but SQL statement has no placeholders."
                )
            return
        if placeholder_count != len(params):
            raise AdapterExecutionError(
                f"Parameter count mismatch: expected {placeholder_count}, received {len(params)}."
            )
