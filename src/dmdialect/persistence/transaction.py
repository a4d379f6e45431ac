"""
Transaction manager firing dialect hooks around each unit of work.
"""

from __future__ import annotations

import itertools
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Generator, Iterable, List, Optional

from ..adapters.base import DatabaseAdapter
from ..core.fields import BoundField
from ..dialects.base import Dialect
from ..hooks.dispatcher import AFTER_BEGIN_TRANSACTION, BEFORE_COMMIT_OR_ROLLBACK, HookDispatcher
from ..hooks.identity_insert import IdentityInsertState
from ..utils import get_logger


class TransactionError(RuntimeError):
    pass


@dataclass
class TransactionScope:
    """
    State visible to hooks for one transaction.

    ``identity_insert`` lives and dies with the scope; it is never shared
    between transactions.
    """

    dialect: Dialect
    adapter: DatabaseAdapter
    table_name: str
    fields: List[BoundField] = field(default_factory=list)
    identity_insert: IdentityInsertState = field(default_factory=IdentityInsertState)

    def primary_fields(self) -> List[BoundField]:
        return [bound for bound in self.fields if bound.primary_key]


class TransactionManager:
    """
    Coordinates begin/commit/rollback with optional savepoint support.
    """

    def __init__(
        self,
        adapter: DatabaseAdapter,
        dialect: Dialect,
        hooks: Optional[HookDispatcher] = None,
    ) -> None:
        self.adapter = adapter
        self.dialect = dialect
        self.hooks = hooks or HookDispatcher()
        self._stack: List[str | None] = []
        self._savepoint_counter = itertools.count(1)
        self.logger = get_logger("persistence.transaction")

    @property
    def depth(self) -> int:
        return len(self._stack)

    def begin(self) -> None:
        if self.depth == 0:
            self.adapter.begin()
            self._stack.append(None)
            return

        if not self.dialect.capabilities.supports_savepoints:
            raise TransactionError("Nested transactions not supported by current dialect.")

        name = self._next_savepoint_name()
        self.adapter.execute(f"SAVEPOINT {name}")
        self._stack.append(name)

    def commit(self) -> None:
        if self.depth == 0:
            raise TransactionError("No active transaction to commit.")

        savepoint_name = self._stack.pop()
        if savepoint_name is None:
            self.adapter.commit()

    def rollback(self) -> None:
        if self.depth == 0:
            raise TransactionError("No active transaction to roll back.")

        savepoint_name = self._stack.pop()
        if savepoint_name is None:
            self.adapter.rollback()
            return

        self.adapter.execute(f"ROLLBACK TO SAVEPOINT {savepoint_name}")

    @contextmanager
    def transaction(self) -> Generator[None, None, None]:
        self.begin()
        try:
            yield
        except BaseException:
            self.rollback()
            raise
        else:
            self.commit()

    @contextmanager
    def scope(
        self, table_name: str, fields: Iterable[BoundField] = ()
    ) -> Generator[TransactionScope, None, None]:
        """
        Run a unit of work for ``table_name`` with hooks at both boundaries.

        ``before_commit_or_rollback_transaction`` hooks run on the success
        path and on every failure path, including a failure of the
        ``after_begin_transaction`` hooks themselves.
        """
        scope = TransactionScope(
            dialect=self.dialect,
            adapter=self.adapter,
            table_name=table_name,
            fields=list(fields),
        )
        self.begin()
        try:
            self.hooks.fire(AFTER_BEGIN_TRANSACTION, scope)
            yield scope
        except BaseException:
            self._rollback_scope(scope)
            raise
        else:
            self._commit_scope(scope)

    def _commit_scope(self, scope: TransactionScope) -> None:
        try:
            self.hooks.fire(BEFORE_COMMIT_OR_ROLLBACK, scope)
        except Exception:
            self.rollback()
            raise
        self.commit()

    def _rollback_scope(self, scope: TransactionScope) -> None:
        try:
            self.hooks.fire(BEFORE_COMMIT_OR_ROLLBACK, scope)
        except Exception:
            # The original error is re-raised by the caller.
            self.logger.exception("Pre-rollback hooks failed for %s", scope.table_name)
        finally:
            self.rollback()

    def _next_savepoint_name(self) -> str:
        return f"sp_{next(self._savepoint_counter)}"
