"""
Identity-insert toggling around inserts with explicit primary keys.

DM rejects explicit values for identity columns unless
``SET IDENTITY_INSERT <table> ON`` is in effect. The hooks below switch it on
after the transaction begins when an insert carries an explicit key, and back
off before the transaction commits or rolls back.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Iterator, List, Optional

from ..core.fields import AUTO_INCREMENT, BoundField
from ..utils import get_logger
from .dispatcher import AFTER_BEGIN_TRANSACTION, BEFORE_COMMIT_OR_ROLLBACK, HookDispatcher

if TYPE_CHECKING:
    from ..persistence.transaction import TransactionScope


SET_IDENTITY_INSERT_HOOK = "dm:set_identity_insert"
TURN_OFF_IDENTITY_INSERT_HOOK = "dm:turn_off_identity_insert"

logger = get_logger("hooks.identity_insert")


@dataclass
class IdentityInsertState:
    """
    Tables with identity insert switched on inside one transaction.
    """

    _tables: List[str] = field(default_factory=list)

    def enable(self, table_name: str) -> None:
        if table_name not in self._tables:
            self._tables.append(table_name)

    def disable(self, table_name: str) -> None:
        if table_name in self._tables:
            self._tables.remove(table_name)

    def is_on(self, table_name: str) -> bool:
        return table_name in self._tables

    @property
    def tables(self) -> tuple[str, ...]:
        return tuple(self._tables)

    def clear(self) -> None:
        self._tables.clear()

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._tables))

    def __bool__(self) -> bool:
        return bool(self._tables)


def _is_auto_increment(scope: "TransactionScope", bound: BoundField) -> bool:
    descriptor = bound.descriptor
    value: Optional[str] = descriptor.tag_get(AUTO_INCREMENT)
    if value is not None:
        return value.lower() != "false"
    return scope.dialect.resolve_column_type(descriptor).auto_increment


def set_identity_insert(scope: "TransactionScope") -> None:
    if scope.dialect.name != "dm":
        return
    table_name = scope.table_name
    if scope.identity_insert.is_on(table_name):
        return
    for bound in scope.primary_fields():
        if bound.is_blank or not _is_auto_increment(scope, bound):
            continue
        scope.adapter.execute(f"SET IDENTITY_INSERT {table_name} ON")
        scope.identity_insert.enable(table_name)
        logger.debug("Identity insert enabled for %s (field %s)", table_name, bound.name)
        return


def turn_off_identity_insert(scope: "TransactionScope") -> None:
    if scope.dialect.name != "dm":
        return
    state = scope.identity_insert
    try:
        for table_name in state:
            scope.adapter.execute(f"SET IDENTITY_INSERT {table_name} OFF")
            state.disable(table_name)
            logger.debug("Identity insert disabled for %s", table_name)
    finally:
        # A failed OFF must not leave the flag behind for the next transaction.
        state.clear()


def install_identity_insert_hooks(dispatcher: HookDispatcher) -> HookDispatcher:
    """
    Register both identity-insert hooks on ``dispatcher``.
    """
    dispatcher.register(AFTER_BEGIN_TRANSACTION, SET_IDENTITY_INSERT_HOOK, set_identity_insert)
    dispatcher.register(
        BEFORE_COMMIT_OR_ROLLBACK, TURN_OFF_IDENTITY_INSERT_HOOK, turn_off_identity_insert
    )
    return dispatcher
