"""
Transaction hook registry and the DM identity-insert hooks.
"""

from .dispatcher import (
    AFTER_BEGIN_TRANSACTION,
    BEFORE_COMMIT_OR_ROLLBACK,
    HookDispatcher,
)
from .identity_insert import (
    SET_IDENTITY_INSERT_HOOK,
    TURN_OFF_IDENTITY_INSERT_HOOK,
    IdentityInsertState,
    install_identity_insert_hooks,
    set_identity_insert,
    turn_off_identity_insert,
)

__all__ = [
    "AFTER_BEGIN_TRANSACTION",
    "BEFORE_COMMIT_OR_ROLLBACK",
    "HookDispatcher",
    "IdentityInsertState",
    "SET_IDENTITY_INSERT_HOOK",
    "TURN_OFF_IDENTITY_INSERT_HOOK",
    "install_identity_insert_hooks",
    "set_identity_insert",
    "turn_off_identity_insert",
]
