"""
Hook dispatcher coordinating transaction callbacks.
"""

from __future__ import annotations

from collections import OrderedDict, defaultdict
from typing import TYPE_CHECKING, Callable, Dict, List

if TYPE_CHECKING:
    from ..persistence.transaction import TransactionScope


HookHandler = Callable[["TransactionScope"], None]

AFTER_BEGIN_TRANSACTION = "after_begin_transaction"
BEFORE_COMMIT_OR_ROLLBACK = "before_commit_or_rollback_transaction"


class HookDispatcher:
    """
    Maintains named handlers per event, fired in registration order.
    """

    def __init__(self) -> None:
        self._handlers: Dict[str, "OrderedDict[str, HookHandler]"] = defaultdict(OrderedDict)

    def register(self, event: str, name: str, handler: HookHandler) -> None:
        """
        Register ``handler`` under ``name``; an existing handler with the same
        name is replaced in place.
        """
        self._handlers[event][name] = handler

    def remove(self, event: str, name: str) -> None:
        self._handlers.get(event, OrderedDict()).pop(name, None)

    def handlers(self, event: str) -> List[str]:
        return list(self._handlers.get(event, {}))

    def fire(self, event: str, scope: "TransactionScope") -> None:
        for handler in list(self._handlers.get(event, {}).values()):
            handler(scope)

    def clear(self) -> None:
        self._handlers.clear()
