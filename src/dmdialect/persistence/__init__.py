"""
Persistence layer components: sessions and transactions.
"""

from .session import Session
from .transaction import TransactionError, TransactionManager, TransactionScope

__all__ = ["Session", "TransactionError", "TransactionManager", "TransactionScope"]
