"""Concrete repository implementations."""

from .transaction import InMemoryTransactionPersistence, SQLModelTransactionPersistence

__all__ = [
    "InMemoryTransactionPersistence",
    "SQLModelTransactionPersistence",
]
