"""Repository protocol definitions for domain layer."""

from .transaction import TransactionPersistence

__all__ = ["TransactionPersistence"]
