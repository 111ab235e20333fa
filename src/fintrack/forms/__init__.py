"""Data-entry forms."""

from .transaction import TransactionForm, validate_transaction

__all__ = ["TransactionForm", "validate_transaction"]
