"""Domain records and SQLModel table exports."""

from .budget import BudgetGoal, BudgetGoalSet
from .document import LedgerDocument
from .transaction import Transaction, TransactionDraft, TransactionType

__all__ = [
    "BudgetGoal",
    "BudgetGoalSet",
    "LedgerDocument",
    "Transaction",
    "TransactionDraft",
    "TransactionType",
]
