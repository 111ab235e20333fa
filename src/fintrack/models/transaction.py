"""Ledger transaction records."""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Any, Mapping

from ..constants.categories import Category, parse_category


class TransactionType(str, Enum):
    """Direction of a transaction's cash-flow impact."""

    INCOME = "income"
    EXPENSE = "expense"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True, slots=True)
class TransactionDraft:
    """A validated transaction that has not been assigned an id yet."""

    amount: float
    category: Category
    description: str
    date: date
    type: TransactionType = TransactionType.EXPENSE


@dataclass(frozen=True, slots=True)
class Transaction:
    """A single recorded income or expense event.

    ``amount`` is always non-negative; ``type`` carries the sign.
    """

    id: str
    amount: float
    category: Category
    description: str
    date: date
    type: TransactionType

    @classmethod
    def from_draft(cls, draft: TransactionDraft, *, transaction_id: str) -> Transaction:
        return cls(
            id=transaction_id,
            amount=draft.amount,
            category=draft.category,
            description=draft.description,
            date=draft.date,
            type=draft.type,
        )

    @property
    def is_income(self) -> bool:
        return self.type is TransactionType.INCOME

    @property
    def is_expense(self) -> bool:
        return self.type is TransactionType.EXPENSE

    def to_record(self) -> dict[str, Any]:
        """Return the JSON-friendly persisted shape."""

        return {
            "id": self.id,
            "amount": self.amount,
            "category": self.category.value,
            "description": self.description,
            "date": self.date.isoformat(),
            "type": self.type.value,
        }

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> Transaction:
        """Rebuild a transaction from its persisted shape.

        Raises ``KeyError``/``ValueError`` when the record is malformed or
        its amount is negative or not finite.
        """

        category = parse_category(record["category"])
        amount = float(record["amount"])
        if not math.isfinite(amount) or amount < 0:
            raise ValueError(f"Invalid stored amount: {record['amount']!r}")
        return cls(
            id=str(record["id"]),
            amount=amount,
            category=category,
            description=str(record.get("description") or category.value),
            date=date.fromisoformat(str(record["date"])),
            type=TransactionType(record.get("type", TransactionType.EXPENSE.value)),
        )
