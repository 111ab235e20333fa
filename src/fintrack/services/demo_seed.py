"""Demo ledger for first runs and screenshots."""

from __future__ import annotations

from datetime import date, timedelta
from typing import Optional

from ..constants.categories import Category
from ..logging_config import get_logger
from ..models.transaction import TransactionDraft, TransactionType
from .ledger import TransactionStore

logger = get_logger("services.demo_seed")

# (days before today, amount, category, description, type), oldest first
_DEMO_ROWS: tuple[tuple[int, float, Category, str, TransactionType], ...] = (
    (6, 5200.0, Category.SERVICOS, "Salário", TransactionType.INCOME),
    (6, 450.0, Category.CONTAS, "Luz e internet", TransactionType.EXPENSE),
    (5, 32.5, Category.ALIMENTACAO, "Almoço", TransactionType.EXPENSE),
    (4, 14.9, Category.TRANSPORTE, "Uber", TransactionType.EXPENSE),
    (3, 55.0, Category.ASSINATURAS, "Streaming", TransactionType.EXPENSE),
    (2, 9.8, Category.FARMACIA, "Farmácia", TransactionType.EXPENSE),
    (1, 18.0, Category.PET, "Ração", TransactionType.EXPENSE),
    (0, 120.0, Category.SERVICOS, "Freelance", TransactionType.INCOME),
)


def demo_drafts(today: Optional[date] = None) -> list[TransactionDraft]:
    """Demo transactions dated relative to ``today``, oldest first."""

    anchor = today or date.today()
    return [
        TransactionDraft(
            amount=amount,
            category=category,
            description=description,
            date=anchor - timedelta(days=days_ago),
            type=kind,
        )
        for days_ago, amount, category, description, kind in _DEMO_ROWS
    ]


def seed_demo_ledger(store: TransactionStore, *, today: Optional[date] = None) -> int:
    """Fill a never-saved ledger with demo data; returns how many were added.

    A ledger that was saved before, even one emptied by the user, is left
    alone so seeding can be re-run safely.
    """

    if store.has_saved_ledger():
        logger.info("Demo seed skipped: ledger already saved")
        return 0
    created = store.append_many(demo_drafts(today))
    logger.info("Demo ledger seeded", extra={"count": len(created)})
    return len(created)
