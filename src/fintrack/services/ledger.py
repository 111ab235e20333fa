"""In-process transaction store shadowed by durable persistence."""

from __future__ import annotations

from typing import Callable, Iterable, Optional
from uuid import uuid4

from ..domain.repositories import TransactionPersistence
from ..logging_config import get_logger
from ..models.transaction import Transaction, TransactionDraft

logger = get_logger("services.ledger")


def _new_transaction_id() -> str:
    return uuid4().hex


class TransactionStore:
    """Ordered collection of recorded transactions, most recent first.

    Every completed ``append``/``remove`` is visible to the next
    ``snapshot()`` and has already been written to ``persistence``. A
    mutation whose save raises leaves the store unchanged.
    """

    def __init__(
        self,
        persistence: TransactionPersistence,
        *,
        id_factory: Optional[Callable[[], str]] = None,
    ) -> None:
        self._persistence = persistence
        self._id_factory = id_factory or _new_transaction_id
        self._transactions: list[Transaction] = list(persistence.load())
        self._issued_ids: set[str] = {tx.id for tx in self._transactions}

    def _next_id(self) -> str:
        candidate = self._id_factory()
        while candidate in self._issued_ids:
            candidate = self._id_factory()
        self._issued_ids.add(candidate)
        return candidate

    def append(self, draft: TransactionDraft) -> Transaction:
        """Record a validated draft at the head of the ledger and persist."""

        transaction = Transaction.from_draft(draft, transaction_id=self._next_id())
        updated = [transaction, *self._transactions]
        self._persistence.save(updated)
        self._transactions = updated
        logger.info(
            "Transaction recorded",
            extra={
                "transaction_id": transaction.id,
                "category": transaction.category.value,
                "type": transaction.type.value,
            },
        )
        return transaction

    def append_many(self, drafts: Iterable[TransactionDraft]) -> list[Transaction]:
        """Record drafts in order, oldest first, with a single save."""

        created = [
            Transaction.from_draft(draft, transaction_id=self._next_id()) for draft in drafts
        ]
        updated = [*reversed(created), *self._transactions]
        self._persistence.save(updated)
        self._transactions = updated
        logger.info("Transactions recorded", extra={"count": len(created)})
        return created

    def has_saved_ledger(self) -> bool:
        """True once the backing store holds a ledger, even an empty one."""

        return self._persistence.exists()

    def remove(self, transaction_id: str) -> bool:
        """Delete the matching transaction; unknown ids are ignored.

        Returns True when something was removed.
        """

        remaining = [tx for tx in self._transactions if tx.id != transaction_id]
        if len(remaining) == len(self._transactions):
            logger.debug("Remove ignored for unknown id", extra={"transaction_id": transaction_id})
            return False
        self._persistence.save(remaining)
        self._transactions = remaining
        logger.info("Transaction removed", extra={"transaction_id": transaction_id})
        return True

    def snapshot(self) -> tuple[Transaction, ...]:
        """Immutable point-in-time view of all transactions."""

        return tuple(self._transactions)

    def recent(self, limit: int) -> tuple[Transaction, ...]:
        """The ``limit`` most recently recorded transactions."""

        return tuple(self._transactions[: max(0, limit)])

    def __len__(self) -> int:
        return len(self._transactions)
