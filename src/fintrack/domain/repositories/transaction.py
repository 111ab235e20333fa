"""Transaction persistence protocol."""

from __future__ import annotations

from typing import Protocol, Sequence

from ...models.transaction import Transaction


class TransactionPersistence(Protocol):
    """Durable shadow of the transaction store.

    Implementations always rewrite the full collection; there is no
    incremental format.
    """

    def exists(self) -> bool:
        """True once a collection has been saved, even an empty one."""
        ...

    def load(self) -> list[Transaction]:
        """Return the persisted transactions in stored order."""
        ...

    def save(self, transactions: Sequence[Transaction]) -> None:
        """Replace the persisted collection with ``transactions``."""
        ...
