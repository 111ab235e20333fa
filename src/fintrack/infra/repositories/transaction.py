"""Transaction persistence backed by a single ledger document."""

from __future__ import annotations

import json
from datetime import datetime, timezone
from typing import Callable, ContextManager, Optional, Sequence

from sqlmodel import Session

from ...logging_config import get_logger
from ...models.document import LedgerDocument
from ...models.transaction import Transaction

logger = get_logger("infra.transactions")

SessionFactory = Callable[[], ContextManager[Session]]


def _serialize(transactions: Sequence[Transaction]) -> str:
    # allow_nan=False keeps the payload strict JSON
    return json.dumps([tx.to_record() for tx in transactions], ensure_ascii=False, allow_nan=False)


def _deserialize(payload: str, *, source: str) -> list[Transaction]:
    records = json.loads(payload)
    if not isinstance(records, list):
        raise ValueError(f"Stored value for {source!r} is not a JSON array")
    return [Transaction.from_record(record) for record in records]


class SQLModelTransactionPersistence:
    """Stores the whole ledger as a JSON array in one ``ledger_document`` row."""

    def __init__(self, session_factory: SessionFactory, *, storage_key: str):
        self.session_factory = session_factory
        self.storage_key = storage_key

    def read_payload(self) -> Optional[str]:
        """Raw stored JSON, or None before the first save."""

        with self.session_factory() as session:
            document = session.get(LedgerDocument, self.storage_key)
            return document.payload if document is not None else None

    def write_payload(self, payload: str, *, record_count: int = 0) -> None:
        with self.session_factory() as session:
            document = session.get(LedgerDocument, self.storage_key)
            if document is None:
                document = LedgerDocument(storage_key=self.storage_key, payload=payload)
            document.payload = payload
            document.record_count = record_count
            document.updated_at = datetime.now(timezone.utc)
            session.add(document)
            session.commit()

    def exists(self) -> bool:
        return self.read_payload() is not None

    def load(self) -> list[Transaction]:
        payload = self.read_payload()
        if not payload:
            return []
        transactions = _deserialize(payload, source=self.storage_key)
        logger.info(
            "Loaded transactions",
            extra={"storage_key": self.storage_key, "count": len(transactions)},
        )
        return transactions

    def save(self, transactions: Sequence[Transaction]) -> None:
        self.write_payload(_serialize(transactions), record_count=len(transactions))
        logger.debug(
            "Persisted transactions",
            extra={"storage_key": self.storage_key, "count": len(transactions)},
        )


class InMemoryTransactionPersistence:
    """Keeps the serialized ledger in memory; used by tests and dry runs."""

    def __init__(self, initial: Optional[Sequence[Transaction]] = None):
        self.payload: Optional[str] = _serialize(initial) if initial is not None else None
        self.save_count = 0

    def exists(self) -> bool:
        return self.payload is not None

    def load(self) -> list[Transaction]:
        if self.payload is None:
            return []
        return _deserialize(self.payload, source="memory")

    def save(self, transactions: Sequence[Transaction]) -> None:
        self.payload = _serialize(transactions)
        self.save_count += 1
