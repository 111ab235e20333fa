"""Stored ledger documents."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import ClassVar

from sqlalchemy import Column, Text
from sqlmodel import Field, SQLModel


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class LedgerDocument(SQLModel, table=True):
    """One serialized transaction collection, addressed by its storage key.

    ``payload`` is always a JSON array of transaction records and is
    rewritten in full on every save.
    """

    __tablename__: ClassVar[str] = "ledger_document"

    storage_key: str = Field(primary_key=True, max_length=64)
    payload: str = Field(sa_column=Column(Text, nullable=False))
    record_count: int = Field(default=0, ge=0)
    updated_at: datetime = Field(default_factory=_utcnow, nullable=False)
