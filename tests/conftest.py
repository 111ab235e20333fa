"""Pytest configuration and shared fixtures for FinTrack tests.

Provides a temporary SQLite database, repository/persistence fixtures,
transaction factories and scripted AI providers so tests never touch the
real app database or a network service.
"""

from __future__ import annotations

import tempfile
from datetime import date
from pathlib import Path
from typing import Optional, Sequence

import pytest
from sqlmodel import SQLModel, create_engine

from fintrack.config import BaseConfig, TestConfig
from fintrack.constants.categories import Category
from fintrack.context import create_app_context
from fintrack.infra.database import session_factory_for
from fintrack.infra.repositories import (
    InMemoryTransactionPersistence,
    SQLModelTransactionPersistence,
)
from fintrack.models import LedgerDocument  # noqa: F401  # register table metadata
from fintrack.models.budget import BudgetGoalSet
from fintrack.models.transaction import Transaction, TransactionDraft, TransactionType
from fintrack.services.ledger import TransactionStore

STORAGE_KEY = BaseConfig.STORAGE_KEY


# =============================================================================
# Database Fixtures
# =============================================================================


@pytest.fixture(scope="function")
def db_engine():
    """Create an isolated SQLite database file for each test."""
    with tempfile.NamedTemporaryFile(suffix=".db", delete=False) as f:
        db_path = Path(f.name)

    engine = create_engine(f"sqlite:///{db_path}", echo=False)
    SQLModel.metadata.create_all(engine)

    yield engine

    engine.dispose()
    db_path.unlink(missing_ok=True)


@pytest.fixture(scope="function")
def session_factory(db_engine):
    """Committing session factory, the same one the app builds."""
    return session_factory_for(db_engine)


@pytest.fixture
def ledger_persistence(session_factory) -> SQLModelTransactionPersistence:
    return SQLModelTransactionPersistence(session_factory, storage_key=STORAGE_KEY)


@pytest.fixture
def memory_persistence() -> InMemoryTransactionPersistence:
    return InMemoryTransactionPersistence()


@pytest.fixture
def store(memory_persistence) -> TransactionStore:
    return TransactionStore(memory_persistence)


# =============================================================================
# Test Data Factories
# =============================================================================


@pytest.fixture
def make_tx():
    """Factory for in-memory transactions with sensible defaults."""

    counter = {"n": 0}

    def _make(
        amount: float,
        category: Category = Category.OUTROS,
        type: TransactionType = TransactionType.EXPENSE,
        description: str = "",
        on: date = date(2024, 1, 1),
        tx_id: Optional[str] = None,
    ) -> Transaction:
        counter["n"] += 1
        return Transaction(
            id=tx_id or f"tx-{counter['n']}",
            amount=amount,
            category=category,
            description=description or category.value,
            date=on,
            type=type,
        )

    return _make


@pytest.fixture
def make_draft():
    def _make(
        amount: float = 10.0,
        category: Category = Category.OUTROS,
        type: TransactionType = TransactionType.EXPENSE,
        description: str = "",
        on: date = date(2024, 1, 1),
    ) -> TransactionDraft:
        return TransactionDraft(
            amount=amount,
            category=category,
            description=description or category.value,
            date=on,
            type=type,
        )

    return _make


@pytest.fixture
def default_budgets() -> BudgetGoalSet:
    return BudgetGoalSet.defaults()


# =============================================================================
# Gateway Providers
# =============================================================================


class ScriptedProvider:
    """Provider double returning canned text or raising a canned error."""

    def __init__(
        self,
        *,
        insights: Optional[str] = None,
        receipt: Optional[str] = None,
        error: Optional[Exception] = None,
    ):
        self.insights = insights
        self.receipt = receipt
        self.error = error
        self.prompts: list[str] = []
        self.receipt_calls: list[tuple[bytes, str, list[str]]] = []

    def generate_insights(self, prompt: str) -> Optional[str]:
        self.prompts.append(prompt)
        if self.error is not None:
            raise self.error
        return self.insights

    def extract_receipt(
        self, image_bytes: bytes, mime_type: str, prompt: str, categories: Sequence[str]
    ) -> Optional[str]:
        self.prompts.append(prompt)
        self.receipt_calls.append((image_bytes, mime_type, list(categories)))
        if self.error is not None:
            raise self.error
        return self.receipt


@pytest.fixture
def scripted_provider():
    return ScriptedProvider


# =============================================================================
# Application Context
# =============================================================================


@pytest.fixture
def test_config(tmp_path) -> TestConfig:
    return TestConfig(tmp_path / "instance")


@pytest.fixture
def app_context(test_config):
    """Fully wired context on a temporary database with no AI provider."""

    ctx = create_app_context(test_config)
    yield ctx
    ctx.close()
