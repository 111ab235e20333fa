"""Application context for dependency injection."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from .config import BaseConfig
from .infra.database import LedgerDatabase, bootstrap_database
from .infra.repositories import SQLModelTransactionPersistence
from .logging_config import get_logger
from .models.budget import BudgetGoalSet
from .models.transaction import TransactionDraft
from .services.demo_seed import seed_demo_ledger
from .services.gateway import GatewayProvider
from .services.gemini import build_provider
from .services.ledger import TransactionStore

logger = get_logger("context")


class View(str, Enum):
    DASHBOARD = "dashboard"
    TRANSACTIONS = "transactions"
    STATS = "stats"
    AI_ADVISOR = "ai_advisor"


@dataclass
class AppState:
    """Mutable UI state owned by the presentation layer."""

    active_view: View = View.DASHBOARD
    entry_form_open: bool = False
    scanning: bool = False
    loading_insights: bool = False
    scanned_draft: Optional[TransactionDraft] = None
    insights: list[str] = field(default_factory=list)


@dataclass
class AppContext:
    """Centralized application context with services and state."""

    config: BaseConfig
    store: TransactionStore
    budgets: BudgetGoalSet
    provider: Optional[GatewayProvider]
    state: AppState = field(default_factory=AppState)
    database: Optional[LedgerDatabase] = None
    persistence: Optional[SQLModelTransactionPersistence] = None

    def close(self) -> None:
        if self.database is not None:
            self.database.dispose()


def create_app_context(
    config: Optional[BaseConfig] = None,
    *,
    provider: Optional[GatewayProvider] = None,
    budgets: Optional[BudgetGoalSet] = None,
) -> AppContext:
    """Create and initialize the application context.

    ``provider`` overrides the configured AI provider; when omitted it is
    built from ``config``. With ``SEED_DEMO_DATA`` set, a ledger that has
    never been saved starts with the demo transactions.
    """

    if config is None:
        config = BaseConfig()

    database = bootstrap_database(config)
    persistence = SQLModelTransactionPersistence(
        database.session_factory, storage_key=config.STORAGE_KEY
    )
    store = TransactionStore(persistence)
    if config.SEED_DEMO_DATA:
        seed_demo_ledger(store)

    ctx = AppContext(
        config=config,
        store=store,
        budgets=budgets if budgets is not None else BudgetGoalSet.defaults(),
        provider=provider if provider is not None else build_provider(config),
        database=database,
        persistence=persistence,
    )
    logger.info(
        "Application context ready",
        extra={"transactions": len(store), "gateway_enabled": ctx.provider is not None},
    )
    return ctx
