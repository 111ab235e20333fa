"""Controller helpers for the primary user actions.

Controllers are the only code that mutates ``AppState``; the aggregation
functions they call stay pure.
"""

from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Iterator, Mapping

from .constants.categories import CATEGORY_NAMES, DAILY_SPENDING_GROUP, FIXED_COSTS_GROUP
from .context import AppContext, View
from .errors import GatewayBusyError, ReceiptExtractionError
from .forms.transaction import validate_transaction
from .logging_config import get_logger
from .models.transaction import Transaction, TransactionDraft
from .services import budgeting, demo_seed, gateway

logger = get_logger("controllers")

DASHBOARD_RECENT_LIMIT = 3


@dataclass(frozen=True, slots=True)
class DashboardSummary:
    totals: budgeting.Totals
    recent: tuple[Transaction, ...]


@dataclass(frozen=True, slots=True)
class VariancePanel:
    """Both report groupings of the budget panel."""

    daily_spending: list[budgeting.BudgetVariance]
    fixed_costs: list[budgeting.BudgetVariance]


@contextmanager
def _busy(ctx: AppContext, flag: str) -> Iterator[None]:
    """Hold ``flag`` on the app state for one gateway call; refuse re-entry."""

    if getattr(ctx.state, flag):
        raise GatewayBusyError(f"A request is already in progress ({flag})")
    setattr(ctx.state, flag, True)
    try:
        yield
    finally:
        setattr(ctx.state, flag, False)


def _show(ctx: AppContext, view: View) -> None:
    ctx.state.active_view = view


def add_transaction(ctx: AppContext, data: Mapping[str, Any]) -> Transaction:
    """Validate form input, record it and close the entry form."""

    draft = validate_transaction(data)
    transaction = ctx.store.append(draft)
    ctx.state.scanned_draft = None
    ctx.state.entry_form_open = False
    return transaction


def delete_transaction(ctx: AppContext, transaction_id: str) -> bool:
    return ctx.store.remove(transaction_id)


def transaction_history(ctx: AppContext) -> tuple[Transaction, ...]:
    """Every transaction, most recent first."""

    _show(ctx, View.TRANSACTIONS)
    return ctx.store.snapshot()


def dashboard_summary(ctx: AppContext) -> DashboardSummary:
    _show(ctx, View.DASHBOARD)
    snapshot = ctx.store.snapshot()
    return DashboardSummary(
        totals=budgeting.compute_totals(snapshot),
        recent=ctx.store.recent(DASHBOARD_RECENT_LIMIT),
    )


def variance_panel(ctx: AppContext) -> VariancePanel:
    _show(ctx, View.STATS)
    snapshot = ctx.store.snapshot()
    return VariancePanel(
        daily_spending=budgeting.compute_variance_report(
            DAILY_SPENDING_GROUP, snapshot, ctx.budgets
        ),
        fixed_costs=budgeting.compute_variance_report(FIXED_COSTS_GROUP, snapshot, ctx.budgets),
    )


def spending_breakdown(ctx: AppContext) -> list[budgeting.CategorySlice]:
    """Chart series for the stats view, largest slice first."""

    _show(ctx, View.STATS)
    slices = budgeting.category_breakdown(ctx.store.snapshot())
    return sorted(slices, key=lambda s: s.value, reverse=True)


def seed_demo(ctx: AppContext) -> int:
    return demo_seed.seed_demo_ledger(ctx.store)


def fetch_insights(ctx: AppContext) -> list[str]:
    """Refresh the insight feed. Falls back to static tips on provider failure."""

    _show(ctx, View.AI_ADVISOR)
    with _busy(ctx, "loading_insights"):
        insights = gateway.request_insights(
            ctx.provider,
            ctx.store.snapshot(),
            ctx.budgets,
            history_limit=ctx.config.INSIGHT_HISTORY_LIMIT,
        )
    ctx.state.insights = insights
    return insights


def scan_receipt(ctx: AppContext, image_bytes: bytes, mime_type: str) -> TransactionDraft:
    """Extract a draft from a receipt image and open the entry form pre-filled.

    Raises:
        ReceiptExtractionError: the form is left closed and empty
    """

    with _busy(ctx, "scanning"):
        try:
            receipt = gateway.request_receipt_extraction(
                ctx.provider, image_bytes, mime_type, CATEGORY_NAMES
            )
        except ReceiptExtractionError:
            ctx.state.scanned_draft = None
            raise
    draft = receipt.to_transaction_draft()
    ctx.state.scanned_draft = draft
    ctx.state.entry_form_open = True
    logger.info("Receipt draft ready for review", extra={"merchant": draft.description})
    return draft


def confirm_scanned_draft(ctx: AppContext, overrides: Mapping[str, Any] | None = None) -> Transaction:
    """Commit the reviewed receipt draft, applying any user edits."""

    draft = ctx.state.scanned_draft
    if draft is None:
        raise ValueError("No scanned receipt awaiting confirmation")
    data: dict[str, Any] = {
        "amount": draft.amount,
        "type": draft.type.value,
        "category": draft.category.value,
        "description": draft.description,
        "date": draft.date.isoformat(),
    }
    data.update(overrides or {})
    return add_transaction(ctx, data)
