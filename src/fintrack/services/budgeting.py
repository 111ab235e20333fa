"""Budget aggregation and variance reporting.

Every function here is pure: it takes a snapshot of transactions (and
budgets where relevant) and computes a fresh result. Nothing is cached and
no state survives between calls. Inputs are assumed to be validated
(non-negative amounts, registry categories).
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from enum import Enum
from typing import Iterable, Sequence

from ..constants.categories import Category, category_color, parse_category
from ..models.budget import BudgetGoalSet
from ..models.transaction import Transaction, TransactionType


class VarianceStatus(str, Enum):
    """Three-way classification of a variance value."""

    OVER = "over"
    UNDER = "under"
    ON_BUDGET = "on_budget"


def classify(value: float) -> VarianceStatus:
    """Positive is over budget, negative under, zero on budget."""

    if value > 0:
        return VarianceStatus.OVER
    if value < 0:
        return VarianceStatus.UNDER
    return VarianceStatus.ON_BUDGET


@dataclass(frozen=True, slots=True)
class Totals:
    """All-time income, expense and balance for a snapshot."""

    income: float
    expense: float
    balance: float


@dataclass(frozen=True, slots=True)
class BudgetVariance:
    """Budget vs actual spend for one category."""

    category: Category
    limit: float
    actual: float
    variance_percent: int
    variance_absolute: float

    @property
    def percent_status(self) -> VarianceStatus:
        return classify(self.variance_percent)

    @property
    def absolute_status(self) -> VarianceStatus:
        return classify(self.variance_absolute)


@dataclass(frozen=True, slots=True)
class CategorySlice:
    """One slice of the category-breakdown chart series."""

    category: Category
    value: float
    share: float
    color: str


def _sum_amounts(transactions: Iterable[Transaction], kind: TransactionType) -> float:
    return sum((tx.amount for tx in transactions if tx.type is kind), 0.0)


def compute_totals(transactions: Iterable[Transaction]) -> Totals:
    """Return income, expense and balance over the whole snapshot."""

    txs = list(transactions)
    income = _sum_amounts(txs, TransactionType.INCOME)
    expense = _sum_amounts(txs, TransactionType.EXPENSE)
    return Totals(income=income, expense=expense, balance=income - expense)


def compute_category_spend(transactions: Iterable[Transaction]) -> dict[Category, float]:
    """Roll up expense totals by category.

    Categories with no expense transactions are absent from the result. Key
    order follows first appearance in the snapshot and carries no meaning.
    """

    totals: dict[Category, float] = {}
    for tx in transactions:
        if not tx.is_expense:
            continue
        totals[tx.category] = totals.get(tx.category, 0.0) + tx.amount
    return totals


def round_half_away_from_zero(value: Decimal) -> int:
    """Round to the nearest integer; ``x.5`` ties move away from zero."""

    return int(value.quantize(Decimal(1), rounding=ROUND_HALF_UP))


def variance_percent(actual: float, limit: float) -> int:
    """Percentage over (positive) or under (negative) ``limit``.

    A zero limit reports 100 when anything was spent and 0 otherwise.
    Arithmetic runs on decimals built from the amounts' shortest repr, so a
    tie such as 12.5 is not shifted by binary float error before rounding.
    """

    if limit == 0:
        return 100 if actual > 0 else 0
    actual_dec = Decimal(repr(float(actual)))
    limit_dec = Decimal(repr(float(limit)))
    return round_half_away_from_zero((actual_dec - limit_dec) / limit_dec * 100)


def compute_variance(
    category: Category | str,
    transactions: Iterable[Transaction],
    budgets: BudgetGoalSet,
) -> BudgetVariance:
    """Compare a category's expense total with its budget goal.

    Defined for every category: one without a goal has limit 0, one without
    transactions has actual 0. A plain category name is accepted and
    resolved against the registry.
    """

    category = parse_category(category)
    limit = budgets.limit_for(category)
    actual = sum(
        (
            tx.amount
            for tx in transactions
            if tx.is_expense and tx.category is category
        ),
        0.0,
    )
    return BudgetVariance(
        category=category,
        limit=limit,
        actual=actual,
        variance_percent=variance_percent(actual, limit),
        variance_absolute=actual - limit,
    )


def compute_variance_report(
    categories: Iterable[Category | str],
    transactions: Iterable[Transaction],
    budgets: BudgetGoalSet,
) -> list[BudgetVariance]:
    """Return one variance row per category, in the order given."""

    snapshot: Sequence[Transaction] = tuple(transactions)
    return [compute_variance(category, snapshot, budgets) for category in categories]


def category_breakdown(transactions: Iterable[Transaction]) -> list[CategorySlice]:
    """Build the chart series: expense per category with its share of the total."""

    spend = compute_category_spend(transactions)
    grand_total = sum(spend.values(), 0.0)
    return [
        CategorySlice(
            category=category,
            value=value,
            share=(value / grand_total * 100) if grand_total > 0 else 0.0,
            color=category_color(category),
        )
        for category, value in spend.items()
    ]


__all__ = [
    "BudgetVariance",
    "CategorySlice",
    "Totals",
    "VarianceStatus",
    "category_breakdown",
    "classify",
    "compute_category_spend",
    "compute_totals",
    "compute_variance",
    "compute_variance_report",
    "round_half_away_from_zero",
    "variance_percent",
]
