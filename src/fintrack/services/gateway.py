"""AI gateway: budget insights and receipt extraction.

The rest of the app talks to a ``GatewayProvider`` only through the two
request functions below. They own the response policy:

* insights are advisory, so any failure yields ``FALLBACK_INSIGHTS``;
* receipt extraction has no safe default, so failures raise
  ``ReceiptExtractionError``.
"""

from __future__ import annotations

import datetime as dt
import json
from typing import Any, Optional, Protocol, Sequence

from pydantic import BaseModel, ConfigDict, Field, ValidationError, ValidationInfo, field_validator

from ..constants.categories import parse_category
from ..errors import ReceiptExtractionError
from ..logging_config import get_logger
from ..models.budget import BudgetGoalSet
from ..models.transaction import Transaction, TransactionDraft, TransactionType

logger = get_logger("services.gateway")

INSIGHT_HISTORY_LIMIT = 20

FALLBACK_INSIGHTS: tuple[str, ...] = (
    "Stay mindful of your daily expenses.",
    "Check your subscription services for potential savings.",
    "Great job keeping track of your income!",
)

INSIGHT_PROMPT = """
I have the following budget transactions:
{transactions}

And the following monthly budget limits:
{budgets}

Please provide 3-4 short, actionable insights or tips based on my spending patterns.
Focus on areas where I might be overspending or could save. Keep the tone professional but friendly.
Return only a JSON array of strings.
"""

RECEIPT_PROMPT = (
    "Analyze this receipt image and extract the total amount, the name of the store/merchant, "
    "the date (YYYY-MM-DD) and the best matching category from this list: {categories}. "
    "Return the data in a structured JSON format."
)


class GatewayProvider(Protocol):
    """Provider-specific transport. Both calls return the raw response text."""

    def generate_insights(self, prompt: str) -> Optional[str]:  # pragma: no cover - interface
        ...

    def extract_receipt(
        self,
        image_bytes: bytes,
        mime_type: str,
        prompt: str,
        categories: Sequence[str],
    ) -> Optional[str]:  # pragma: no cover - interface
        ...


class ReceiptDraft(BaseModel):
    """Structured data read from a receipt, pending user confirmation."""

    model_config = ConfigDict(str_strip_whitespace=True)

    amount: float = Field(ge=0, allow_inf_nan=False)
    merchant: str = Field(min_length=1)
    date: dt.date
    category: str

    @field_validator("category")
    @classmethod
    def category_in_vocabulary(cls, value: str, info: ValidationInfo) -> str:
        allowed = (info.context or {}).get("categories")
        if allowed is not None and value not in allowed:
            raise ValueError(f"Category {value!r} is not one of the supplied categories.")
        return value

    def to_transaction_draft(self) -> TransactionDraft:
        """Pre-fill data for the entry form."""

        return TransactionDraft(
            amount=self.amount,
            category=parse_category(self.category),
            description=self.merchant,
            date=self.date,
            type=TransactionType.EXPENSE,
        )


def _insight_prompt(
    transactions: Sequence[Transaction], budgets: BudgetGoalSet, history_limit: int
) -> str:
    recent = [tx.to_record() for tx in transactions[:history_limit]]
    return INSIGHT_PROMPT.format(
        transactions=json.dumps(recent, ensure_ascii=False),
        budgets=json.dumps(budgets.to_records(), ensure_ascii=False),
    )


def _parse_insights(text: Optional[str]) -> list[str]:
    if not text:
        raise ValueError("Empty response from provider")
    payload: Any = json.loads(text)
    if not isinstance(payload, list) or not all(isinstance(item, str) for item in payload):
        raise ValueError("Provider response is not a JSON array of strings")
    return payload


def request_insights(
    provider: Optional[GatewayProvider],
    transactions: Sequence[Transaction],
    budgets: BudgetGoalSet,
    *,
    history_limit: int = INSIGHT_HISTORY_LIMIT,
) -> list[str]:
    """Ask the provider for short budget tips.

    ``transactions`` is a most-recent-first snapshot; only the first
    ``history_limit`` entries are sent. Never raises.
    """

    if provider is None:
        logger.info("No AI provider configured; serving fallback insights")
        return list(FALLBACK_INSIGHTS)

    try:
        text = provider.generate_insights(_insight_prompt(transactions, budgets, history_limit))
        insights = _parse_insights(text)
    except Exception as exc:  # noqa: BLE001
        logger.warning(
            "Insight request failed; serving fallback",
            extra={"error": repr(exc)},
        )
        return list(FALLBACK_INSIGHTS)

    logger.info("Insights received", extra={"count": len(insights)})
    return insights


def request_receipt_extraction(
    provider: Optional[GatewayProvider],
    image_bytes: bytes,
    mime_type: str,
    valid_categories: Sequence[str],
) -> ReceiptDraft:
    """Extract ``amount``, ``merchant``, ``date`` and ``category`` from an image.

    Raises:
        ReceiptExtractionError: provider failure, empty or unparseable
            response, missing keys or a category outside ``valid_categories``
    """

    if provider is None:
        raise ReceiptExtractionError("No AI provider configured for receipt extraction")

    categories = list(valid_categories)
    prompt = RECEIPT_PROMPT.format(categories=", ".join(categories))
    try:
        text = provider.extract_receipt(image_bytes, mime_type, prompt, categories)
    except Exception as exc:
        logger.error("Receipt extraction failed", exc_info=True)
        raise ReceiptExtractionError(f"Provider error: {exc}") from exc

    if not text:
        logger.error("Receipt extraction returned an empty response")
        raise ReceiptExtractionError("Empty response from AI")

    try:
        draft = ReceiptDraft.model_validate_json(text, context={"categories": categories})
    except ValidationError as exc:
        logger.error("Receipt extraction response rejected", extra={"errors": exc.errors(include_url=False)})
        raise ReceiptExtractionError(f"Invalid extraction response: {exc}") from exc

    logger.info(
        "Receipt extracted",
        extra={"merchant": draft.merchant, "category": draft.category},
    )
    return draft


__all__ = [
    "FALLBACK_INSIGHTS",
    "GatewayProvider",
    "INSIGHT_HISTORY_LIMIT",
    "ReceiptDraft",
    "request_insights",
    "request_receipt_extraction",
]
