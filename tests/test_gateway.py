"""Tests for the insight and receipt extraction gateway."""

from __future__ import annotations

import json
from datetime import date

import pytest

from fintrack.constants.categories import CATEGORY_NAMES, Category
from fintrack.errors import ReceiptExtractionError
from fintrack.models.budget import BudgetGoalSet
from fintrack.models.transaction import TransactionType
from fintrack.services import gateway


@pytest.fixture
def ledger(make_tx):
    # most-recent-first, like a store snapshot
    return [make_tx(float(n), Category.PET, tx_id=f"tx-{n}") for n in range(30, 0, -1)]


class TestRequestInsights:
    def test_returns_provider_strings(self, scripted_provider, ledger, default_budgets):
        provider = scripted_provider(insights=json.dumps(["Cut pet treats", "Nice job"]))

        result = gateway.request_insights(provider, ledger, default_budgets)

        assert result == ["Cut pet treats", "Nice job"]

    def test_prompt_carries_recent_twenty_and_all_budgets(
        self, scripted_provider, ledger, default_budgets
    ):
        provider = scripted_provider(insights="[]")

        gateway.request_insights(provider, ledger, default_budgets)

        prompt = provider.prompts[0]
        assert '"tx-30"' in prompt
        assert '"tx-11"' in prompt
        assert '"tx-10"' not in prompt
        assert '"Fotografia"' in prompt

    def test_history_limit_is_configurable(self, scripted_provider, ledger, default_budgets):
        provider = scripted_provider(insights="[]")

        gateway.request_insights(provider, ledger, default_budgets, history_limit=2)

        assert '"tx-29"' in provider.prompts[0]
        assert '"tx-28"' not in provider.prompts[0]

    def test_provider_error_yields_fallback(self, scripted_provider, ledger, default_budgets):
        provider = scripted_provider(error=RuntimeError("quota exceeded"))

        result = gateway.request_insights(provider, ledger, default_budgets)

        assert result == list(gateway.FALLBACK_INSIGHTS)
        assert len(result) == 3

    @pytest.mark.parametrize("text", [None, "", "not json", '{"tip": "x"}', "[1, 2]"])
    def test_bad_response_yields_fallback(self, scripted_provider, text, default_budgets):
        provider = scripted_provider(insights=text)

        assert gateway.request_insights(provider, [], default_budgets) == list(
            gateway.FALLBACK_INSIGHTS
        )

    def test_missing_provider_yields_fallback(self, default_budgets):
        assert gateway.request_insights(None, [], default_budgets) == list(
            gateway.FALLBACK_INSIGHTS
        )

    def test_fallback_is_a_fresh_list(self, default_budgets):
        first = gateway.request_insights(None, [], default_budgets)
        first.append("mutated")

        assert gateway.request_insights(None, [], default_budgets) == list(
            gateway.FALLBACK_INSIGHTS
        )


class TestReceiptExtraction:
    def _payload(self, **overrides):
        data = {"amount": 37.9, "merchant": "Drogasil", "date": "2024-02-10", "category": "Farmácia"}
        data.update(overrides)
        return json.dumps({k: v for k, v in data.items() if v is not None})

    def test_parses_valid_response(self, scripted_provider):
        provider = scripted_provider(receipt=self._payload())

        draft = gateway.request_receipt_extraction(
            provider, b"\x89PNG", "image/png", CATEGORY_NAMES
        )

        assert draft.amount == pytest.approx(37.9)
        assert draft.merchant == "Drogasil"
        assert draft.date == date(2024, 2, 10)
        assert draft.category == "Farmácia"
        image, mime_type, categories = provider.receipt_calls[0]
        assert (image, mime_type) == (b"\x89PNG", "image/png")
        assert categories == CATEGORY_NAMES

    def test_draft_prefills_an_expense(self, scripted_provider):
        provider = scripted_provider(receipt=self._payload())

        draft = gateway.request_receipt_extraction(provider, b"img", "image/jpeg", CATEGORY_NAMES)
        entry = draft.to_transaction_draft()

        assert entry.type is TransactionType.EXPENSE
        assert entry.category is Category.FARMACIA
        assert entry.description == "Drogasil"

    def test_missing_category_fails(self, scripted_provider):
        provider = scripted_provider(receipt=self._payload(category=None))

        with pytest.raises(ReceiptExtractionError):
            gateway.request_receipt_extraction(provider, b"img", "image/jpeg", CATEGORY_NAMES)

    @pytest.mark.parametrize("amount", ["Infinity", "NaN", "-4.5"])
    def test_non_finite_or_negative_amount_fails(self, scripted_provider, amount):
        text = (
            '{"amount": ' + amount
            + ', "merchant": "Drogasil", "date": "2024-02-10", "category": "Farmácia"}'
        )
        provider = scripted_provider(receipt=text)

        with pytest.raises(ReceiptExtractionError):
            gateway.request_receipt_extraction(provider, b"img", "image/jpeg", CATEGORY_NAMES)

    def test_category_outside_vocabulary_fails(self, scripted_provider):
        provider = scripted_provider(receipt=self._payload(category="Farmácia"))

        with pytest.raises(ReceiptExtractionError):
            gateway.request_receipt_extraction(provider, b"img", "image/jpeg", ["Pet", "Auto"])

    @pytest.mark.parametrize("text", [None, "", "not json", "[]"])
    def test_empty_or_unparseable_response_fails(self, scripted_provider, text):
        provider = scripted_provider(receipt=text)

        with pytest.raises(ReceiptExtractionError):
            gateway.request_receipt_extraction(provider, b"img", "image/jpeg", CATEGORY_NAMES)

    def test_provider_error_propagates_as_extraction_error(self, scripted_provider):
        provider = scripted_provider(error=ConnectionError("offline"))

        with pytest.raises(ReceiptExtractionError) as excinfo:
            gateway.request_receipt_extraction(provider, b"img", "image/jpeg", CATEGORY_NAMES)

        assert isinstance(excinfo.value.__cause__, ConnectionError)

    def test_missing_provider_fails(self):
        with pytest.raises(ReceiptExtractionError):
            gateway.request_receipt_extraction(None, b"img", "image/jpeg", CATEGORY_NAMES)


def test_budget_snapshot_in_prompt_uses_category_names(scripted_provider):
    provider = scripted_provider(insights="[]")
    budgets = BudgetGoalSet.from_mapping({"Assinaturas": 908})

    gateway.request_insights(provider, [], budgets)

    assert '{"category": "Assinaturas", "limit": 908.0}' in provider.prompts[0]
