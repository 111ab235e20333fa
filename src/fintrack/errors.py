"""Exception hierarchy shared across FinTrack layers."""

from __future__ import annotations


class FinTrackError(Exception):
    """Base class for application errors."""


class TransactionValidationError(FinTrackError):
    """Raised by the data-entry boundary when a submission is rejected."""

    def __init__(self, errors: dict[str, list[str]]):
        self.errors = errors
        summary = "; ".join(
            f"{field}: {', '.join(messages)}" for field, messages in errors.items()
        )
        super().__init__(summary or "Invalid transaction")


class BudgetConfigurationError(FinTrackError):
    """Raised when a budget goal set violates its invariants."""


class GatewayError(FinTrackError):
    """Raised when the AI provider cannot serve a request."""


class ReceiptExtractionError(GatewayError):
    """Raised when a receipt image could not be turned into a draft."""


class GatewayBusyError(GatewayError):
    """Raised when a gateway request is already in flight."""
