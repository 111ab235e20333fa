"""Transaction entry form: the validation boundary in front of the store."""

from __future__ import annotations

import datetime as dt
from typing import Any, Mapping

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

from ..constants.categories import Category
from ..errors import TransactionValidationError
from ..models.transaction import TransactionDraft, TransactionType


class TransactionForm(BaseModel):
    """Form model for creating a transaction, manually or from a receipt draft."""

    model_config = ConfigDict(str_strip_whitespace=True)

    amount: float = Field(
        ge=0, allow_inf_nan=False, description="Non-negative amount; direction comes from type"
    )
    type: TransactionType = Field(default=TransactionType.EXPENSE)
    category: Category = Field(default=Category.OUTROS)
    description: str = Field(default="", max_length=255)
    date: dt.date = Field(default_factory=dt.date.today)

    @field_validator("amount", mode="before")
    @classmethod
    def require_amount(cls, value: Any) -> Any:
        """Reject blank submissions before numeric coercion."""

        if value is None or (isinstance(value, str) and not value.strip()):
            raise ValueError("Amount is required.")
        return value

    @field_validator("date", mode="before")
    @classmethod
    def default_blank_date(cls, value: Any) -> Any:
        if value is None or (isinstance(value, str) and not value.strip()):
            return dt.date.today()
        return value

    @model_validator(mode="after")
    def default_description(self) -> "TransactionForm":
        """Fall back to the category name when no description is given."""

        if not self.description:
            self.description = self.category.value
        return self

    def to_draft(self) -> TransactionDraft:
        return TransactionDraft(
            amount=self.amount,
            category=self.category,
            description=self.description,
            date=self.date,
            type=self.type,
        )


def _structured_errors(exc: ValidationError) -> dict[str, list[str]]:
    structured: dict[str, list[str]] = {}
    for error in exc.errors(include_url=False):
        loc = error.get("loc", ())
        key = str(loc[0]) if loc else "__root__"
        structured.setdefault(key, []).append(error.get("msg", "Invalid value"))
    return structured


def validate_transaction(data: Mapping[str, Any]) -> TransactionDraft:
    """Validate raw form input and return a draft ready for the store.

    Raises:
        TransactionValidationError: with field -> messages when input is rejected
    """

    try:
        form = TransactionForm.model_validate(dict(data))
    except ValidationError as exc:
        raise TransactionValidationError(_structured_errors(exc)) from exc
    return form.to_draft()


__all__ = ["TransactionForm", "validate_transaction"]
