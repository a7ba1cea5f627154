from __future__ import annotations

import datetime as dt
from typing import Any, Mapping

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator
from pydantic_core import PydanticCustomError

from expense_tracker.core.errors import ExpenseValidationError
from expense_tracker.domain.enums import CATEGORIES

DESCRIPTION_MAX_LENGTH = 200
IDEMPOTENCY_KEY_MAX_LENGTH = 255
# Largest value a 64-bit INTEGER column holds.
MAX_AMOUNT_CENTS = 2**63 - 1


def parse_iso_date(value: str) -> dt.date:
    """Accept ``YYYY-MM-DD`` or a full ISO 8601 timestamp and keep the calendar date."""
    text = value.strip()
    try:
        return dt.date.fromisoformat(text)
    except ValueError:
        return dt.datetime.fromisoformat(text).date()


class ExpenseDraft(BaseModel):
    """A create request that passed every field rule.

    Fields default to ``None`` and are validated anyway so that a missing
    field reports the same message as a malformed one.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    amount: int = Field(default=None, validate_default=True)
    category: str = Field(default=None, validate_default=True)
    description: str = Field(default=None, validate_default=True)
    date: dt.date = Field(default=None, validate_default=True)
    idempotency_key: str | None = Field(default=None, alias="idempotencyKey")

    @field_validator("amount", mode="before")
    @classmethod
    def check_amount(cls, value: Any) -> int:
        if isinstance(value, bool) or not isinstance(value, int) or not 1 <= value <= MAX_AMOUNT_CENTS:
            raise PydanticCustomError("amount", "Amount must be a positive integer (cents)")
        return value

    @field_validator("category", mode="before")
    @classmethod
    def check_category(cls, value: Any) -> str:
        if not isinstance(value, str) or value not in CATEGORIES:
            raise PydanticCustomError(
                "category",
                "Category must be one of: {choices}",
                {"choices": ", ".join(CATEGORIES)},
            )
        return value

    @field_validator("description", mode="before")
    @classmethod
    def check_description(cls, value: Any) -> str:
        text = value.strip() if isinstance(value, str) else ""
        if not text:
            raise PydanticCustomError("description", "Description is required")
        if len(text) > DESCRIPTION_MAX_LENGTH:
            raise PydanticCustomError(
                "description",
                "Description cannot exceed {limit} characters",
                {"limit": DESCRIPTION_MAX_LENGTH},
            )
        return text

    @field_validator("date", mode="before")
    @classmethod
    def check_date(cls, value: Any) -> dt.date:
        if isinstance(value, dt.datetime):
            return value.date()
        if isinstance(value, dt.date):
            return value
        if isinstance(value, str):
            try:
                return parse_iso_date(value)
            except ValueError:
                pass
        raise PydanticCustomError("date", "Date must be a valid ISO 8601 date string")

    @field_validator("idempotency_key", mode="before")
    @classmethod
    def check_idempotency_key(cls, value: Any) -> str | None:
        if value is None:
            return None
        if not isinstance(value, str):
            raise PydanticCustomError("idempotency_key", "Idempotency key must be a string")
        # Keys are matched byte for byte; only a blank key means "no key".
        if not value.strip():
            return None
        if len(value) > IDEMPOTENCY_KEY_MAX_LENGTH:
            raise PydanticCustomError(
                "idempotency_key",
                "Idempotency key cannot exceed {limit} characters",
                {"limit": IDEMPOTENCY_KEY_MAX_LENGTH},
            )
        return value


def violations_from(exc: ValidationError) -> list[dict[str, Any]]:
    violations = []
    for error in exc.errors():
        loc = error.get("loc") or ("body",)
        violations.append({"field": str(loc[-1]), "message": error["msg"]})
    return violations


def validate_expense(payload: Mapping[str, Any]) -> ExpenseDraft:
    """Check every field rule and report all failures together."""
    if not isinstance(payload, Mapping):
        raise ExpenseValidationError([{"field": "body", "message": "Request body must be a JSON object"}])
    try:
        return ExpenseDraft.model_validate(dict(payload))
    except ValidationError as exc:
        raise ExpenseValidationError(violations_from(exc)) from exc
