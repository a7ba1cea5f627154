from __future__ import annotations

from datetime import date

import pytest

from expense_tracker.core.errors import ExpenseValidationError
from expense_tracker.domain.enums import CATEGORIES
from expense_tracker.domain.validation import validate_expense


def _valid(**overrides):
    payload = {
        "amount": 1250,
        "category": "Food",
        "description": "Lunch",
        "date": "2024-01-15",
        "idempotencyKey": "abc",
    }
    payload.update(overrides)
    return payload


def _fields(exc: ExpenseValidationError) -> set[str]:
    return {violation["field"] for violation in exc.violations}


def test_valid_payload_is_normalized() -> None:
    draft = validate_expense(_valid(description="  Lunch  "))
    assert draft.amount == 1250
    assert draft.category == "Food"
    assert draft.description == "Lunch"
    assert draft.date == date(2024, 1, 15)
    assert draft.idempotency_key == "abc"


def test_category_set_is_exactly_eight_names() -> None:
    assert CATEGORIES == (
        "Food",
        "Transport",
        "Entertainment",
        "Shopping",
        "Utilities",
        "Health",
        "Education",
        "Other",
    )


@pytest.mark.parametrize("amount", [0, -5, 12.5, "1250", True, None])
def test_rejects_bad_amounts(amount) -> None:
    with pytest.raises(ExpenseValidationError) as info:
        validate_expense(_valid(amount=amount))
    assert _fields(info.value) == {"amount"}
    assert "Amount must be a positive integer" in info.value.violations[0]["message"]


@pytest.mark.parametrize("category", ["food", "Groceries", "", None, 3])
def test_rejects_unknown_categories(category) -> None:
    with pytest.raises(ExpenseValidationError) as info:
        validate_expense(_valid(category=category))
    assert _fields(info.value) == {"category"}
    assert "Food, Transport" in info.value.violations[0]["message"]


def test_description_rules() -> None:
    with pytest.raises(ExpenseValidationError) as info:
        validate_expense(_valid(description="   "))
    assert info.value.violations[0]["message"] == "Description is required"

    with pytest.raises(ExpenseValidationError) as info:
        validate_expense(_valid(description="x" * 201))
    assert info.value.violations[0]["message"] == "Description cannot exceed 200 characters"

    assert validate_expense(_valid(description=" " + "x" * 200 + " ")).description == "x" * 200


@pytest.mark.parametrize("value", ["2024-02-30", "15/01/2024", "yesterday", "", 20240115])
def test_rejects_invalid_dates(value) -> None:
    with pytest.raises(ExpenseValidationError) as info:
        validate_expense(_valid(date=value))
    assert _fields(info.value) == {"date"}


def test_accepts_iso_timestamps() -> None:
    assert validate_expense(_valid(date="2024-01-15T10:30:00Z")).date == date(2024, 1, 15)
    assert validate_expense(_valid(date=date(2023, 12, 31))).date == date(2023, 12, 31)


def test_idempotency_key_is_optional_but_must_be_a_string() -> None:
    payload = _valid()
    del payload["idempotencyKey"]
    assert validate_expense(payload).idempotency_key is None
    assert validate_expense(_valid(idempotencyKey="   ")).idempotency_key is None

    with pytest.raises(ExpenseValidationError) as info:
        validate_expense(_valid(idempotencyKey=42))
    assert info.value.violations[0]["message"] == "Idempotency key must be a string"


def test_collects_every_violation() -> None:
    with pytest.raises(ExpenseValidationError) as info:
        validate_expense({"amount": -1, "category": "Nope", "description": "", "date": "bad"})
    assert _fields(info.value) == {"amount", "category", "description", "date"}


def test_rejects_non_object_payloads() -> None:
    with pytest.raises(ExpenseValidationError) as info:
        validate_expense(["not", "a", "dict"])
    assert _fields(info.value) == {"body"}


def test_idempotency_key_kept_exactly_as_sent() -> None:
    assert validate_expense(_valid(idempotencyKey=" abc ")).idempotency_key == " abc "
    assert validate_expense(_valid(idempotencyKey="")).idempotency_key is None
