from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Body, Depends, Query, Response, status
from sqlalchemy.orm import Session

from expense_tracker.api.deps import get_db
from expense_tracker.api.schemas import ExpenseEnvelope, ExpenseListEnvelope, ExpenseOut
from expense_tracker.services.expenses import create_expense, list_expenses

router = APIRouter(prefix="/expenses", tags=["expenses"])


@router.post("", response_model=ExpenseEnvelope, status_code=status.HTTP_201_CREATED)
def add_expense(
    response: Response,
    payload: dict[str, Any] = Body(...),
    db: Session = Depends(get_db),
) -> ExpenseEnvelope:
    """201 for a new record, 200 when the idempotency key was already used. Same body either way."""
    result = create_expense(db, payload)
    if result.was_existing:
        response.status_code = status.HTTP_200_OK
    return ExpenseEnvelope(data=ExpenseOut.model_validate(result.expense))


@router.get("", response_model=ExpenseListEnvelope)
def get_expenses(
    category: str | None = Query(None),
    sort: str | None = Query(None),
    db: Session = Depends(get_db),
) -> ExpenseListEnvelope:
    expenses = list_expenses(db, category=category, sort=sort)
    return ExpenseListEnvelope(data=[ExpenseOut.model_validate(expense) for expense in expenses])
