from __future__ import annotations

import datetime as dt

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class ExpenseOut(BaseModel):
    model_config = ConfigDict(from_attributes=True, alias_generator=to_camel, populate_by_name=True)

    id: int
    amount: int
    category: str
    description: str
    date: dt.date
    idempotency_key: str | None = None
    created_at: dt.datetime
    updated_at: dt.datetime


class ExpenseEnvelope(BaseModel):
    success: bool = True
    data: ExpenseOut


class ExpenseListEnvelope(BaseModel):
    success: bool = True
    data: list[ExpenseOut]


class CategoryListEnvelope(BaseModel):
    success: bool = True
    data: list[str]


class Violation(BaseModel):
    field: str
    message: str


class ErrorEnvelope(BaseModel):
    success: bool = False
    errors: list[Violation] | None = None
    message: str | None = None
